# services/bitpay/webhook_url.py
from __future__ import annotations
import logging
from typing import Optional

from flask import current_app, has_app_context, has_request_context, url_for
from werkzeug.routing import BuildError

from services.bitpay.constants import WEBHOOK_ENDPOINT

log = logging.getLogger(__name__)


def resolve_webhook_url(endpoint: str = WEBHOOK_ENDPOINT) -> Optional[str]:
    """
    Absolute URL of the webhook capture route, or None when it can't be built:
    no app context, no request context and no SERVER_NAME, or the route isn't
    registered (blueprint not mounted).
    """
    if not has_app_context():
        log.debug("webhook url: no app context")
        return None
    if not has_request_context() and not current_app.config.get("SERVER_NAME"):
        log.debug("webhook url: no request context and SERVER_NAME unset")
        return None
    try:
        return url_for(endpoint, _external=True)
    except BuildError:
        log.debug("webhook url: endpoint %r not registered", endpoint)
        return None
