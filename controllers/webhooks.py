# controllers/webhooks.py
from __future__ import annotations
from flask import Blueprint, request, abort, current_app

from models.webhook_store import record_webhook_event
from services.bitpay.constants import INVOICE_WEBHOOK_EVENTS, MAX_EVENT_CODE
from services.metrics import WEBHOOK_EVENTS

bitpay_bp = Blueprint("bitpay", __name__)


def _event_code(v) -> int | None:
    # bool is an int subclass; BitPay never sends one
    if isinstance(v, bool):
        return None
    try:
        code = int(v)
    except (TypeError, ValueError, OverflowError):
        return None
    return code if 0 < code <= MAX_EVENT_CODE else None


def _malformed():
    WEBHOOK_EVENTS.labels(event="other", outcome="malformed").inc()
    abort(400)


# ----- BitPay invoice notifications (no auth, CSRF-exempt in app.py) -----

@bitpay_bp.post("/bitpay/webhook")
def webhook_capture():
    """
    Target of the auto-populated notification URL. Stores each
    (invoice, event code) once; replays are acknowledged without a new row.
    Payload: {"event": {"code": 1003, "name": "invoice_paidInFull"}, "data": {"id": ..., "status": ...}}
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        _malformed()

    event = payload.get("event")
    data = payload.get("data")
    if not isinstance(event, dict) or not isinstance(data, dict):
        _malformed()

    invoice_id = data.get("id")
    status = data.get("status")
    name = event.get("name")
    code = _event_code(event.get("code"))
    if (code is None or not isinstance(invoice_id, str) or not invoice_id
            or not isinstance(status, (str, type(None)))
            or not isinstance(name, (str, type(None)))):
        _malformed()

    eid, created = record_webhook_event(invoice_id, code, name, status, payload)
    # label values are a fixed set; the raw name only goes to the log
    label = name if name in INVOICE_WEBHOOK_EVENTS else "other"
    WEBHOOK_EVENTS.labels(event=label, outcome="ok" if created else "replay").inc()
    current_app.logger.info("bitpay webhook %s (%s) for invoice %s (row %s%s)",
                            name, code, invoice_id, eid, "" if created else ", replay")
    return "", 200
