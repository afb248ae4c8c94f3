# services/bitpay/registry.py
import os
from flask import current_app, has_app_context
from services.bitpay.constants import WEBHOOK_ENDPOINT
from services.bitpay.dummy_client import DummyClient
from services.bitpay.facade import BitPayFacade
from services.bitpay.webhook_url import resolve_webhook_url


def _cfg(key: str, default=None):
    v = os.environ.get(key)
    if v is not None:
        return v
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def _auto_populate_flags() -> list[str]:
    raw = _cfg("BITPAY_AUTO_POPULATE_WEBHOOK", "invoices")
    if raw is None:
        return []
    if isinstance(raw, str):
        return [p.strip() for p in raw.split(",") if p.strip()]
    return list(raw)


def make_client():
    name = (_cfg("BITPAY_CLIENT") or "dummy").lower()
    if name == "dummy":
        return DummyClient(base_url=_cfg("BITPAY_DUMMY_BASE_URL"))
    raise RuntimeError(f"Unknown BITPAY_CLIENT: {name}")


def get_client():
    """One client per app; created on first use."""
    ext = current_app.extensions
    if "bitpay_client" not in ext:
        ext["bitpay_client"] = make_client()
    return ext["bitpay_client"]


def get_facade() -> BitPayFacade:
    endpoint = _cfg("BITPAY_WEBHOOK_ENDPOINT") or WEBHOOK_ENDPOINT
    return BitPayFacade(
        get_client(),
        auto_populate=_auto_populate_flags(),
        webhook_url=lambda: resolve_webhook_url(endpoint),
    )
