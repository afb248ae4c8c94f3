from decimal import Decimal

from flask import Flask

from app import create_app
from services.bitpay.registry import get_facade
from services.bitpay.webhook_url import resolve_webhook_url


def test_resolves_inside_request(app):
    with app.test_request_context("/"):
        assert resolve_webhook_url() == "http://localhost/bitpay/webhook"


def test_none_without_app_context():
    assert resolve_webhook_url() is None


def test_none_outside_request_without_server_name(app):
    with app.app_context():
        assert resolve_webhook_url() is None


def test_uses_server_name_outside_request():
    other = create_app({"TESTING": True, "SERVER_NAME": "pay.example.com"})
    with other.app_context():
        assert resolve_webhook_url() == "http://pay.example.com/bitpay/webhook"


def test_none_when_route_not_registered():
    bare = Flask("bare")
    with bare.test_request_context("/"):
        assert resolve_webhook_url() is None


def test_facade_from_app_fills_notification_url(app, dummy):
    with app.test_request_context("/", base_url="https://shop.example.com"):
        bp = get_facade()
        inv = bp.create_invoice(bp.new_invoice(Decimal("12.00"), "USD"))
    assert inv.notification_url == "https://shop.example.com/bitpay/webhook"
    assert dummy.get_invoice(inv.id).notification_url == inv.notification_url


def test_facade_from_app_without_request_sends_no_url(app, dummy):
    with app.app_context():
        bp = get_facade()
        inv = bp.create_invoice(bp.new_invoice(Decimal("12.00"), "USD"))
    assert inv.id and inv.notification_url is None


def test_facade_respects_disabled_flag(app, dummy):
    app.config["BITPAY_AUTO_POPULATE_WEBHOOK"] = ""
    try:
        with app.test_request_context("/"):
            bp = get_facade()
            inv = bp.create_invoice(bp.new_invoice(Decimal("1"), "USD"))
        assert inv.notification_url is None
    finally:
        app.config["BITPAY_AUTO_POPULATE_WEBHOOK"] = "invoices"


def test_default_lookup_feeds_facade_none_without_context(dummy):
    # outside any app context the lookup yields None and the invoice still goes out
    from services.bitpay.facade import BitPayFacade
    bp = BitPayFacade(dummy, auto_populate=["invoices"])
    inv = bp.create_invoice(bp.new_invoice(Decimal("3"), "USD"))
    assert inv.id and inv.notification_url is None
