# services/bitpay/facade.py
"""
BitPayFacade: one calling surface for BitPay invoices and refunds.

Every operation hands its arguments to the injected client unchanged. The
only thing added on top is the notification URL auto-population in
create_invoice. Business rules (refund eligibility, cancellation windows,
exchange rates) belong to the processor.

Typical use inside a request:

    bp = get_facade()
    inv = bp.new_invoice(Decimal("25.00"), "USD")
    inv.buyer = bp.new_buyer()
    inv = bp.create_invoice(inv)
"""

from __future__ import annotations
import logging
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from services.bitpay.base import BitPayClient, Buyer, Invoice, Refund
from services.bitpay.constants import WebhookAutoPopulate
from services.bitpay.exceptions import BitPayException
from services.bitpay.webhook_url import resolve_webhook_url
from services.metrics import BITPAY_CALLS, WEBHOOK_AUTOPOPULATE

log = logging.getLogger(__name__)


def _flag(v) -> str:
    return str(getattr(v, "value", v)).strip().lower()


class BitPayFacade:
    def __init__(self, client: BitPayClient,
                 auto_populate: Iterable = (),
                 webhook_url: Callable[[], Optional[str]] = resolve_webhook_url):
        """
        `auto_populate` holds WebhookAutoPopulate flags (or their string values).
        `webhook_url` must return the capture URL or None and must not raise:
        "route missing" or "no context" is None, as resolve_webhook_url does.
        create_invoice sends the invoice without a notification URL on None.
        """
        self.client = client
        self.auto_populate = frozenset(_flag(f) for f in auto_populate)
        self.webhook_url = webhook_url

    def _call(self, operation: str, fn, *args):
        log.debug("bitpay %s via %s", operation,
                  getattr(self.client, "name", type(self.client).__name__))
        try:
            result = fn(*args)
        except BitPayException as e:
            BITPAY_CALLS.labels(operation=operation, outcome="error").inc()
            log.info("bitpay %s failed: %s", operation, e)
            raise
        BITPAY_CALLS.labels(operation=operation, outcome="ok").inc()
        return result

    # ----- factories --------------------------------------------------------

    @staticmethod
    def new_invoice(price=None, currency: Optional[str] = None) -> Invoice:
        """
        Unfilled invoice request. `price` is the amount to bill, `currency`
        the three-letter code used to compute the crypto amount.
        """
        if price is not None and not isinstance(price, Decimal):
            price = Decimal(str(price))
        return Invoice(price=price, currency=currency)

    @staticmethod
    def new_buyer() -> Buyer:
        return Buyer()

    @staticmethod
    def new_refund() -> Refund:
        return Refund()

    # ----- invoices ---------------------------------------------------------

    def create_invoice(self, invoice: Invoice) -> Invoice:
        """
        Create an invoice. With 'invoices' in the auto-populate set and no
        notification_url on the request, the webhook capture URL is filled
        in first; if it can't be resolved the invoice goes out without one.
        """
        if not invoice.notification_url and WebhookAutoPopulate.INVOICES.value in self.auto_populate:
            url = self.webhook_url()
            if url:
                invoice.notification_url = url
                WEBHOOK_AUTOPOPULATE.labels(outcome="set").inc()
            else:
                WEBHOOK_AUTOPOPULATE.labels(outcome="unresolved").inc()
        return self._call("create_invoice", self.client.create_invoice, invoice)

    def get_invoice(self, invoice_id: str) -> Invoice:
        return self._call("get_invoice", self.client.get_invoice, invoice_id)

    def get_invoices(self, date_start: str, date_end: str, status: Optional[str] = None,
                     order_id: Optional[str] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None) -> List[Invoice]:
        """
        Invoices created between date_start and date_end ('YYYY-MM-DD'),
        optionally filtered by status / order id, paged by limit + offset.
        """
        return self._call("get_invoices", self.client.get_invoices,
                          date_start, date_end, status, order_id, limit, offset)

    def request_invoice_webhook(self, invoice_id: str, invoice_token: str) -> bool:
        return self._call("request_invoice_webhook", self.client.request_invoice_webhook,
                          invoice_id, invoice_token)

    # ----- refunds ----------------------------------------------------------

    def create_refund(self, invoice: Invoice, refund_email: str,
                      amount, currency: str) -> bool:
        """
        Request a refund on an invoice obtained via get_invoice.

        amount == 0 asks for the full invoice value; currency 'BTC' skips the
        exchange-rate calculation. False means the processor did not accept
        the request; re-query with get_refunds to be sure nothing was created.
        """
        return self._call("create_refund", self.client.create_refund,
                          invoice, refund_email, amount, currency)

    def get_refunds(self, invoice: Invoice) -> List[Refund]:
        return self._call("get_refunds", self.client.get_refunds, invoice)

    def get_refund(self, invoice: Invoice, refund_id: str) -> Refund:
        return self._call("get_refund", self.client.get_refund, invoice, refund_id)

    def cancel_refund(self, invoice_id: str, refund: Refund) -> bool:
        # RefundCancellationException when the processor refuses the transition
        return self._call("cancel_refund", self.client.cancel_refund, invoice_id, refund)
