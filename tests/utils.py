# tests/utils.py
import copy
from decimal import Decimal

from services.bitpay.base import Invoice, Refund
from services.bitpay.exceptions import NotFoundException


class RecordingClient:
    """Stub processor: records every call and answers from canned data."""
    name = "recording"

    def __init__(self, invoices=None, refunds=None):
        self.calls = []
        self.invoices = invoices if invoices is not None else []
        self.refunds = list(refunds or [])

    def create_invoice(self, invoice):
        self.calls.append(("create_invoice", copy.deepcopy(invoice)))
        out = copy.deepcopy(invoice)
        out.id, out.status, out.token = "inv_rec_1", "new", "tok"
        return out

    def get_invoice(self, invoice_id):
        self.calls.append(("get_invoice", invoice_id))
        for inv in self.invoices:
            if inv.id == invoice_id:
                return inv
        raise NotFoundException(f"Invoice {invoice_id!r} not found")

    def get_invoices(self, date_start, date_end, status=None, order_id=None, limit=None, offset=None):
        self.calls.append(("get_invoices", (date_start, date_end, status, order_id, limit, offset)))
        return self.invoices

    def create_refund(self, invoice, refund_email, amount, currency):
        self.calls.append(("create_refund", (invoice, refund_email, amount, currency)))
        return True

    def get_refunds(self, invoice):
        self.calls.append(("get_refunds", invoice))
        return self.refunds

    def get_refund(self, invoice, refund_id):
        self.calls.append(("get_refund", (invoice, refund_id)))
        return self.refunds[0]

    def cancel_refund(self, invoice_id, refund):
        self.calls.append(("cancel_refund", (invoice_id, refund)))
        return False

    def request_invoice_webhook(self, invoice_id, invoice_token):
        self.calls.append(("request_invoice_webhook", (invoice_id, invoice_token)))
        return True


def paid_invoice(dummy, price="50.00", currency="USD", **kw):
    """Create an invoice on the dummy processor, pay it, return the merchant copy."""
    inv = dummy.create_invoice(Invoice(price=Decimal(price), currency=currency, **kw))
    dummy.mark_paid(inv.id)
    return dummy.get_invoice(inv.id)


def sample_refund():
    return Refund(id="ref_1", invoice_id="inv_1", amount=Decimal("5"), currency="USD", status="pending")
