# services/bitpay/constants.py
from __future__ import annotations
from enum import Enum

class WebhookAutoPopulate(str, Enum):
    """Resource types that may get their notification URL filled from routing."""
    INVOICES = "invoices"
    RECIPIENTS = "recipients"
    PAYOUTS = "payouts"

# Endpoint of the capture route in controllers/webhooks.py
WEBHOOK_ENDPOINT = "bitpay.webhook_capture"

class InvoiceStatus:
    NEW = "new"
    PAID = "paid"
    CONFIRMED = "confirmed"
    COMPLETE = "complete"
    EXPIRED = "expired"
    INVALID = "invalid"

    # refunds are only accepted once money has arrived
    REFUNDABLE = (PAID, CONFIRMED, COMPLETE)
    # the processor only resends webhooks for statuses it has notified about
    NOTIFIED = (PAID, CONFIRMED, COMPLETE, EXPIRED, INVALID)

class RefundStatus:
    PREVIEW = "preview"
    CREATED = "created"
    PENDING = "pending"
    CANCELED = "canceled"
    SUCCESS = "success"

    CANCELABLE = (PREVIEW, CREATED, PENDING)


# Invoice webhook event names BitPay sends; anything else is reported as "other"
INVOICE_WEBHOOK_EVENTS = frozenset({
    "invoice_paidInFull",
    "invoice_expired",
    "invoice_confirmed",
    "invoice_completed",
    "invoice_failedToConfirm",
    "invoice_declined",
    "invoice_refundComplete",
    "invoice_manuallyNotified",
})

# Event codes are small positive ints (1003 = paidInFull)
MAX_EVENT_CODE = 2**31 - 1
