# services/bitpay/base.py
"""
Request/record types + the client interface for BitPay invoices and refunds.
Clients must implement BitPayClient.

The same Invoice type is used for the request (price, currency, urls, buyer)
and for the record the processor returns (id, token, status, amounts), the way
the BitPay SDK models it. Processor-owned fields are never set by this app.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Protocol


@dataclass
class Buyer:
    name: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    locality: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notify: bool = False


@dataclass
class Invoice:
    price: Optional[Decimal] = None
    currency: Optional[str] = None        # ISO 4217, e.g. 'USD'
    order_id: Optional[str] = None
    item_desc: Optional[str] = None
    notification_url: Optional[str] = None  # webhook target
    notification_email: Optional[str] = None
    redirect_url: Optional[str] = None
    buyer: Optional[Buyer] = None

    # --- processor-owned ---
    id: Optional[str] = None
    token: Optional[str] = None           # merchant resource token
    status: Optional[str] = None          # see constants.InvoiceStatus
    url: Optional[str] = None             # hosted checkout
    amount_paid: Optional[Decimal] = None
    exception_status: Optional[str] = None
    invoice_time: Optional[datetime] = None


@dataclass
class Refund:
    id: Optional[str] = None
    invoice_id: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    refund_email: Optional[str] = None
    status: Optional[str] = None          # see constants.RefundStatus
    request_date: Optional[datetime] = None


class BitPayClient(Protocol):
    name: str

    def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create the invoice and return the processor's record for it."""

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Merchant-scoped lookup. Raise NotFoundException for unknown ids."""

    def get_invoices(self, date_start: str, date_end: str, status: Optional[str] = None,
                     order_id: Optional[str] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None) -> List[Invoice]:
        """Dates are 'YYYY-MM-DD'. Order is whatever the processor returns."""

    def create_refund(self, invoice: Invoice, refund_email: str,
                      amount: Decimal, currency: str) -> bool:
        """
        Request a refund. amount == 0 means the full invoice value.
        `invoice` must come from get_invoice (merchant scope).
        """

    def get_refunds(self, invoice: Invoice) -> List[Refund]:
        ...

    def get_refund(self, invoice: Invoice, refund_id: str) -> Refund:
        ...

    def cancel_refund(self, invoice_id: str, refund: Refund) -> bool:
        """Raise RefundCancellationException if the refund can't be canceled."""

    def request_invoice_webhook(self, invoice_id: str, invoice_token: str) -> bool:
        """Ask the processor to resend the last webhook for the invoice."""
