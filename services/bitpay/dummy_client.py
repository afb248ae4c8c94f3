# services/bitpay/dummy_client.py
"""
A development-only BitPay client that keeps invoices and refunds in memory.
Useful to exercise invoice/refund flows without touching the real processor.

How it behaves:
- create_invoice(...) assigns an id, a merchant token and status 'new', and
  returns a copy; the caller's request object is left alone.
- get_invoice(...) is the merchant path: it returns the record with its token.
  Refunds are accepted only for invoices carrying the matching token and in a
  paid state; mark_paid(...) simulates the buyer paying.
- amount 0 on create_refund becomes a refund of the full invoice price.
- Nothing is sent over the network; notification_url is only stored.
"""

from __future__ import annotations
import copy
import os
import re
import secrets
import threading
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from services.bitpay.base import BitPayClient, Invoice, Refund
from services.bitpay.constants import InvoiceStatus, RefundStatus
from services.bitpay.exceptions import (
    BitPayException, NotFoundException, RefundCancellationException,
)

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_day(s: str, name: str) -> date:
    try:
        return date.fromisoformat(s)
    except (TypeError, ValueError):
        raise BitPayException(f"{name} must be YYYY-MM-DD, got {s!r}", code="000000")


def _decimal(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


class DummyClient(BitPayClient):
    name = "dummy"

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = (base_url or os.environ.get("BITPAY_DUMMY_BASE_URL")
                         or "https://bitpay.invalid").rstrip("/")
        self._lock = threading.Lock()
        self._invoices: Dict[str, Invoice] = {}
        self._refunds: Dict[str, List[Refund]] = {}
        self._seq = 0

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"dummy_{prefix}_{self._seq}"

    def _stored(self, invoice_id: Optional[str]) -> Invoice:
        inv = self._invoices.get(invoice_id or "")
        if inv is None:
            raise NotFoundException(f"Invoice {invoice_id!r} not found", code="010002")
        return inv

    def _merchant_invoice(self, invoice: Invoice) -> Invoice:
        stored = self._stored(invoice.id)
        if not invoice.token or invoice.token != stored.token:
            raise BitPayException(
                "Invoice must be retrieved using the merchant facade", code="010003")
        return stored

    # ----- invoices ---------------------------------------------------------

    def create_invoice(self, invoice: Invoice) -> Invoice:
        if invoice.price is None or _decimal(invoice.price) < 0:
            raise BitPayException("Invoice price must be a non-negative number", code="010001")
        if not invoice.currency or not _CURRENCY_RE.match(invoice.currency):
            raise BitPayException(f"Invalid currency {invoice.currency!r}", code="010001")

        rec = copy.deepcopy(invoice)
        with self._lock:
            rec.id = self._next_id("inv")
            rec.price = _decimal(invoice.price)
            rec.token = secrets.token_hex(16)
            rec.status = InvoiceStatus.NEW
            rec.url = f"{self.base_url}/i/{rec.id}"
            rec.amount_paid = Decimal("0")
            rec.exception_status = None
            rec.invoice_time = _now()
            self._invoices[rec.id] = rec
            self._refunds[rec.id] = []
        return copy.deepcopy(rec)

    def get_invoice(self, invoice_id: str) -> Invoice:
        with self._lock:
            return copy.deepcopy(self._stored(invoice_id))

    def get_invoices(self, date_start: str, date_end: str, status: Optional[str] = None,
                     order_id: Optional[str] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None) -> List[Invoice]:
        d0 = _parse_day(date_start, "dateStart")
        d1 = _parse_day(date_end, "dateEnd")
        with self._lock:
            rows = [
                inv for inv in self._invoices.values()
                if d0 <= inv.invoice_time.date() <= d1
                and (status is None or inv.status == status)
                and (order_id is None or inv.order_id == order_id)
            ]
            start = offset or 0
            page = rows[start:start + limit] if limit is not None else rows[start:]
            return copy.deepcopy(page)

    def request_invoice_webhook(self, invoice_id: str, invoice_token: str) -> bool:
        with self._lock:
            inv = self._stored(invoice_id)
            if invoice_token != inv.token:
                raise BitPayException("Invalid invoice token", code="010003")
            return inv.status in InvoiceStatus.NOTIFIED

    # ----- refunds ----------------------------------------------------------

    def create_refund(self, invoice: Invoice, refund_email: str,
                      amount, currency: str) -> bool:
        amount = _decimal(amount)
        if amount < 0:
            raise BitPayException("Refund amount must be >= 0", code="010001")
        if not currency or not _CURRENCY_RE.match(currency):
            raise BitPayException(f"Invalid currency {currency!r}", code="010001")

        with self._lock:
            stored = self._merchant_invoice(invoice)
            if stored.status not in InvoiceStatus.REFUNDABLE:
                return False
            if amount > stored.price:
                return False
            self._refunds[stored.id].append(Refund(
                id=self._next_id("ref"),
                invoice_id=stored.id,
                amount=stored.price if amount == 0 else amount,
                currency=currency,
                refund_email=refund_email,
                status=RefundStatus.PENDING,
                request_date=_now(),
            ))
        return True

    def get_refunds(self, invoice: Invoice) -> List[Refund]:
        with self._lock:
            stored = self._stored(invoice.id)
            return copy.deepcopy(self._refunds[stored.id])

    def get_refund(self, invoice: Invoice, refund_id: str) -> Refund:
        with self._lock:
            stored = self._stored(invoice.id)
            for r in self._refunds[stored.id]:
                if r.id == refund_id:
                    return copy.deepcopy(r)
        raise NotFoundException(
            f"Refund {refund_id!r} not found on invoice {invoice.id!r}", code="010002")

    def cancel_refund(self, invoice_id: str, refund: Refund) -> bool:
        with self._lock:
            self._stored(invoice_id)
            for r in self._refunds[invoice_id]:
                if r.id != refund.id:
                    continue
                if r.status not in RefundStatus.CANCELABLE:
                    raise RefundCancellationException(
                        f"Refund {r.id} is {r.status} and can't be canceled", code="010004")
                r.status = RefundStatus.CANCELED
                return True
        return False

    # ----- DEV ONLY ---------------------------------------------------------

    def mark_paid(self, invoice_id: str, status: str = InvoiceStatus.PAID) -> None:
        """Simulate the buyer paying the invoice in full."""
        with self._lock:
            inv = self._stored(invoice_id)
            inv.status = status
            inv.amount_paid = inv.price
