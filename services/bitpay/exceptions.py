# services/bitpay/exceptions.py
"""
Error kinds surfaced by BitPay clients.

BitPayException covers transport, auth and validation failures. The two
subclasses let callers tell "unknown id" and "cancellation rejected" apart
from the generic case.
"""

from __future__ import annotations
from typing import Optional


class BitPayException(Exception):
    def __init__(self, message: str = "", code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message


class NotFoundException(BitPayException):
    """Invoice or refund id not known to the processor."""


class RefundCancellationException(BitPayException):
    """Processor refused to move a refund to 'canceled'."""
