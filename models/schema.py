# models/schema.py
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, String, Integer, DateTime, UniqueConstraint, Index
from models.base import Base


# --- BITPAY WEBHOOK LOG
# One row per (invoice, event code); replays of the same notification collapse.
class WebhookEvent(Base):
    __tablename__ = "bitpay_webhook_events"
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[str] = mapped_column(String, nullable=False)
    event_code: Mapped[int] = mapped_column(Integer, nullable=False)
    event_name: Mapped[Optional[str]] = mapped_column(String)
    invoice_status: Mapped[Optional[str]] = mapped_column(String)
    raw: Mapped[str] = mapped_column(Text, nullable=False)
    received_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False)
    __table_args__ = (
        UniqueConstraint("invoice_id", "event_code",
                         name="uq_bitpaywebhook_invoice_code"),
        Index("ix_bitpaywebhook_invoice", "invoice_id"),
    )
