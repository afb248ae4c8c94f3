# models/webhook_store.py (SQLAlchemy)
from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from models.base import session_scope
from models.schema import WebhookEvent


def record_webhook_event(invoice_id: str, event_code: int, event_name: Optional[str],
                         invoice_status: Optional[str], raw_payload: dict) -> Tuple[int, bool]:
    """
    Store a BitPay notification. Returns (row id, created); a replay of an
    already stored (invoice_id, event_code) returns the existing id and False.
    """
    raw_text = json.dumps(raw_payload, ensure_ascii=False,
                          separators=(",", ":"), default=str)
    with session_scope() as s:
        try:
            e = WebhookEvent(
                invoice_id=invoice_id, event_code=event_code, event_name=event_name,
                invoice_status=invoice_status, raw=raw_text,
                received_at=datetime.now(timezone.utc),
            )
            s.add(e)
            s.flush()
            return e.id, True
        except IntegrityError:
            s.rollback()
            row = s.execute(
                select(WebhookEvent.id).where(
                    (WebhookEvent.invoice_id == invoice_id) & (
                        WebhookEvent.event_code == event_code)
                )
            ).first()
            return (int(row[0]) if row else 0), False


def list_webhook_events(invoice_id: str) -> list[dict]:
    with session_scope() as s:
        rows = s.execute(
            select(WebhookEvent)
            .where(WebhookEvent.invoice_id == invoice_id)
            .order_by(WebhookEvent.id)
        ).scalars().all()
        return [{c: getattr(e, c) for c in ("id", "invoice_id", "event_code", "event_name", "invoice_status", "received_at")}
                for e in rows]
