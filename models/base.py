# models/base.py
"""
Engine/session plumbing for the BitPay webhook log (models/webhook_store.py).

DATABASE_URL picks the backend: Postgres in deployment, a SQLite file in
tests. Tables are created by create_app() when AUTO_CREATE_SCHEMA is on.
"""
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine
from contextlib import contextmanager
import os


class Base(DeclarativeBase):
    pass


def make_engine_from_env():
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL not set (needed for the webhook log)")
    return create_engine(url, pool_pre_ping=True, future=True)


# One engine per process, built on first use
_Engine = None
_SessionFactory = None


def init_engine_and_session():
    """Idempotently init engine + session factory and return them."""
    global _Engine, _SessionFactory
    if _Engine is None:
        _Engine = make_engine_from_env()
        _SessionFactory = sessionmaker(
            bind=_Engine,
            autoflush=False,
            future=True,
            expire_on_commit=False,  # webhook rows are read after the scope closes
        )
    return _Engine, _SessionFactory


@contextmanager
def session_scope():
    """One transaction per webhook write/read; rolls back on any error."""
    _, factory = init_engine_and_session()
    s = factory()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
