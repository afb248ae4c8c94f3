# tests/conftest.py
import os
import pytest
from app import create_app
from models.base import Base, init_engine_and_session
from services.bitpay.dummy_client import DummyClient


@pytest.fixture(scope="session", autouse=True)
def _set_env(tmp_path_factory):
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("METRICS_ENABLED", "0")
    os.environ.setdefault("AUTO_CREATE_SCHEMA", "1")
    db_file = tmp_path_factory.mktemp("db") / "webhooks.sqlite3"
    os.environ.setdefault("DATABASE_URL", f"sqlite:///{db_file}")
    yield


@pytest.fixture(scope="session")
def app(_set_env):
    return create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})


@pytest.fixture(scope="session")
def db_engine(app):
    engine, _Session = init_engine_and_session()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(autouse=True)
def _db_clean(db_engine):
    with db_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def dummy(app):
    # fresh in-memory processor per test, installed as the app's client
    c = DummyClient(base_url="https://bitpay.test")
    app.extensions["bitpay_client"] = c
    yield c
    app.extensions.pop("bitpay_client", None)
