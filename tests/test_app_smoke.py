import pytest

from models.base import make_engine_from_env


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_readyz_talks_to_db(client):
    r = client.get("/readyz")
    assert r.status_code == 200


def test_unknown_path_is_json_404(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.get_json()["path"] == "/nope"


def test_metrics_endpoint_when_enabled(monkeypatch):
    from app import create_app
    monkeypatch.setenv("METRICS_ENABLED", "1")
    app = create_app({"TESTING": True})
    r = app.test_client().get("/metrics")
    assert r.status_code == 200
    assert b"bitpay_webhook_autopopulate_total" in r.data


def test_missing_database_url_names_the_webhook_log(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="webhook log"):
        make_engine_from_env()
