# services/metrics.py
from __future__ import annotations
import os

os.environ.setdefault("PROMETHEUS_DISABLE_CREATED_SERIES", "1")

from prometheus_client import (  # noqa: E402
    Counter, Histogram, CollectorRegistry,
    generate_latest, CONTENT_TYPE_LATEST,
)

# Use a DEDICATED registry so only our app metrics show up
APP_REGISTRY = CollectorRegistry(auto_describe=True)

# --- Generic HTTP metrics (bind to our registry) ---
REQUEST_COUNT = Counter(
    "http_requests_total", "HTTP requests total",
    ["method", "endpoint", "status"], registry=APP_REGISTRY
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Request latency (seconds)",
    ["endpoint", "method"], registry=APP_REGISTRY,
)

# --- BitPay client calls ---
BITPAY_CALLS = Counter(
    "bitpay_client_calls_total", "Calls delegated to the BitPay client",
    ["operation", "outcome"], registry=APP_REGISTRY
)
WEBHOOK_AUTOPOPULATE = Counter(
    "bitpay_webhook_autopopulate_total", "Notification URL auto-population attempts",
    ["outcome"], registry=APP_REGISTRY
)

# --- Webhook ---
WEBHOOK_EVENTS = Counter(
    "bitpay_webhook_events_total", "Webhook events", ["event", "outcome"], registry=APP_REGISTRY
)


def init_app(app):
    @app.get("/metrics")
    def metrics():
        data = generate_latest(APP_REGISTRY)
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    # --- pre-warm labeled series so dashboards don't say "No data" ---
    for outcome in ("set", "unresolved"):
        WEBHOOK_AUTOPOPULATE.labels(outcome=outcome).inc(0)
    WEBHOOK_EVENTS.labels(event="invoice_paidInFull", outcome="ok").inc(0)
