import json
import logging

import pytest

from busticket.config import Settings
from busticket.logging_config import JsonFormatter


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["paymentGateway"] == "Razorpay"


def test_example_secret_refused_in_production():
    settings = Settings(ENVIRONMENT="production", RAZORPAY_KEY_SECRET="example_secret")

    with pytest.raises(RuntimeError):
        settings.enforce_gateway_secret_baseline()

    Settings(ENVIRONMENT="production", RAZORPAY_KEY_SECRET="live_secret").enforce_gateway_secret_baseline()
    Settings(ENVIRONMENT="development", RAZORPAY_KEY_SECRET="example_secret").enforce_gateway_secret_baseline()


def test_webhook_secret_falls_back_to_key_secret():
    assert Settings(RAZORPAY_KEY_SECRET="k").webhook_secret == "k"
    assert Settings(RAZORPAY_KEY_SECRET="k", RAZORPAY_WEBHOOK_SECRET="w").webhook_secret == "w"


def test_json_log_records_carry_ticket_context():
    record = logging.LogRecord("busticket.payments", logging.INFO, __file__, 1, "Ticket %s moved to %s",
                               ("TKT1", "paid"), None)
    record.ticket_id = "TKT1"
    record.payment_id = "pay_1"

    data = json.loads(JsonFormatter(service="Bus API", environment="test").format(record))

    assert data["message"] == "Ticket TKT1 moved to paid"
    assert data["service"] == "Bus API"
    assert data["env"] == "test"
    assert data["ticket_id"] == "TKT1"
    assert data["payment_id"] == "pay_1"
    assert "order_id" not in data
    assert data["time"].endswith("+00:00")
