import json
import os
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from busticket import models  # noqa: E402,F401
from busticket.config import settings  # noqa: E402
from busticket.database import Base, get_db  # noqa: E402
from busticket.dependencies import (  # noqa: E402
    get_notifier, get_payment_gateway, get_qr_encoder, get_signature_verifier
)
from busticket.main import app  # noqa: E402
from busticket.payments.gateway import GatewayOrder  # noqa: E402
from busticket.payments.signatures import PaymentSignatureVerifier  # noqa: E402


class FakeGateway:
    """
    Stands in for the Razorpay Orders API.

    Records every order request and hands out sequential order ids; set
    ``fail_with`` to make the next calls raise.
    """

    def __init__(self):
        self.calls: List[Dict] = []
        self.fail_with: Optional[Exception] = None

    def create_order(self, amount, currency, receipt, notes=None) -> GatewayOrder:
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        if self.fail_with is not None:
            raise self.fail_with
        return GatewayOrder(id=f"order_test_{len(self.calls)}", amount=amount, currency=currency, receipt=receipt)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_ticket_confirmation(self, ticket, qr_code_base64):
        self.sent.append((ticket, qr_code_base64))
        return True


class StubQRCodeEncoder:
    def encode(self, data: str) -> str:
        return f"qr:{data}"


@pytest.fixture()
def engine():
    """
    Isolated in-memory SQLite engine shared by every session in a test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def verifier():
    return PaymentSignatureVerifier(settings.RAZORPAY_KEY_SECRET, settings.webhook_secret)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def qr_encoder():
    return StubQRCodeEncoder()


@pytest.fixture()
def client(session_factory, gateway, verifier, notifier, qr_encoder):
    """
    TestClient with the database and every external collaborator swapped out.

    Used without a context manager so the lifespan (which touches the
    configured database) does not run.
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_signature_verifier] = lambda: verifier
    app.dependency_overrides[get_qr_encoder] = lambda: qr_encoder
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture()
def create_order(client):
    """
    Helper posting a create-order request and returning the JSON body.
    """

    def _create(passengers: int = 2, **extra) -> Dict:
        payload = {
            "passengers": passengers,
            "fromStop": "Majestic Bus Stand",
            "toStop": "Electronic City",
            "userName": "Test Rider",
            "userEmail": "rider@example.com",
            "userPhone": "9000000001",
        }
        payload.update(extra)
        resp = client.post("/api/create-order", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _create


def verify_payload(order: Dict, verifier: PaymentSignatureVerifier, payment_id: str = "pay_test_1",
                   signature: Optional[str] = None) -> Dict:
    return {
        "razorpay_order_id": order["orderId"],
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature or verifier.payment_signature(order["orderId"], payment_id),
        "ticketId": order["ticketId"],
    }


def captured_event(order_id: str, payment_id: str = "pay_test_1", event: str = "payment.captured") -> bytes:
    return json.dumps({
        "event": event,
        "payload": {"payment": {"entity": {"id": payment_id, "order_id": order_id, "status": "captured"}}},
    }).encode()
