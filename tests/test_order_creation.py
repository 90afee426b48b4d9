from decimal import Decimal

import pytest

from busticket.exceptions import PaymentGatewayError
from busticket.models import Ticket, Transaction, User
from busticket.payments import calculate_fare, to_subunits


def test_fare_is_flat_per_passenger():
    assert calculate_fare(1) == Decimal("25")
    assert calculate_fare(3) == Decimal("75")
    assert to_subunits(calculate_fare(2)) == 5000


@pytest.mark.parametrize("passengers", [0, -1])
def test_fare_rejects_non_positive_passengers(passengers):
    with pytest.raises(ValueError):
        calculate_fare(passengers)


def test_subunits_reject_fractional_amounts():
    with pytest.raises(ValueError):
        to_subunits(Decimal("0.005"))


def test_create_order_records_pending_ticket_and_transaction(create_order, gateway, db):
    order = create_order(passengers=2)

    assert order["success"] is True
    assert order["amount"] == 5000
    assert order["currency"] == "INR"
    assert order["fareDetails"] == {"baseFare": 25.0, "passengers": 2, "totalFare": 50.0}
    assert order["ticketId"].startswith("TKT")

    assert len(gateway.calls) == 1
    call = gateway.calls[0]
    assert call["amount"] == 5000
    assert isinstance(call["amount"], int)
    assert call["receipt"] == f"bus_ticket_{order['ticketId']}"

    tickets = db.query(Ticket).all()
    transactions = db.query(Transaction).all()
    assert len(tickets) == 1
    assert len(transactions) == 1

    ticket, txn = tickets[0], transactions[0]
    assert ticket.ticket_id == order["ticketId"]
    assert ticket.payment_status == "pending"
    assert ticket.fare == Decimal("50")
    assert ticket.qr_code_data is None
    assert ticket.user_name == "Test Rider"
    assert txn.status == "pending"
    assert txn.type == "ticket_purchase"
    assert txn.gateway_order_id == ticket.gateway_order_id == order["orderId"]


def test_create_order_defaults_guest_contact(client, db):
    resp = client.post(
        "/api/create-order",
        json={"passengers": 1, "fromStop": "Shivajinagar", "toStop": "Jayanagar"},
    )
    assert resp.status_code == 200, resp.text

    ticket = db.query(Ticket).one()
    assert ticket.user_id is None
    assert ticket.user_name == "Guest"
    assert ticket.user_email == ""


def test_create_order_uses_registered_user_contact(create_order, db):
    user = User(name="Registered", email="reg@example.com", phone="9000000020")
    db.add(user)
    db.commit()

    order = create_order(passengers=1, userId=user.id, userName=None, userEmail=None, userPhone=None)

    assert order["user"]["email"] == "reg@example.com"
    ticket = db.query(Ticket).one()
    assert ticket.user_id == user.id
    assert ticket.user_phone == "9000000020"


def test_create_order_rejects_zero_passengers(client, gateway, db):
    resp = client.post(
        "/api/create-order",
        json={"passengers": 0, "fromStop": "Shivajinagar", "toStop": "Jayanagar"},
    )
    assert resp.status_code == 400
    assert gateway.calls == []
    assert db.query(Ticket).count() == 0


def test_create_order_rejects_unknown_user(client, gateway, db):
    resp = client.post(
        "/api/create-order",
        json={"passengers": 1, "fromStop": "Shivajinagar", "toStop": "Jayanagar", "userId": 999},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User not found"
    assert gateway.calls == []


def test_gateway_failure_writes_nothing(client, gateway, db):
    gateway.fail_with = PaymentGatewayError("Payment gateway unreachable: timeout")

    resp = client.post(
        "/api/create-order",
        json={"passengers": 2, "fromStop": "Shivajinagar", "toStop": "Jayanagar"},
    )

    assert resp.status_code == 502
    assert "Payment order creation failed" in resp.json()["detail"]
    assert db.query(Ticket).count() == 0
    assert db.query(Transaction).count() == 0
