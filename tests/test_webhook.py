from busticket.models import Ticket, Transaction

from conftest import captured_event, verify_payload


def _post_webhook(client, body: bytes, signature=None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["X-Razorpay-Signature"] = signature
    return client.post("/api/webhook", content=body, headers=headers)


def _status(db, ticket_id):
    db.expire_all()
    return db.query(Ticket).filter(Ticket.ticket_id == ticket_id).one().payment_status


def test_captured_event_marks_ticket_paid(client, create_order, verifier, notifier, db):
    order = create_order()
    body = captured_event(order["orderId"], "pay_hook_1")

    resp = _post_webhook(client, body, verifier.webhook_signature(body))

    assert resp.status_code == 200
    assert resp.json() == {"status": "OK"}

    db.expire_all()
    ticket = db.query(Ticket).filter(Ticket.ticket_id == order["ticketId"]).one()
    assert ticket.payment_status == "paid"
    assert ticket.gateway_payment_id == "pay_hook_1"
    assert ticket.qr_code_data == f"qr:{order['ticketId']}"
    txn = db.query(Transaction).filter(Transaction.gateway_order_id == order["orderId"]).one()
    assert txn.status == "completed"
    assert len(notifier.sent) == 1


def test_legacy_webhook_path_is_served(client, create_order, verifier, db):
    order = create_order()
    body = captured_event(order["orderId"])
    headers = {"Content-Type": "application/json", "X-Razorpay-Signature": verifier.webhook_signature(body)}

    resp = client.post("/api/razorpay-webhook", content=body, headers=headers)

    assert resp.status_code == 200
    assert _status(db, order["ticketId"]) == "paid"


def test_unrelated_event_is_acknowledged_and_ignored(client, create_order, verifier, notifier, db):
    order = create_order()
    body = captured_event(order["orderId"], event="payment.authorized")

    resp = _post_webhook(client, body, verifier.webhook_signature(body))

    assert resp.status_code == 200
    assert resp.json() == {"status": "OK"}
    assert _status(db, order["ticketId"]) == "pending"
    assert notifier.sent == []


def test_invalid_signature_is_ignored(client, create_order, db):
    order = create_order()
    body = captured_event(order["orderId"])

    resp = _post_webhook(client, body, "f" * 64)

    assert resp.status_code == 200
    assert _status(db, order["ticketId"]) == "pending"


def test_missing_signature_is_ignored(client, create_order, db):
    order = create_order()

    resp = _post_webhook(client, captured_event(order["orderId"]))

    assert resp.status_code == 200
    assert _status(db, order["ticketId"]) == "pending"


def test_unknown_order_is_acknowledged(client, verifier, notifier):
    body = captured_event("order_unknown")

    resp = _post_webhook(client, body, verifier.webhook_signature(body))

    assert resp.status_code == 200
    assert notifier.sent == []


def test_malformed_body_is_acknowledged(client, verifier):
    body = b"not json"

    resp = _post_webhook(client, body, verifier.webhook_signature(body))

    assert resp.status_code == 200


def test_webhook_after_callback_is_a_no_op(client, create_order, verifier, notifier, db):
    order = create_order()
    assert client.post("/api/verify-payment", json=verify_payload(order, verifier)).status_code == 200

    body = captured_event(order["orderId"], "pay_test_1")
    resp = _post_webhook(client, body, verifier.webhook_signature(body))

    assert resp.status_code == 200
    assert _status(db, order["ticketId"]) == "paid"
    assert len(notifier.sent) == 1
