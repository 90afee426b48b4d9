from datetime import datetime, timezone

from busticket.tickets.qr import QRCodeEncoder
from busticket.tickets.receipt import format_booking_time

from conftest import verify_payload


def test_unknown_ticket_returns_404(client):
    resp = client.get("/api/ticket/TKTDOESNOTEXIST")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Ticket not found"


def test_pending_ticket_has_no_qr(client, create_order):
    order = create_order(passengers=3)

    resp = client.get(f"/api/ticket/{order['ticketId']}")

    assert resp.status_code == 200
    ticket = resp.json()["ticket"]
    assert ticket["paymentStatus"] == "pending"
    assert ticket["qrCode"] is None
    assert ticket["fare"] == 75.0
    assert ticket["passengers"] == 3
    assert ticket["userName"] == "Test Rider"


def test_paid_ticket_exposes_qr(client, create_order, verifier):
    order = create_order()
    client.post("/api/verify-payment", json=verify_payload(order, verifier))

    ticket = client.get(f"/api/ticket/{order['ticketId']}").json()["ticket"]

    assert ticket["paymentStatus"] == "paid"
    assert ticket["qrCode"] == f"qr:{order['ticketId']}"


def test_download_renders_pdf(client, create_order):
    order = create_order()

    resp = client.get(f"/api/ticket/download/{order['ticketId']}")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


def test_download_unknown_ticket_returns_404(client):
    assert client.get("/api/ticket/download/TKTDOESNOTEXIST").status_code == 404


def test_qr_encoder_produces_png():
    import base64

    encoded = QRCodeEncoder().encode("TKTABC123")

    assert base64.b64decode(encoded).startswith(b"\x89PNG")


def test_booking_time_is_shown_in_rider_timezone():
    # Stored values are UTC; riders see Indian Standard Time
    assert format_booking_time(datetime(2024, 3, 5, 14, 7, 9)) == "05/03/2024, 07:37:09 pm IST"
    assert format_booking_time(datetime(2024, 3, 5, 20, 0, 0, tzinfo=timezone.utc)) == "06/03/2024, 01:30:00 am IST"
    assert format_booking_time(datetime(2024, 3, 5, 14, 7, 9), tz_name="UTC") == "05/03/2024, 02:07:09 pm UTC"
    assert format_booking_time(None) == "-"
