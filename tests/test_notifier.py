from datetime import datetime
from decimal import Decimal

from busticket.tickets.notifier import EmailNotifier, dispatch_ticket_confirmation
from busticket.tickets.schemas import TicketConfirmation


def _confirmation(**overrides) -> TicketConfirmation:
    values = {
        "ticket_id": "TKTABC123",
        "user_name": "Test Rider",
        "user_email": "rider@example.com",
        "from_stop": "Majestic Bus Stand",
        "to_stop": "Electronic City",
        "passengers": 2,
        "fare": Decimal("50"),
        "booking_time": datetime(2024, 3, 5, 8, 30, 0),
    }
    values.update(overrides)
    return TicketConfirmation(**values)


def _notifier() -> EmailNotifier:
    return EmailNotifier(host="smtp.test", sender="tickets@busticket.test")


def _html(message) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


def test_html_body_escapes_rider_supplied_fields():
    link = '<a href="https://evil.test">Click to claim refund</a>'
    ticket = _confirmation(from_stop=link, to_stop="<b>Jayanagar</b>", user_name="<script>x</script>")

    body = _html(_notifier()._build_message(ticket, None))

    assert "<a href" not in body
    assert "<script>" not in body
    assert "<b>Jayanagar</b>" not in body
    assert "&lt;a href=&quot;https://evil.test&quot;&gt;Click to claim refund&lt;/a&gt;" in body
    assert "&lt;b&gt;Jayanagar&lt;/b&gt;" in body


def test_message_headers_and_plain_text():
    message = _notifier()._build_message(_confirmation(), None)

    assert message["To"] == "rider@example.com"
    assert message["From"] == "tickets@busticket.test"
    assert "TKTABC123" in message["Subject"]
    plain = message.get_body(preferencelist=("plain",)).get_content()
    assert "From: Majestic Bus Stand" in plain


def test_unconfigured_notifier_skips_delivery():
    assert EmailNotifier(host=None).send_ticket_confirmation(_confirmation(), None) is False


def test_missing_email_skips_delivery():
    assert _notifier().send_ticket_confirmation(_confirmation(user_email=""), None) is False


def test_dispatch_absorbs_delivery_errors():
    class BrokenNotifier:
        def send_ticket_confirmation(self, ticket, qr_code_base64):
            raise OSError("smtp down")

    dispatch_ticket_confirmation(BrokenNotifier(), _confirmation(), None)
