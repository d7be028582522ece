"""Unit tests for notification template rendering."""

from billmate.models.communication import NotificationTemplate
from billmate.models.enums import NotificationType
from billmate.services.notification_service import DEFAULT_TEMPLATES, format_baht


def _template(**fields) -> NotificationTemplate:
    defaults = dict(DEFAULT_TEMPLATES[NotificationType.PAYMENT_REMINDER])
    defaults.update(fields)
    return NotificationTemplate(type=NotificationType.PAYMENT_REMINDER, **defaults)


def test_render_substitutes_known_placeholders():
    rendered = _template().render(
        {"room_number": "A101", "amount": "3,500.00", "due_date": "05/04/2026", "days_before": 5}
    )
    assert rendered["in_app_title"] == "แจ้งเตือนการชำระเงิน 5 วัน"
    assert "A101" in rendered["in_app_message"]
    assert "3,500.00" in rendered["in_app_message"]
    assert rendered["subject"].endswith("A101")


def test_render_leaves_unknown_placeholders():
    rendered = _template(in_app_message="ห้อง {{room_number}} โปรโมชัน {{promo}}").render({"room_number": "B2"})
    assert rendered["in_app_message"] == "ห้อง B2 โปรโมชัน {{promo}}"


def test_render_tolerates_spaces_inside_braces():
    rendered = _template(in_app_title="{{ days_before }} วัน").render({"days_before": 1})
    assert rendered["in_app_title"] == "1 วัน"


def test_every_type_has_default_wording():
    for notification_type in NotificationType:
        defaults = DEFAULT_TEMPLATES[notification_type]
        for field in ("name", "subject", "email_body", "in_app_title", "in_app_message"):
            assert defaults[field]


def test_format_baht_uses_thousands_separator():
    assert format_baht("3500") == "3,500.00"
    assert format_baht(1234.5) == "1,234.50"
