"""Tests for notification message composition."""

from datetime import datetime, timezone

import pytest

from taskmail.config import SMTPSettings
from taskmail.email.composer import compose, task_status
from taskmail.email.models import NotificationRequest

SENT_AT = datetime(2026, 1, 5, 10, 0, 0, tzinfo=timezone.utc)


def _request(reason: str, title: str = "Pay invoice") -> NotificationRequest:
    return NotificationRequest(
        task_title=title,
        recipient_address="bob@example.com",
        reason=reason,
    )


class TestTaskStatus:
    @pytest.mark.parametrize("reason", ["created", "Task Created", "CREATED"])
    def test_creation_reason_is_new(self, reason: str) -> None:
        assert task_status(reason) == "New"

    @pytest.mark.parametrize("reason", ["updated", "reminder", ""])
    def test_other_reasons_are_updated(self, reason: str) -> None:
        assert task_status(reason) == "Updated"


class TestCompose:
    def test_created_message(self, smtp_settings: SMTPSettings) -> None:
        message = compose(_request("created", "Write report"), smtp_settings, sent_at=SENT_AT)

        assert message.subject == "created: Write report"
        assert message.body == (
            "Task: Write report\nStatus: New\nSent at: 2026-01-05 10:00:00 UTC\n"
        )

    def test_reminder_message(self, smtp_settings: SMTPSettings) -> None:
        message = compose(_request("reminder"), smtp_settings, sent_at=SENT_AT)

        assert message.subject == "reminder: Pay invoice"
        assert "Status: Updated" in message.body
        assert "Sent at:" in message.body

    def test_sender_and_recipient(self, smtp_settings: SMTPSettings) -> None:
        message = compose(_request("updated"), smtp_settings, sent_at=SENT_AT)

        assert message.from_name == "Task Tracker"
        assert message.from_address == "tasks@example.com"
        assert message.to_address == "bob@example.com"

    def test_is_deterministic_for_fixed_time(self, smtp_settings: SMTPSettings) -> None:
        first = compose(_request("updated"), smtp_settings, sent_at=SENT_AT)
        second = compose(_request("updated"), smtp_settings, sent_at=SENT_AT)
        assert first == second

    def test_naive_timestamp_has_no_zone_suffix(self, smtp_settings: SMTPSettings) -> None:
        message = compose(
            _request("updated"), smtp_settings, sent_at=datetime(2026, 1, 5, 10, 0, 0)
        )
        assert "Sent at: 2026-01-05 10:00:00\n" in message.body

    def test_defaults_to_current_time(self, smtp_settings: SMTPSettings) -> None:
        message = compose(_request("updated"), smtp_settings)
        assert "UTC" in message.body

    def test_does_not_validate_recipient(self, smtp_settings: SMTPSettings) -> None:
        request = NotificationRequest(
            task_title="Pay invoice", recipient_address="not-an-address", reason="created"
        )
        assert compose(request, smtp_settings, sent_at=SENT_AT).to_address == "not-an-address"
