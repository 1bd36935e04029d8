"""Unit tests for the notification waiter."""

import pytest

from deploykit.core.exceptions import NotificationTimeout, TaskFailed
from deploykit.models.notification import NotificationStatus
from deploykit.services.acquia import task_id_from_href
from deploykit.services.notifications import NotificationWaiter


class TestNotificationWaiter:
    """Tests for NotificationWaiter."""

    def test_completes_after_three_polls(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["pending", "pending", "completed"])

        notification = make_waiter(client).wait("n-1")

        assert notification.status == NotificationStatus.COMPLETED
        assert client.names().count("get_notification") == 3

    def test_failed_stops_polling(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["pending", "failed"])

        with pytest.raises(TaskFailed) as exc_info:
            make_waiter(client).wait("n-2")

        assert client.names().count("get_notification") == 2
        assert exc_info.value.task_id == "n-2"
        assert "n-2 failed" in exc_info.value.message

    def test_in_progress_is_not_terminal(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["in-progress", "completed"])

        make_waiter(client).wait("n-3")

        assert client.names().count("get_notification") == 2

    def test_unrecognized_status_keeps_polling(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["started", "completed"])

        notification = make_waiter(client).wait("n-6")

        assert notification.status == NotificationStatus.COMPLETED
        assert client.names().count("get_notification") == 2

    def test_zero_attempts_is_respected(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["completed"])

        with pytest.raises(NotificationTimeout):
            make_waiter(client, max_attempts=0).wait("n-7")

        assert client.calls == []

    def test_timeout_after_max_attempts(self, acquia_factory, make_waiter):
        client = acquia_factory(statuses=["pending"])

        with pytest.raises(NotificationTimeout) as exc_info:
            make_waiter(client, max_attempts=4).wait("n-4")

        assert exc_info.value.attempts == 4
        assert client.names().count("get_notification") == 4

    def test_sleeps_between_polls_only(self, acquia_factory):
        client = acquia_factory(statuses=["pending", "pending", "completed"])
        sleeps: list[float] = []

        NotificationWaiter(client, interval=5, max_attempts=10, sleep=sleeps.append).wait("n-5")

        assert sleeps == [5, 5]


class TestTaskIdFromHref:
    def test_basename(self):
        href = "https://cloud.acquia.com/api/notifications/8fdacf25-38e4-4621-b5de-e78638fe2ceb"
        assert task_id_from_href(href) == "8fdacf25-38e4-4621-b5de-e78638fe2ceb"

    def test_trailing_slash(self):
        assert task_id_from_href("https://cloud.acquia.com/api/notifications/abc/") == "abc"
