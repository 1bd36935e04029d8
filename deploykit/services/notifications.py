"""Waiting on long-running cloud tasks."""

import time
from typing import Callable, Protocol

from deploykit.config import settings
from deploykit.core.exceptions import NotificationTimeout, TaskFailed
from deploykit.models.notification import Notification, NotificationStatus
from deploykit.utils.logging import get_logger


class NotificationSource(Protocol):
    def get_notification(self, uuid: str) -> Notification: ...


class NotificationWaiter:
    """Poll a notification until it completes, fails or runs out of attempts."""

    def __init__(
        self,
        client: NotificationSource,
        interval: float | None = None,
        max_attempts: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.interval = settings.poll_interval if interval is None else interval
        self.max_attempts = settings.notification_max_attempts if max_attempts is None else max_attempts
        self.sleep = sleep
        self.logger = get_logger("notifications")

    def wait(self, task_id: str) -> Notification:
        """Block until ``task_id`` reaches a terminal status.

        Returns:
            The completed notification.

        Raises:
            TaskFailed: The task finished with ``failed``. Never retried.
            NotificationTimeout: ``max_attempts`` polls came back non-terminal.
        """
        for attempt in range(1, self.max_attempts + 1):
            notification = self.client.get_notification(task_id)

            if notification.status == NotificationStatus.COMPLETED:
                self.logger.info(
                    "notification.completed",
                    description=notification.description,
                    task_id=task_id,
                    attempts=attempt,
                )
                return notification

            if notification.status == NotificationStatus.FAILED:
                self.logger.error(
                    "notification.failed",
                    description=notification.description,
                    task_id=task_id,
                )
                raise TaskFailed(task_id, notification.description)

            if attempt < self.max_attempts:
                self.logger.info(
                    "notification.waiting",
                    description=notification.description,
                    task_id=task_id,
                    recheck_in=self.interval,
                )
                self.sleep(self.interval)

        raise NotificationTimeout(task_id, self.max_attempts)
