"""
Notification dispatcher - fans a batch of canonical notifications out to their queues.

All publishes are started together and awaited as a group. Every publish runs
to completion; if any of them failed, the first failure in batch order is
raised once the group has settled. Nothing is retried here and publishes
that already succeeded are not rolled back.
"""
import asyncio
import logging
from typing import Mapping, Sequence

from event_proxy.exceptions import DispatchError
from event_proxy.schemas.notifications import CanonicalNotification, to_message
from event_proxy.services.queue import QueuePublisher

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes notifications to queues by notificationType."""

    def __init__(self, publisher: QueuePublisher, queues: Mapping[str, str]):
        self._publisher = publisher
        self._queues = queues

    def queue_for(self, notification: CanonicalNotification) -> str:
        queue_name = self._queues.get(notification.notificationType)
        if not queue_name:
            raise DispatchError(notification.notificationType, None, "No queue configured")
        return queue_name

    async def send(self, notification: CanonicalNotification) -> str:
        """Publish one notification. Returns its notificationType on success."""
        notification_type = notification.notificationType
        queue_name = None
        message = to_message(notification)
        try:
            queue_name = self.queue_for(notification)
            await self._publisher.publish(queue_name, message)
        except Exception as e:
            logger.error(
                "Failed to send event: %s",
                message,
                exc_info=True,
                extra={"notification_type": notification_type, "queue": queue_name},
            )
            if isinstance(e, DispatchError):
                raise
            raise DispatchError(notification_type, queue_name) from e

        logger.info(
            "Sent: %s",
            notification_type,
            extra={"notification_type": notification_type, "queue": queue_name},
        )
        return notification_type

    async def dispatch(self, notifications: Sequence[CanonicalNotification]) -> list[str]:
        """
        Publish every notification concurrently.

        Returns the notificationType of each published item, in batch order.
        Raises DispatchError if any publish failed.
        """
        if not notifications:
            return []

        results = await asyncio.gather(
            *(self.send(notification) for notification in notifications),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.warning(
                "Dispatch failed for %d of %d notifications",
                len(failures), len(results),
            )
            raise failures[0]

        return list(results)
