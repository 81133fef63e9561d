"""Hands finished message lists to the notifier."""

import logging
import threading
from typing import Dict, Sequence

from lineagehook.notification.base import Notifier, NotifierError
from lineagehook.notification.models import NotificationMessage

logger = logging.getLogger(__name__)


class NotificationEmitter:
    """Flush one event's complete message list to a notifier.

    Empty lists are not sent. Notifier failures are logged and reported
    through the return value, never raised, so a broken channel cannot
    take down the worker that produced the messages.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier
        self._lock = threading.Lock()
        self._stats: Dict[str, int] = {
            "batches_sent": 0,
            "messages_sent": 0,
            "send_failures": 0,
        }

    def emit(self, messages: Sequence[NotificationMessage]) -> bool:
        """
        Submit an ordered message list.

        Args:
            messages: All messages produced for one event.

        Returns:
            True if there was nothing to send or the notifier accepted the
            batch, False if delivery failed.
        """
        if not messages:
            return True

        try:
            delivered = self.notifier.submit(messages)
        except NotifierError as e:
            logger.error("Failed to notify %d message(s): %s", len(messages), e)
            delivered = False

        with self._lock:
            if delivered:
                self._stats["batches_sent"] += 1
                self._stats["messages_sent"] += len(messages)
            else:
                self._stats["send_failures"] += 1
        return delivered

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats)
