"""Base classes for the notifier system.

A notifier receives the complete, ordered message list produced for one
event and is responsible for getting it to the metadata catalog. Delivery
guarantees, retries and wire ordering all live on this side of the
boundary.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from lineagehook.notification.models import NotificationMessage

logger = logging.getLogger(__name__)


class NotifierError(Exception):
    """Exception raised when a notifier cannot be configured or deliver."""

    pass


class Notifier(ABC):
    """Abstract base class for notifiers.

    Example:
        >>> class PrintNotifier(Notifier):
        ...     @property
        ...     def name(self) -> str:
        ...         return "print"
        ...
        ...     def submit(self, messages) -> bool:
        ...         for message in messages:
        ...             print(message.model_dump_json())
        ...         return True
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the notifier name used in configuration and CLI options."""
        pass

    @abstractmethod
    def submit(self, messages: Sequence[NotificationMessage]) -> bool:
        """Deliver one event's messages.

        Args:
            messages: Ordered messages; consumers may apply them sequentially.

        Returns:
            True if the batch was delivered, False otherwise.

        Raises:
            NotifierError: If delivery fails in a way the caller should see.
        """
        pass

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Configure the notifier with provider-specific settings.

        Args:
            config: Provider-specific configuration dictionary.

        Raises:
            NotifierError: If required configuration is missing or invalid.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the notifier."""
        pass


class RetryingNotifier(Notifier):
    """Wrap a notifier and re-submit failed batches.

    A batch is attempted once plus up to ``num_retries`` more times, with a
    fixed pause between attempts.
    """

    def __init__(
        self, inner: Notifier, num_retries: int = 3, backoff_seconds: float = 1.0
    ) -> None:
        if num_retries < 0:
            raise ValueError("num_retries must be >= 0")
        self.inner = inner
        self.num_retries = num_retries
        self.backoff_seconds = backoff_seconds

    @property
    def name(self) -> str:
        return self.inner.name

    def submit(self, messages: Sequence[NotificationMessage]) -> bool:
        attempts = self.num_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                if self.inner.submit(messages):
                    return True
                logger.warning(
                    "Notifier %s rejected batch (attempt %d/%d)",
                    self.inner.name,
                    attempt,
                    attempts,
                )
            except NotifierError as e:
                logger.warning(
                    "Notifier %s failed (attempt %d/%d): %s",
                    self.inner.name,
                    attempt,
                    attempts,
                    e,
                )
                if attempt == attempts:
                    raise
            if attempt < attempts:
                time.sleep(self.backoff_seconds)
        return False

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.inner.configure(config)

    def close(self) -> None:
        self.inner.close()
