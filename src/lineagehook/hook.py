"""Lineage hook service: extract, translate and notify, inline or on a pool."""

import logging
import threading
from typing import Any, Dict, Optional

from lineagehook.bridge.base import MetadataBridge
from lineagehook.dispatch.executor import DispatchExecutor
from lineagehook.events.extractor import describe, extract_context
from lineagehook.events.models import EventContext, HookEvent
from lineagehook.notification.base import Notifier, RetryingNotifier
from lineagehook.notification.emitter import NotificationEmitter
from lineagehook.notification.registry import get_notifier
from lineagehook.query.explainer import QueryExplainer
from lineagehook.query.normalizer import QueryNormalizer
from lineagehook.translator.process import Clock
from lineagehook.translator.translator import EventTranslator
from lineagehook.utils.config import HookSettings

logger = logging.getLogger(__name__)


class LineageHook:
    """
    Entry point called by the host engine after each statement.

    In synchronous mode the whole translate-and-notify unit runs on the
    caller's thread. Otherwise it is handed to a DispatchExecutor, and a
    full backlog surfaces as DispatchRejectedError from ``run``.

    Example:
        >>> with LineageHook(bridge, notifier) as hook:
        ...     hook.run(event)
    """

    def __init__(
        self,
        bridge: MetadataBridge,
        notifier: Notifier,
        synchronous: bool = False,
        executor: Optional[DispatchExecutor] = None,
        normalizer: Optional[QueryNormalizer] = None,
        explainer: Optional[QueryExplainer] = None,
        clock: Optional[Clock] = None,
    ):
        self.synchronous = synchronous
        self.explainer = explainer or QueryExplainer()
        self.translator = EventTranslator(bridge, normalizer=normalizer, clock=clock)
        self.notifier = notifier
        self.emitter = NotificationEmitter(notifier)
        self._lock = threading.Lock()
        self._dropped = 0
        self.executor: Optional[DispatchExecutor] = None
        if not synchronous:
            self.executor = (executor or DispatchExecutor()).start()
        logger.info("Created lineage hook (synchronous=%s)", synchronous)

    @classmethod
    def from_settings(
        cls,
        settings: HookSettings,
        bridge: MetadataBridge,
        notifier: Optional[Notifier] = None,
    ) -> "LineageHook":
        """
        Build a hook from resolved settings.

        Args:
            settings: Settings with defaults applied
            bridge: Metadata bridge for the settings' cluster
            notifier: Notifier to use; created from ``settings.notifier`` when omitted

        Raises:
            NotifierError: If the configured notifier is unknown or misconfigured
        """
        if notifier is None:
            notifier = get_notifier(settings.notifier or "console")
            notifier.configure(settings.notifier_options)
        if settings.num_retries > 0:
            notifier = RetryingNotifier(notifier, num_retries=settings.num_retries)

        executor = None
        if not settings.synchronous:
            executor = DispatchExecutor(
                min_workers=settings.min_threads,
                max_workers=settings.max_threads,
                queue_size=settings.queue_size,
                keep_alive_seconds=settings.keep_alive_ms / 1000.0,
                shutdown_wait_seconds=settings.shutdown_wait_seconds,
            )
        return cls(
            bridge,
            notifier,
            synchronous=settings.synchronous,
            executor=executor,
            normalizer=QueryNormalizer(settings.dialect, settings.mask_literals),
        )

    def run(self, event: HookEvent) -> bool:
        """
        Handle one engine event.

        Events that cannot be extracted or translated are logged and
        dropped; only backpressure reaches the caller.

        Returns:
            Synchronous mode: True if the event was translated and delivered.
            Asynchronous mode: True once the event is queued.

        Raises:
            DispatchRejectedError: If the asynchronous backlog is full
        """
        try:
            context = extract_context(event, self.explainer)
        except Exception:
            logger.exception(
                "Lineage hook failed, dropping %s event", event.operation_name
            )
            self._record_drop()
            return False
        if self.executor is None:
            return self.process(context)
        self.executor.submit(self.process, context)
        return True

    def process(self, context: EventContext) -> bool:
        """
        Translate one event and flush its messages.

        Failures drop the event as a whole: nothing is sent unless the
        complete message list was built.

        Returns:
            True if the messages were delivered (or there were none).
        """
        try:
            messages = self.translator.translate(context)
        except Exception:
            logger.exception("Lineage hook failed, dropping event %s", describe(context))
            self._record_drop()
            return False
        return self.emitter.emit(messages)

    def _record_drop(self) -> None:
        with self._lock:
            self._dropped += 1

    def close(self) -> int:
        """
        Drain the executor and close the notifier.

        Returns:
            Number of events abandoned at shutdown.
        """
        abandoned = 0
        if self.executor is not None:
            abandoned = self.executor.shutdown()
        self.notifier.close()
        return abandoned

    @property
    def stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = dict(self.emitter.stats)
        with self._lock:
            stats["dropped"] = self._dropped
        if self.executor is not None:
            stats.update(self.executor.stats)
        return stats

    def __enter__(self) -> "LineageHook":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
