"""Translate one event context into an ordered list of notifications."""

import logging
from typing import Callable, Dict, List, Optional

from lineagehook.bridge.base import MetadataBridge
from lineagehook.events.models import EventContext
from lineagehook.global_models import EntityType, HookPhase
from lineagehook.notification.models import NotificationMessage
from lineagehook.operations import TranslatorAction, action_for
from lineagehook.query.normalizer import QueryNormalizer
from lineagehook.translator.delete import DeleteHandler
from lineagehook.translator.entities import EntityBuilder
from lineagehook.translator.errors import TranslationError
from lineagehook.translator.process import Clock, ProcessRegistrar
from lineagehook.translator.rename import RenameReconciler

logger = logging.getLogger(__name__)

Handler = Callable[[EventContext, List[NotificationMessage]], None]


class EventTranslator:
    """Turn event contexts into notification messages.

    ``translate`` is a pure function of its context (plus metastore
    lookups): every call builds its own message list, so one translator can
    serve concurrent workers.

    Example:
        >>> translator = EventTranslator(SnapshotBridge.from_file(path))
        >>> messages = translator.translate(extract_context(event))
    """

    def __init__(
        self,
        bridge: MetadataBridge,
        normalizer: Optional[QueryNormalizer] = None,
        clock: Optional[Clock] = None,
    ):
        self.bridge = bridge
        self.builder = EntityBuilder(bridge)
        self.renames = RenameReconciler(bridge, self.builder)
        self.processes = ProcessRegistrar(
            bridge, self.builder, normalizer or QueryNormalizer(), clock
        )
        self.deletes = DeleteHandler(bridge)
        self._handlers: Dict[TranslatorAction, Handler] = {
            TranslatorAction.UPSERT_DATABASE: self._upsert_database,
            TranslatorAction.CREATE_TABLE: self._create_table,
            TranslatorAction.REGISTER_PROCESS: self.processes.register_process,
            TranslatorAction.RENAME_TABLE: self.renames.rename_table,
            TranslatorAction.UPSERT_TABLE: self._upsert_table,
            TranslatorAction.RENAME_COLUMN: self.renames.rename_column,
            TranslatorAction.ALTER_LOCATION: self._alter_location,
            TranslatorAction.DROP_TABLE: self.deletes.delete_tables,
            TranslatorAction.DROP_DATABASE: self.deletes.delete_database,
            TranslatorAction.IGNORE: self._ignore,
        }
        missing = [action.name for action in TranslatorAction if action not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler for translator actions: {', '.join(missing)}")

    def translate(self, context: EventContext) -> List[NotificationMessage]:
        """
        Translate one event.

        Args:
            context: Extracted event context

        Returns:
            Messages in the order consumers must apply them (may be empty)

        Raises:
            TranslationError: If the event was not raised after execution or
                              violates its operation's preconditions
            BridgeError: If a metastore lookup fails
        """
        if context.hook_phase != HookPhase.POST_EXEC:
            raise TranslationError(
                f"Hook phase {context.hook_phase.value} is not supported, "
                f"only {HookPhase.POST_EXEC.value}"
            )

        logger.info(
            "Entered lineage hook for hook type %s operation %s",
            context.hook_phase.value,
            context.operation.name,
        )

        messages: List[NotificationMessage] = []
        self._handlers[action_for(context.operation)](context, messages)
        return messages

    def _upsert_database(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        self.builder.handle_event_outputs(context, EntityType.DATABASE, messages)

    def _upsert_table(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        self.builder.handle_event_outputs(context, EntityType.TABLE, messages)

    def _create_table(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        tables = self.builder.handle_event_outputs(context, EntityType.TABLE, messages)
        if tables and EntityType.TABLE in tables:
            self.processes.register_external_table(context, tables, messages)

    def _alter_location(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        # Track the changed lineage of external tables
        self._create_table(context, messages)

    def _ignore(self, context: EventContext, messages: List[NotificationMessage]) -> None:
        pass
