"""Resolve event entity references into database and table entities."""

import logging
from typing import Dict, List, Optional

from lineagehook.bridge.base import MetadataBridge
from lineagehook.events.models import EntityRef, EventContext, TableSnapshot
from lineagehook.global_models import EntityType
from lineagehook.notification.models import (
    Entity,
    EntityCreateRequest,
    NotificationMessage,
)
from lineagehook.translator.errors import PreconditionError

logger = logging.getLogger(__name__)

BuiltEntities = Dict[EntityType, Entity]
"""Entities produced by one build, keyed DATABASE and (optionally) TABLE."""


class EntityBuilder:
    """Build or refresh catalog entities through the metadata bridge."""

    def __init__(self, bridge: MetadataBridge):
        self.bridge = bridge

    def build_or_update(
        self,
        ref: EntityRef,
        user: str,
        messages: List[NotificationMessage],
        skip_temp_tables: bool,
        table_override: Optional[TableSnapshot] = None,
    ) -> BuiltEntities:
        """
        Create the database entity and, when applicable, the table entity
        for an event entity, and queue one create message bundling them.

        Args:
            ref: Entity reference from the event (DATABASE, TABLE or PARTITION)
            user: Acting user recorded on the message
            messages: Message list the create request is appended to
            skip_temp_tables: Do not build temporary, non-external tables
            table_override: Table snapshot to use verbatim instead of a fresh
                            metastore lookup (renames, where the old name no
                            longer resolves)

        Returns:
            The built entities keyed by EntityType.DATABASE / EntityType.TABLE

        Raises:
            BridgeError: If the database or table cannot be resolved
            PreconditionError: If the reference carries no database or table
        """
        table: Optional[TableSnapshot] = None
        if ref.type == EntityType.DATABASE:
            if ref.database is None:
                raise PreconditionError("DATABASE entity without a database")
            db_name = ref.database.name
        elif ref.type in (EntityType.TABLE, EntityType.PARTITION):
            if ref.table is None:
                raise PreconditionError(f"{ref.type.value} entity without a table")
            table = ref.table
            db_name = table.db_name
        else:
            raise PreconditionError(
                f"Cannot build catalog entities for {ref.type.value} entity"
            )

        db = self.bridge.get_database(db_name)
        db_entity = self.bridge.build_database_entity(db)

        result: BuiltEntities = {EntityType.DATABASE: db_entity}
        entities: List[Entity] = [db_entity]

        if table is not None:
            if table_override is not None:
                table = table_override
            else:
                table = self.bridge.get_table(table.db_name, table.table_name)

            # External tables are kept even when temporary: lineage needs their path
            if skip_temp_tables and table.temporary and not table.is_external:
                logger.debug(
                    "Skipping temporary table registration %s since it is not an "
                    "external table %s",
                    table.table_name,
                    table.table_type.value,
                )
            else:
                table_entity = self.bridge.build_table_entity(db_entity, table)
                entities.append(table_entity)
                result[EntityType.TABLE] = table_entity

        messages.append(EntityCreateRequest(user=user, entities=entities))
        return result

    def handle_event_outputs(
        self,
        context: EventContext,
        entity_type: EntityType,
        messages: List[NotificationMessage],
    ) -> Optional[BuiltEntities]:
        """Upsert the first output of the given type, skipping temp tables.

        Returns:
            The built entities, or None when no output has that type.
        """
        ref = context.first_output(entity_type)
        if ref is None:
            return None
        return self.build_or_update(ref, context.user, messages, skip_temp_tables=True)
