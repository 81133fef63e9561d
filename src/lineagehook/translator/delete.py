"""Table and database deletion."""

import logging
from typing import List

from lineagehook.bridge.base import MetadataBridge
from lineagehook.events.models import EntityRef, EventContext
from lineagehook.global_models import CatalogTypeName, EntityType
from lineagehook.notification.models import EntityDeleteRequest, NotificationMessage

logger = logging.getLogger(__name__)


class DeleteHandler:
    """Queue delete requests for dropped tables and databases."""

    def __init__(self, bridge: MetadataBridge):
        self.bridge = bridge

    def delete_tables(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        """Delete every table written by a DROP TABLE / DROP VIEW."""
        for ref in context.outputs_of_type(EntityType.TABLE):
            self._delete_table(context, ref, messages)

    def delete_database(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        """Delete a database and, before it, every table dropped with it."""
        if len(context.outputs) > 1:
            logger.info(
                "Starting deletion of tables and databases with cascade %s",
                context.query_text,
            )

        for ref in context.outputs_of_type(EntityType.TABLE):
            self._delete_table(context, ref, messages)

        for ref in context.outputs_of_type(EntityType.DATABASE):
            if ref.database is None:
                continue
            db_qfn = self.bridge.db_qualified_name(ref.database.name)
            logger.info("Deleting database %s", db_qfn)
            messages.append(
                EntityDeleteRequest(
                    user=context.user,
                    type_name=CatalogTypeName.DATABASE.value,
                    attribute_value=db_qfn,
                )
            )

    def _delete_table(
        self,
        context: EventContext,
        ref: EntityRef,
        messages: List[NotificationMessage],
    ) -> None:
        if ref.table is None:
            return
        table_qfn = self.bridge.table_qualified_name(ref.table)
        logger.info("Deleting table %s", table_qfn)
        messages.append(
            EntityDeleteRequest(
                user=context.user,
                type_name=CatalogTypeName.TABLE.value,
                attribute_value=table_qfn,
            )
        )
