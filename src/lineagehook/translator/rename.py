"""Table and column rename reconciliation.

A rename must not lose metadata the catalog has attached to the old
entities (classifications, descriptions, ...). Instead of deleting and
re-creating, the old entities are upserted under their old keys and then
re-keyed with partial updates: dependents (columns, storage descriptor)
first, the owning table last.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from lineagehook.bridge.base import (
    MetadataBridge,
    get_column_qualified_name,
    get_storage_desc_qualified_name,
)
from lineagehook.events.models import EntityRef, EventContext, FieldSchema, TableSnapshot
from lineagehook.global_models import QUALIFIED_NAME, CatalogTypeName, EntityType
from lineagehook.notification.models import (
    Entity,
    EntityPartialUpdateRequest,
    NotificationMessage,
)
from lineagehook.translator.entities import EntityBuilder
from lineagehook.translator.errors import PreconditionError

logger = logging.getLogger(__name__)


def find_changed_column_names(
    old_columns: Sequence[FieldSchema], new_columns: Sequence[FieldSchema]
) -> Tuple[str, str]:
    """
    Work out which column was renamed between two column lists.

    Columns are compared structurally (name, type and comment). The old
    name is the first old column missing from the new list and the new
    name is the first new column missing from the old list. When nothing
    differs both default to the first column's name.

    Args:
        old_columns: Columns before the rename
        new_columns: Columns after the rename, same length

    Returns:
        (old column name, new column name)
    """
    old_positions: Dict[FieldSchema, int] = {}
    new_positions: Dict[FieldSchema, int] = {}
    for i, (old_col, new_col) in enumerate(zip(old_columns, new_columns)):
        old_positions[old_col] = i
        new_positions[new_col] = i

    old_name = old_columns[0].name
    new_name = old_name

    for column in old_columns:
        if column not in new_positions:
            old_name = column.name
            break

    for column in new_columns:
        if column not in old_positions:
            new_name = column.name
            break

    return old_name, new_name


class RenameReconciler:
    """Emit the partial updates that move entities to their new keys."""

    def __init__(self, bridge: MetadataBridge, builder: EntityBuilder):
        self.bridge = bridge
        self.builder = builder

    def rename_table(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        """Handle ALTER TABLE/VIEW ... RENAME TO.

        Raises:
            PreconditionError: If the event does not carry exactly one input
                table and at least one output table, or names more than one
                distinct new table.
        """
        old_ref = self._single_input_table(context)
        old_table = old_ref.table
        table_outputs = self._output_tables(context)

        # The engine lists the old name among the outputs too
        targets: Dict[str, EntityRef] = {}
        for ref in table_outputs:
            if not ref.table.same_identity(old_table):
                targets.setdefault(self.bridge.table_qualified_name(ref.table), ref)

        if not targets:
            logger.info(
                "No renamed table among outputs of %s, nothing to do",
                context.query_text,
            )
            return
        if len(targets) > 1:
            raise PreconditionError(
                f"Rename event names {len(targets)} new tables: "
                f"{', '.join(sorted(targets))}"
            )

        new_table = next(iter(targets.values())).table
        old_qfn = self.bridge.table_qualified_name(old_table)
        new_qfn = self.bridge.table_qualified_name(new_table)

        # Upsert under the old identity so the re-keyed entities exist
        tables = self.builder.build_or_update(
            old_ref,
            context.user,
            messages,
            skip_temp_tables=True,
            table_override=old_table,
        )
        table_entity = tables.get(EntityType.TABLE)
        if table_entity is None:
            logger.info("Skipping rename of temporary table %s", old_qfn)
            return

        columns = list(table_entity.get("columns") or [])
        columns += list(table_entity.get("partitionKeys") or [])
        self._replace_column_names(context, columns, old_qfn, new_qfn, messages)
        self._replace_storage_desc_name(context, old_qfn, new_qfn, messages)
        self._replace_table_name(context, old_table, new_table, old_qfn, new_qfn, messages)

    def rename_column(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        """Handle ALTER TABLE ... CHANGE COLUMN.

        Raises:
            PreconditionError: If the event is missing its input or output
                table, or the column counts before and after differ.
        """
        old_table = self._single_input_table(context).table
        table_outputs = self._output_tables(context)

        old_columns = old_table.all_cols
        new_columns = table_outputs[0].table.all_cols
        if len(old_columns) != len(new_columns):
            raise PreconditionError(
                f"Column count changed from {len(old_columns)} to "
                f"{len(new_columns)} in a column rename"
            )
        if not old_columns:
            raise PreconditionError("Column rename on a table without columns")

        old_name, new_name = find_changed_column_names(old_columns, new_columns)

        for ref in table_outputs:
            self.builder.build_or_update(
                ref,
                context.user,
                messages,
                skip_temp_tables=True,
                table_override=old_table,
            )
            table_qfn = self.bridge.table_qualified_name(ref.table)
            messages.append(
                EntityPartialUpdateRequest(
                    user=context.user,
                    type_name=CatalogTypeName.COLUMN.value,
                    attribute_value=get_column_qualified_name(table_qfn, old_name),
                    entity=Entity(
                        type_name=CatalogTypeName.COLUMN.value,
                        attributes={
                            QUALIFIED_NAME: get_column_qualified_name(
                                table_qfn, new_name
                            )
                        },
                    ),
                )
            )

        self.builder.handle_event_outputs(context, EntityType.TABLE, messages)

    def _single_input_table(self, context: EventContext) -> EntityRef:
        if len(context.inputs) != 1:
            raise PreconditionError(
                f"{context.operation.name} expects exactly one input, "
                f"got {len(context.inputs)}"
            )
        ref = context.inputs[0]
        if ref.table is None:
            raise PreconditionError(
                f"{context.operation.name} input carries no table definition"
            )
        return ref

    def _output_tables(self, context: EventContext) -> List[EntityRef]:
        refs = [
            ref for ref in context.outputs_of_type(EntityType.TABLE) if ref.table is not None
        ]
        if not refs:
            raise PreconditionError(
                f"{context.operation.name} expects at least one output table"
            )
        return refs

    def _replace_column_names(
        self,
        context: EventContext,
        columns: Sequence[Entity],
        old_table_qfn: str,
        new_table_qfn: str,
        messages: List[NotificationMessage],
    ) -> None:
        for column in columns:
            name = column.get("name")
            messages.append(
                EntityPartialUpdateRequest(
                    user=context.user,
                    type_name=CatalogTypeName.COLUMN.value,
                    attribute_value=get_column_qualified_name(old_table_qfn, name),
                    entity=Entity(
                        type_name=CatalogTypeName.COLUMN.value,
                        attributes={
                            QUALIFIED_NAME: get_column_qualified_name(new_table_qfn, name)
                        },
                    ),
                )
            )

    def _replace_storage_desc_name(
        self,
        context: EventContext,
        old_table_qfn: str,
        new_table_qfn: str,
        messages: List[NotificationMessage],
    ) -> None:
        messages.append(
            EntityPartialUpdateRequest(
                user=context.user,
                type_name=CatalogTypeName.STORAGE_DESC.value,
                attribute_value=get_storage_desc_qualified_name(old_table_qfn),
                entity=Entity(
                    type_name=CatalogTypeName.STORAGE_DESC.value,
                    attributes={
                        QUALIFIED_NAME: get_storage_desc_qualified_name(new_table_qfn)
                    },
                ),
            )
        )

    def _replace_table_name(
        self,
        context: EventContext,
        old_table: TableSnapshot,
        new_table: TableSnapshot,
        old_table_qfn: str,
        new_table_qfn: str,
        messages: List[NotificationMessage],
    ) -> None:
        messages.append(
            EntityPartialUpdateRequest(
                user=context.user,
                type_name=CatalogTypeName.TABLE.value,
                attribute_value=old_table_qfn,
                entity=Entity(
                    type_name=CatalogTypeName.TABLE.value,
                    attributes={
                        "name": new_table.table_name.lower(),
                        QUALIFIED_NAME: new_table_qfn,
                        "aliases": [old_table.table_name.lower()],
                    },
                ),
            )
        )
