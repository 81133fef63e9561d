"""Lineage process registration.

A process entity links the datasets a statement read to the datasets it
wrote. Its qualified name is derived only from the statement and the
datasets involved, so re-running the same transformation updates the same
process instead of creating a new one.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from lineagehook.bridge.base import MetadataBridge
from lineagehook.events.models import EntityRef, EventContext
from lineagehook.global_models import QUALIFIED_NAME, CatalogTypeName, EntityType, WriteType
from lineagehook.notification.models import (
    Entity,
    EntityCreateRequest,
    NotificationMessage,
)
from lineagehook.operations import PROCESS_NAMED_BY_QUERY, OperationKind
from lineagehook.query.normalizer import QueryNormalizer, lower
from lineagehook.translator.entities import BuiltEntities, EntityBuilder

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_DIRECTORY_TYPES = (EntityType.DFS_DIR, EntityType.LOCAL_DIR)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_path(location: Optional[str]) -> Optional[str]:
    """Lowercase a location and drop trailing separators."""
    path = lower(location)
    if path is None:
        return None
    while len(path) > 1 and path.endswith("/") and not path.endswith("://"):
        path = path[:-1]
    return path


def get_process_qualified_name(
    normalized_query: Optional[str],
    inputs: Sequence[Entity],
    outputs: Sequence[Entity],
) -> str:
    """
    Compose a process qualified name from a normalized query and datasets.

    Each dataset contributes ``:<qualified name>`` (lowercased, path
    separators removed); inputs come first, then outputs, each group sorted.

    Args:
        normalized_query: Canonical query text
        inputs: Input dataset entities
        outputs: Output dataset entities

    Returns:
        The process qualified name
    """
    parts = [normalized_query or ""]
    for datasets in (inputs, outputs):
        names = sorted(
            (entity.qualified_name or "").lower().replace("/", "") for entity in datasets
        )
        parts.extend(f":{name}" for name in names)
    return "".join(parts)


def is_select_query(context: EventContext) -> bool:
    """Check whether a QUERY event only spooled results to a scratch directory.

    Plain SELECTs are reported with a single directory output written with
    PATH_WRITE to a temporary URI. Inserts into a directory use the same
    output type but a non-temporary URI, so they are still registered.
    """
    if context.operation != OperationKind.QUERY or len(context.outputs) != 1:
        return False
    output = context.outputs[0]
    return (
        output.type in _DIRECTORY_TYPES
        and output.write_type == WriteType.PATH_WRITE
        and output.temp_uri
    )


class _EntityBundle:
    """Insertion-ordered set of entities keyed by (type name, qualified name)."""

    def __init__(self) -> None:
        self._entities: Dict[Tuple[str, Optional[str]], Entity] = {}

    def add(self, entity: Entity) -> None:
        self._entities.setdefault((entity.type_name, entity.qualified_name), entity)

    def values(self) -> List[Entity]:
        return list(self._entities.values())


class ProcessRegistrar:
    """Register process entities for data-moving statements."""

    def __init__(
        self,
        bridge: MetadataBridge,
        builder: EntityBuilder,
        normalizer: QueryNormalizer,
        clock: Optional[Clock] = None,
    ):
        self.bridge = bridge
        self.builder = builder
        self.normalizer = normalizer
        self.clock = clock or utc_now

    def register_process(
        self, context: EventContext, messages: List[NotificationMessage]
    ) -> None:
        """
        Resolve the event's datasets and queue a process create.

        Args:
            context: Event being translated
            messages: Message list to append to
        """
        # Even EXPLAIN of a CTAS is reported as CREATE_TABLE_AS_SELECT
        if not context.inputs and not context.outputs:
            logger.info("Explain statement. Skipping...")
            return

        if context.query_id is None:
            logger.info("Query id/plan is missing for %s", context.query_text)

        if is_select_query(context):
            logger.info(
                "Skipped query %s for processing since it is a select query",
                context.query_text,
            )
            return

        sources: Dict[str, Entity] = {}
        targets: Dict[str, Entity] = {}
        bundle = _EntityBundle()

        for ref in context.inputs:
            self._resolve_dataset(context, ref, sources, bundle, messages)
        for ref in context.outputs:
            self._resolve_dataset(context, ref, targets, bundle, messages)

        if not sources and not targets:
            logger.info(
                "Skipped query %s since it has no inputs or resulting outputs",
                context.query_text,
            )
            return

        process = self.build_process_entity(
            context, list(sources.values()), list(targets.values())
        )
        bundle.add(process)
        messages.append(EntityCreateRequest(user=context.user, entities=bundle.values()))

    def register_external_table(
        self,
        context: EventContext,
        tables: BuiltEntities,
        messages: List[NotificationMessage],
    ) -> None:
        """
        Link an external table to the path backing it.

        The table is looked up again because the event's copy may carry a
        stale location.

        Args:
            context: CREATE_TABLE or ALTER_TABLE_LOCATION event
            tables: Entities built for the table by the preceding upsert
            messages: Message list to append to
        """
        table_entity = tables.get(EntityType.TABLE)
        ref = context.first_output(EntityType.TABLE)
        if table_entity is None or ref is None or ref.table is None:
            return

        table = self.bridge.get_table(ref.table.db_name, ref.table.table_name)
        if not table.is_external:
            return

        location = normalize_path(table.data_location)
        if location is None:
            logger.info(
                "External table %s has no location, skipping lineage",
                self.bridge.table_qualified_name(table),
            )
            return

        logger.info("Registering external table process %s", context.query_text)
        path_entity = self.bridge.fill_filesystem_path_entity(location)
        process = self.build_process_entity(context, [path_entity], [table_entity])

        bundle = _EntityBundle()
        for entity in tables.values():
            bundle.add(entity)
        bundle.add(path_entity)
        bundle.add(process)
        messages.append(EntityCreateRequest(user=context.user, entities=bundle.values()))

    def build_process_entity(
        self,
        context: EventContext,
        inputs: List[Entity],
        outputs: List[Entity],
    ) -> Entity:
        """Create the process entity linking inputs to outputs."""
        query = context.query_text
        if context.operation in PROCESS_NAMED_BY_QUERY:
            name = lower(query)
            qualified_name = name or ""
        else:
            name = self.normalizer.normalize(query)
            qualified_name = get_process_qualified_name(name, inputs, outputs)

        logger.debug("Registering query: %s", name)

        return Entity(
            type_name=CatalogTypeName.PROCESS.value,
            attributes={
                QUALIFIED_NAME: qualified_name,
                "name": name,
                "operationType": context.operation.value,
                "userName": context.user,
                "startTime": context.query_start_time,
                "endTime": self.clock(),
                "queryId": context.query_id,
                "queryText": query,
                "queryPlan": dict(context.query_plan_json),
                "clusterName": self.bridge.cluster_name,
                "recentQueries": [query],
                "inputs": inputs,
                "outputs": outputs,
            },
        )

    def _resolve_dataset(
        self,
        context: EventContext,
        ref: EntityRef,
        datasets: Dict[str, Entity],
        bundle: _EntityBundle,
        messages: List[NotificationMessage],
    ) -> None:
        if ref.type in (EntityType.TABLE, EntityType.PARTITION) and ref.table is not None:
            table_qfn = self.bridge.table_qualified_name(ref.table)
            if table_qfn in datasets:
                return
            # Temp tables are resolved too: lineage needs them for path linkage
            result = self.builder.build_or_update(
                ref, context.user, messages, skip_temp_tables=False
            )
            datasets[table_qfn] = result[EntityType.TABLE]
            for entity in result.values():
                bundle.add(entity)
        elif ref.type == EntityType.DFS_DIR:
            path = normalize_path(ref.location)
            if path is None:
                return
            logger.info("Registering DFS Path %s", path)
            path_entity = self.bridge.fill_filesystem_path_entity(path)
            datasets[path] = path_entity
            bundle.add(path_entity)
