"""Base classes for the metadata bridge.

The bridge is the translator's window onto the host engine's metastore:
it resolves live database and table definitions and turns them into
catalog entities. Qualified-name rules live here so that every component
derives keys the same way.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from lineagehook.events.models import DatabaseSnapshot, FieldSchema, TableSnapshot
from lineagehook.global_models import QUALIFIED_NAME, CatalogTypeName
from lineagehook.notification.models import Entity


class BridgeError(Exception):
    """Exception raised when a metastore lookup fails."""

    pass


def get_db_qualified_name(cluster_name: str, db_name: str) -> str:
    """Return ``<db>@<cluster>``."""
    return f"{db_name.lower()}@{cluster_name}"


def get_table_qualified_name(cluster_name: str, db_name: str, table_name: str) -> str:
    """Return ``<db>.<table>@<cluster>``."""
    return f"{db_name.lower()}.{table_name.lower()}@{cluster_name}"


def get_column_qualified_name(table_qualified_name: str, column_name: str) -> str:
    """Return the column key for a table key.

    The column name is inserted before the cluster suffix:
    ``db.tbl@cluster`` + ``col`` -> ``db.tbl.col@cluster``.
    """
    table_part, sep, cluster = table_qualified_name.rpartition("@")
    if not sep:
        return f"{table_qualified_name}.{column_name.lower()}"
    return f"{table_part}.{column_name.lower()}@{cluster}"


def get_storage_desc_qualified_name(table_qualified_name: str) -> str:
    """Return ``<tableQFN>_storage``."""
    return f"{table_qualified_name}_storage"


class MetadataBridge(ABC):
    """Abstract base class for metadata bridges.

    Subclasses provide the metastore lookups; entity construction is shared.

    Example:
        >>> class MyBridge(MetadataBridge):
        ...     def get_database(self, name):
        ...         return DatabaseSnapshot(name=name)
        ...
        ...     def get_table(self, db_name, table_name):
        ...         raise BridgeError(f"{db_name}.{table_name} not found")
    """

    def __init__(self, cluster_name: str):
        self.cluster_name = cluster_name

    @abstractmethod
    def get_database(self, name: str) -> DatabaseSnapshot:
        """Fetch a database definition.

        Raises:
            BridgeError: If the database does not exist or cannot be read.
        """
        pass

    @abstractmethod
    def get_table(self, db_name: str, table_name: str) -> TableSnapshot:
        """Fetch a table definition.

        Raises:
            BridgeError: If the table does not exist or cannot be read.
        """
        pass

    def db_qualified_name(self, db_name: str) -> str:
        return get_db_qualified_name(self.cluster_name, db_name)

    def table_qualified_name(self, table: TableSnapshot) -> str:
        return get_table_qualified_name(
            self.cluster_name, table.db_name, table.table_name
        )

    def build_database_entity(self, db: DatabaseSnapshot) -> Entity:
        """Create the catalog entity for a database."""
        return Entity(
            type_name=CatalogTypeName.DATABASE.value,
            attributes={
                "name": db.name.lower(),
                QUALIFIED_NAME: self.db_qualified_name(db.name),
                "clusterName": self.cluster_name,
                "description": db.description,
                "locationUri": db.location_uri,
                "parameters": dict(db.parameters),
                "owner": db.owner_name,
                "ownerType": db.owner_type,
            },
        )

    def build_table_entity(self, db_entity: Entity, table: TableSnapshot) -> Entity:
        """Create the catalog entity for a table, including its storage
        descriptor, columns and partition keys.

        Args:
            db_entity: Entity of the owning database.
            table: Table definition to convert.

        Returns:
            The table entity.
        """
        table_qfn = self.table_qualified_name(table)
        return Entity(
            type_name=CatalogTypeName.TABLE.value,
            attributes={
                QUALIFIED_NAME: table_qfn,
                "name": table.table_name.lower(),
                "db": db_entity,
                "owner": table.owner,
                "createTime": table.create_time,
                "lastAccessTime": table.last_access_time,
                "retention": table.retention,
                "comment": table.comment,
                "tableType": table.table_type.value,
                "temporary": table.temporary,
                "viewOriginalText": table.view_original_text,
                "viewExpandedText": table.view_expanded_text,
                "parameters": dict(table.parameters),
                "sd": self._build_storage_desc_entity(table, table_qfn),
                "columns": self._build_column_entities(
                    table.columns, table_qfn, table.owner
                ),
                "partitionKeys": self._build_column_entities(
                    table.partition_keys, table_qfn, table.owner
                ),
            },
        )

    def fill_filesystem_path_entity(self, path: str) -> Entity:
        """Create the catalog entity for a filesystem path."""
        return Entity(
            type_name=CatalogTypeName.FS_PATH.value,
            attributes={
                QUALIFIED_NAME: path,
                "name": path,
                "path": path,
                "clusterName": self.cluster_name,
            },
        )

    def _build_column_entities(
        self, columns: Sequence[FieldSchema], table_qfn: str, owner
    ) -> List[Entity]:
        return [
            Entity(
                type_name=CatalogTypeName.COLUMN.value,
                attributes={
                    QUALIFIED_NAME: get_column_qualified_name(table_qfn, column.name),
                    "name": column.name.lower(),
                    "type": column.type,
                    "comment": column.comment,
                    "owner": owner,
                },
            )
            for column in columns
        ]

    def _build_storage_desc_entity(self, table: TableSnapshot, table_qfn: str) -> Entity:
        storage = table.storage
        return Entity(
            type_name=CatalogTypeName.STORAGE_DESC.value,
            attributes={
                QUALIFIED_NAME: get_storage_desc_qualified_name(table_qfn),
                "location": storage.location,
                "inputFormat": storage.input_format,
                "outputFormat": storage.output_format,
                "compressed": storage.compressed,
                "numBuckets": storage.num_buckets,
                "bucketCols": list(storage.bucket_cols),
                "sortCols": list(storage.sort_cols),
                "serdeInfo": {
                    "serializationLib": storage.serialization_lib,
                    "parameters": dict(storage.serde_parameters),
                },
                "parameters": dict(storage.parameters),
            },
        )
