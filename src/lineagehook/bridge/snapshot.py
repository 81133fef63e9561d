"""Metadata bridge backed by an in-memory catalog snapshot.

The snapshot can be loaded from a JSON file, which makes it possible to
replay recorded events offline:

    {
      "databases": [{"name": "sales"}],
      "tables": [{"db_name": "sales", "table_name": "orders", "columns": [...]}]
    }
"""

import threading
from pathlib import Path
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, TypeAdapter

from lineagehook.bridge.base import BridgeError, MetadataBridge
from lineagehook.events.models import DatabaseSnapshot, TableSnapshot
from lineagehook.global_models import DEFAULT_CLUSTER_NAME
from lineagehook.utils.file_utils import read_bytes, validate_json


class CatalogSnapshot(BaseModel):
    """Serializable contents of a metastore."""

    databases: List[DatabaseSnapshot] = Field(default_factory=list)
    tables: List[TableSnapshot] = Field(default_factory=list)


_SNAPSHOT = TypeAdapter(CatalogSnapshot)


class SnapshotBridge(MetadataBridge):
    """Resolve databases and tables from an in-memory snapshot.

    Lookups are case-insensitive. Tables implicitly create their database
    entry when it is not listed explicitly.
    """

    def __init__(self, cluster_name: str = DEFAULT_CLUSTER_NAME):
        super().__init__(cluster_name)
        self._lock = threading.Lock()
        self._databases: Dict[str, DatabaseSnapshot] = {}
        self._tables: Dict[Tuple[str, str], TableSnapshot] = {}

    @classmethod
    def from_snapshot(
        cls, snapshot: CatalogSnapshot, cluster_name: str = DEFAULT_CLUSTER_NAME
    ) -> "SnapshotBridge":
        bridge = cls(cluster_name)
        for db in snapshot.databases:
            bridge.put_database(db)
        for table in snapshot.tables:
            bridge.put_table(table)
        return bridge

    @classmethod
    def from_file(
        cls, path: Path, cluster_name: str = DEFAULT_CLUSTER_NAME
    ) -> "SnapshotBridge":
        """
        Load a bridge from a catalog snapshot JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the content doesn't match the snapshot schema
        """
        snapshot = validate_json(_SNAPSHOT, read_bytes(path), path)
        return cls.from_snapshot(snapshot, cluster_name)

    def put_database(self, db: DatabaseSnapshot) -> None:
        with self._lock:
            self._databases[db.name.lower()] = db

    def put_table(self, table: TableSnapshot) -> None:
        with self._lock:
            self._databases.setdefault(
                table.db_name.lower(), DatabaseSnapshot(name=table.db_name)
            )
            self._tables[(table.db_name.lower(), table.table_name.lower())] = table

    def drop_table(self, db_name: str, table_name: str) -> None:
        with self._lock:
            self._tables.pop((db_name.lower(), table_name.lower()), None)

    def get_database(self, name: str) -> DatabaseSnapshot:
        with self._lock:
            db = self._databases.get(name.lower())
        if db is None:
            raise BridgeError(f"Database not found: {name}")
        return db

    def get_table(self, db_name: str, table_name: str) -> TableSnapshot:
        with self._lock:
            table = self._tables.get((db_name.lower(), table_name.lower()))
        if table is None:
            raise BridgeError(f"Table not found: {db_name}.{table_name}")
        return table

    def snapshot(self) -> CatalogSnapshot:
        """Return the current contents as a serializable snapshot."""
        with self._lock:
            return CatalogSnapshot(
                databases=list(self._databases.values()),
                tables=list(self._tables.values()),
            )
