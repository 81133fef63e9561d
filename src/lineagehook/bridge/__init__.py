"""Metadata bridge: metastore lookups and catalog entity construction.

Example:
    >>> from lineagehook.bridge import SnapshotBridge
    >>> bridge = SnapshotBridge.from_file(Path("catalog.json"), cluster_name="prod")
    >>> table = bridge.get_table("sales", "orders")
    >>> bridge.table_qualified_name(table)
    'sales.orders@prod'
"""

from lineagehook.bridge.base import (
    BridgeError,
    MetadataBridge,
    get_column_qualified_name,
    get_db_qualified_name,
    get_storage_desc_qualified_name,
    get_table_qualified_name,
)
from lineagehook.bridge.snapshot import CatalogSnapshot, SnapshotBridge

__all__ = [
    "BridgeError",
    "MetadataBridge",
    "CatalogSnapshot",
    "SnapshotBridge",
    "get_db_qualified_name",
    "get_table_qualified_name",
    "get_column_qualified_name",
    "get_storage_desc_qualified_name",
]
