"""Shared models and enums used across lineagehook modules."""

from enum import Enum


class EntityType(str, Enum):
    """Kind of object referenced by a host engine read or write entity."""

    DATABASE = "DATABASE"
    TABLE = "TABLE"
    PARTITION = "PARTITION"
    DUMMYPARTITION = "DUMMYPARTITION"
    DFS_DIR = "DFS_DIR"
    LOCAL_DIR = "LOCAL_DIR"
    FUNCTION = "FUNCTION"


class CatalogTypeName(str, Enum):
    """Type names of the entities published to the metadata catalog."""

    DATABASE = "hive_db"
    TABLE = "hive_table"
    PARTITION = "hive_partition"
    COLUMN = "hive_column"
    STORAGE_DESC = "hive_storagedesc"
    PROCESS = "hive_process"
    FS_PATH = "hdfs_path"


class HookPhase(str, Enum):
    """Point of query execution at which the host engine fired the hook."""

    PRE_EXEC = "PRE_EXEC_HOOK"
    POST_EXEC = "POST_EXEC_HOOK"
    ON_FAILURE = "ON_FAILURE_HOOK"


class WriteType(str, Enum):
    """How a write entity is modified by the query."""

    INSERT = "INSERT"
    INSERT_OVERWRITE = "INSERT_OVERWRITE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    DDL_EXCLUSIVE = "DDL_EXCLUSIVE"
    DDL_SHARED = "DDL_SHARED"
    DDL_NO_LOCK = "DDL_NO_LOCK"
    PATH_WRITE = "PATH_WRITE"


class TableType(str, Enum):
    """Storage kind of a catalog table."""

    MANAGED_TABLE = "MANAGED_TABLE"
    EXTERNAL_TABLE = "EXTERNAL_TABLE"
    VIRTUAL_VIEW = "VIRTUAL_VIEW"
    INDEX_TABLE = "INDEX_TABLE"


QUALIFIED_NAME = "qualifiedName"
"""Attribute every catalog entity is keyed by."""

DEFAULT_CLUSTER_NAME = "primary"
