"""Operation classification for host engine events.

The host engine reports every completed statement with a raw operation
name. This module maps those names onto the closed ``OperationKind``
enumeration and assigns each kind exactly one translator action. Kinds the
translator does not care about are listed explicitly under
``TranslatorAction.IGNORE``; the mapping is checked for completeness when
the module is imported, so a new operation kind cannot fall through
silently.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping


class OperationKind(str, Enum):
    """Every operation the host engine can report.

    Member values are the raw operation names sent by the engine.
    """

    EXPLAIN = "EXPLAIN"
    LOAD = "LOAD"
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"
    CREATE_DATABASE = "CREATEDATABASE"
    DROP_DATABASE = "DROPDATABASE"
    SWITCH_DATABASE = "SWITCHDATABASE"
    LOCK_DATABASE = "LOCKDATABASE"
    UNLOCK_DATABASE = "UNLOCKDATABASE"
    DROP_TABLE = "DROPTABLE"
    DESC_TABLE = "DESCTABLE"
    DESC_FUNCTION = "DESCFUNCTION"
    MSCK = "MSCK"
    ALTER_TABLE_ADDCOLS = "ALTERTABLE_ADDCOLS"
    ALTER_TABLE_REPLACECOLS = "ALTERTABLE_REPLACECOLS"
    ALTER_TABLE_RENAMECOL = "ALTERTABLE_RENAMECOL"
    ALTER_TABLE_RENAMEPART = "ALTERTABLE_RENAMEPART"
    ALTER_TABLE_UPDATEPARTSTATS = "ALTERTABLE_UPDATEPARTSTATS"
    ALTER_TABLE_UPDATETABLESTATS = "ALTERTABLE_UPDATETABLESTATS"
    ALTER_TABLE_RENAME = "ALTERTABLE_RENAME"
    ALTER_TABLE_DROPPARTS = "ALTERTABLE_DROPPARTS"
    ALTER_TABLE_ADDPARTS = "ALTERTABLE_ADDPARTS"
    ALTER_TABLE_TOUCH = "ALTERTABLE_TOUCH"
    ALTER_TABLE_ARCHIVE = "ALTERTABLE_ARCHIVE"
    ALTER_TABLE_UNARCHIVE = "ALTERTABLE_UNARCHIVE"
    ALTER_TABLE_PROPERTIES = "ALTERTABLE_PROPERTIES"
    ALTER_TABLE_SERIALIZER = "ALTERTABLE_SERIALIZER"
    ALTER_PARTITION_SERIALIZER = "ALTERPARTITION_SERIALIZER"
    ALTER_TABLE_SERDEPROPERTIES = "ALTERTABLE_SERDEPROPERTIES"
    ALTER_PARTITION_SERDEPROPERTIES = "ALTERPARTITION_SERDEPROPERTIES"
    ALTER_TABLE_CLUSTER_SORT = "ALTERTABLE_CLUSTER_SORT"
    ANALYZE_TABLE = "ANALYZE_TABLE"
    ALTER_TABLE_BUCKETNUM = "ALTERTABLE_BUCKETNUM"
    ALTER_PARTITION_BUCKETNUM = "ALTERPARTITION_BUCKETNUM"
    SHOW_DATABASES = "SHOWDATABASES"
    SHOW_TABLES = "SHOWTABLES"
    SHOW_COLUMNS = "SHOWCOLUMNS"
    SHOW_TABLESTATUS = "SHOW_TABLESTATUS"
    SHOW_TBLPROPERTIES = "SHOW_TBLPROPERTIES"
    SHOW_CREATEDATABASE = "SHOW_CREATEDATABASE"
    SHOW_CREATETABLE = "SHOW_CREATETABLE"
    SHOW_FUNCTIONS = "SHOWFUNCTIONS"
    SHOW_INDEXES = "SHOWINDEXES"
    SHOW_PARTITIONS = "SHOWPARTITIONS"
    SHOW_LOCKS = "SHOWLOCKS"
    SHOW_CONF = "SHOWCONF"
    CREATE_FUNCTION = "CREATEFUNCTION"
    DROP_FUNCTION = "DROPFUNCTION"
    RELOAD_FUNCTION = "RELOADFUNCTION"
    CREATE_MACRO = "CREATEMACRO"
    DROP_MACRO = "DROPMACRO"
    CREATE_VIEW = "CREATEVIEW"
    DROP_VIEW = "DROPVIEW"
    CREATE_INDEX = "CREATEINDEX"
    DROP_INDEX = "DROPINDEX"
    ALTER_INDEX_REBUILD = "ALTERINDEX_REBUILD"
    ALTER_VIEW_PROPERTIES = "ALTERVIEW_PROPERTIES"
    DROP_VIEW_PROPERTIES = "DROPVIEW_PROPERTIES"
    LOCK_TABLE = "LOCKTABLE"
    UNLOCK_TABLE = "UNLOCKTABLE"
    CREATE_ROLE = "CREATEROLE"
    DROP_ROLE = "DROPROLE"
    GRANT_PRIVILEGE = "GRANT_PRIVILEGE"
    REVOKE_PRIVILEGE = "REVOKE_PRIVILEGE"
    SHOW_GRANT = "SHOW_GRANT"
    GRANT_ROLE = "GRANT_ROLE"
    REVOKE_ROLE = "REVOKE_ROLE"
    SHOW_ROLES = "SHOW_ROLES"
    SHOW_ROLE_PRINCIPALS = "SHOW_ROLE_PRINCIPALS"
    SHOW_ROLE_GRANT = "SHOW_ROLE_GRANT"
    ALTER_TABLE_FILEFORMAT = "ALTERTABLE_FILEFORMAT"
    ALTER_PARTITION_FILEFORMAT = "ALTERPARTITION_FILEFORMAT"
    ALTER_TABLE_LOCATION = "ALTERTABLE_LOCATION"
    ALTER_PARTITION_LOCATION = "ALTERPARTITION_LOCATION"
    CREATE_TABLE = "CREATETABLE"
    TRUNCATE_TABLE = "TRUNCATETABLE"
    CREATE_TABLE_AS_SELECT = "CREATETABLE_AS_SELECT"
    QUERY = "QUERY"
    ALTER_INDEX_PROPS = "ALTERINDEX_PROPS"
    ALTER_DATABASE = "ALTERDATABASE"
    ALTER_DATABASE_OWNER = "ALTERDATABASE_OWNER"
    DESC_DATABASE = "DESCDATABASE"
    ALTER_TABLE_MERGEFILES = "ALTER_TABLE_MERGE"
    ALTER_PARTITION_MERGEFILES = "ALTER_PARTITION_MERGE"
    ALTER_TABLE_SKEWED = "ALTERTABLE_SKEWED"
    ALTER_TBLPART_SKEWED_LOCATION = "ALTERTBLPART_SKEWED_LOCATION"
    ALTER_TABLE_PARTCOLTYPE = "ALTERTABLE_PARTCOLTYPE"
    ALTER_TABLE_EXCHANGEPARTITION = "ALTERTABLE_EXCHANGEPARTITION"
    ALTER_VIEW_RENAME = "ALTERVIEW_RENAME"
    ALTER_VIEW_AS = "ALTERVIEW_AS"
    ALTER_TABLE_COMPACT = "ALTERTABLE_COMPACT"
    SHOW_COMPACTIONS = "SHOW COMPACTIONS"
    SHOW_TRANSACTIONS = "SHOW TRANSACTIONS"
    START_TRANSACTION = "START TRANSACTION"
    COMMIT = "COMMIT"
    ROLLBACK = "ROLLBACK"
    SET_AUTOCOMMIT = "SET AUTOCOMMIT"
    ABORT_TRANSACTIONS = "ABORT TRANSACTIONS"


class TranslatorAction(str, Enum):
    """What the translator does for an operation kind."""

    UPSERT_DATABASE = "upsert database"
    CREATE_TABLE = "create table"
    REGISTER_PROCESS = "register process"
    RENAME_TABLE = "rename table"
    UPSERT_TABLE = "upsert table"
    RENAME_COLUMN = "rename column"
    ALTER_LOCATION = "alter location"
    DROP_TABLE = "drop table"
    DROP_DATABASE = "drop database"
    IGNORE = "ignore"


_GROUPS: Dict[TranslatorAction, List[OperationKind]] = {
    TranslatorAction.UPSERT_DATABASE: [
        OperationKind.CREATE_DATABASE,
        OperationKind.ALTER_DATABASE,
        OperationKind.ALTER_DATABASE_OWNER,
    ],
    TranslatorAction.CREATE_TABLE: [OperationKind.CREATE_TABLE],
    TranslatorAction.REGISTER_PROCESS: [
        OperationKind.CREATE_TABLE_AS_SELECT,
        OperationKind.CREATE_VIEW,
        OperationKind.ALTER_VIEW_AS,
        OperationKind.LOAD,
        OperationKind.EXPORT,
        OperationKind.IMPORT,
        OperationKind.QUERY,
        OperationKind.TRUNCATE_TABLE,
    ],
    TranslatorAction.RENAME_TABLE: [
        OperationKind.ALTER_TABLE_RENAME,
        OperationKind.ALTER_VIEW_RENAME,
    ],
    TranslatorAction.UPSERT_TABLE: [
        OperationKind.ALTER_TABLE_FILEFORMAT,
        OperationKind.ALTER_TABLE_CLUSTER_SORT,
        OperationKind.ALTER_TABLE_BUCKETNUM,
        OperationKind.ALTER_TABLE_PROPERTIES,
        OperationKind.ALTER_VIEW_PROPERTIES,
        OperationKind.ALTER_TABLE_SERDEPROPERTIES,
        OperationKind.ALTER_TABLE_SERIALIZER,
        OperationKind.ALTER_TABLE_ADDCOLS,
        OperationKind.ALTER_TABLE_REPLACECOLS,
        OperationKind.ALTER_TABLE_PARTCOLTYPE,
    ],
    TranslatorAction.RENAME_COLUMN: [OperationKind.ALTER_TABLE_RENAMECOL],
    TranslatorAction.ALTER_LOCATION: [OperationKind.ALTER_TABLE_LOCATION],
    TranslatorAction.DROP_TABLE: [OperationKind.DROP_TABLE, OperationKind.DROP_VIEW],
    TranslatorAction.DROP_DATABASE: [OperationKind.DROP_DATABASE],
    TranslatorAction.IGNORE: [
        OperationKind.EXPLAIN,
        OperationKind.SWITCH_DATABASE,
        OperationKind.LOCK_DATABASE,
        OperationKind.UNLOCK_DATABASE,
        OperationKind.DESC_TABLE,
        OperationKind.DESC_FUNCTION,
        OperationKind.MSCK,
        OperationKind.ALTER_TABLE_RENAMEPART,
        OperationKind.ALTER_TABLE_UPDATEPARTSTATS,
        OperationKind.ALTER_TABLE_UPDATETABLESTATS,
        OperationKind.ALTER_TABLE_DROPPARTS,
        OperationKind.ALTER_TABLE_ADDPARTS,
        OperationKind.ALTER_TABLE_TOUCH,
        OperationKind.ALTER_TABLE_ARCHIVE,
        OperationKind.ALTER_TABLE_UNARCHIVE,
        OperationKind.ALTER_PARTITION_SERIALIZER,
        OperationKind.ALTER_PARTITION_SERDEPROPERTIES,
        OperationKind.ANALYZE_TABLE,
        OperationKind.ALTER_PARTITION_BUCKETNUM,
        OperationKind.SHOW_DATABASES,
        OperationKind.SHOW_TABLES,
        OperationKind.SHOW_COLUMNS,
        OperationKind.SHOW_TABLESTATUS,
        OperationKind.SHOW_TBLPROPERTIES,
        OperationKind.SHOW_CREATEDATABASE,
        OperationKind.SHOW_CREATETABLE,
        OperationKind.SHOW_FUNCTIONS,
        OperationKind.SHOW_INDEXES,
        OperationKind.SHOW_PARTITIONS,
        OperationKind.SHOW_LOCKS,
        OperationKind.SHOW_CONF,
        OperationKind.CREATE_FUNCTION,
        OperationKind.DROP_FUNCTION,
        OperationKind.RELOAD_FUNCTION,
        OperationKind.CREATE_MACRO,
        OperationKind.DROP_MACRO,
        OperationKind.CREATE_INDEX,
        OperationKind.DROP_INDEX,
        OperationKind.ALTER_INDEX_REBUILD,
        OperationKind.DROP_VIEW_PROPERTIES,
        OperationKind.LOCK_TABLE,
        OperationKind.UNLOCK_TABLE,
        OperationKind.CREATE_ROLE,
        OperationKind.DROP_ROLE,
        OperationKind.GRANT_PRIVILEGE,
        OperationKind.REVOKE_PRIVILEGE,
        OperationKind.SHOW_GRANT,
        OperationKind.GRANT_ROLE,
        OperationKind.REVOKE_ROLE,
        OperationKind.SHOW_ROLES,
        OperationKind.SHOW_ROLE_PRINCIPALS,
        OperationKind.SHOW_ROLE_GRANT,
        OperationKind.ALTER_PARTITION_FILEFORMAT,
        OperationKind.ALTER_PARTITION_LOCATION,
        OperationKind.ALTER_INDEX_PROPS,
        OperationKind.DESC_DATABASE,
        OperationKind.ALTER_TABLE_MERGEFILES,
        OperationKind.ALTER_PARTITION_MERGEFILES,
        OperationKind.ALTER_TABLE_SKEWED,
        OperationKind.ALTER_TBLPART_SKEWED_LOCATION,
        OperationKind.ALTER_TABLE_EXCHANGEPARTITION,
        OperationKind.ALTER_TABLE_COMPACT,
        OperationKind.SHOW_COMPACTIONS,
        OperationKind.SHOW_TRANSACTIONS,
        OperationKind.START_TRANSACTION,
        OperationKind.COMMIT,
        OperationKind.ROLLBACK,
        OperationKind.SET_AUTOCOMMIT,
        OperationKind.ABORT_TRANSACTIONS,
    ],
}


class UnknownOperationError(KeyError):
    """Raised when a raw operation name is not part of the host enumeration."""

    pass


def _build_actions() -> Mapping[OperationKind, TranslatorAction]:
    """Invert the action groups, checking that every kind is assigned once."""
    actions: Dict[OperationKind, TranslatorAction] = {}
    for action, kinds in _GROUPS.items():
        for kind in kinds:
            if kind in actions:
                raise RuntimeError(
                    f"Operation {kind.name} is assigned to both "
                    f"'{actions[kind].value}' and '{action.value}'"
                )
            actions[kind] = action

    missing = [kind.name for kind in OperationKind if kind not in actions]
    if missing:
        raise RuntimeError(
            f"Operations without a translator action: {', '.join(missing)}"
        )
    return MappingProxyType(actions)


OPERATION_MAP: Mapping[str, OperationKind] = MappingProxyType(
    {kind.value: kind for kind in OperationKind}
)
"""Raw operation name -> operation kind, built once at import."""

ACTIONS: Mapping[OperationKind, TranslatorAction] = _build_actions()

PROCESS_NAMED_BY_QUERY: FrozenSet[OperationKind] = frozenset(
    {
        OperationKind.CREATE_TABLE_AS_SELECT,
        OperationKind.CREATE_VIEW,
        OperationKind.ALTER_VIEW_AS,
    }
)
"""Operations whose process entity is named by the lowercased query alone."""


def classify(operation_name: str) -> OperationKind:
    """Map a raw operation name reported by the host engine to its kind.

    Args:
        operation_name: Raw operation name (e.g., "CREATETABLE").

    Returns:
        The matching OperationKind.

    Raises:
        UnknownOperationError: If the name is not a host engine operation.
    """
    try:
        return OPERATION_MAP[operation_name]
    except KeyError:
        raise UnknownOperationError(
            f"Unknown operation name '{operation_name}'"
        ) from None


def action_for(kind: OperationKind) -> TranslatorAction:
    """Return the translator action assigned to an operation kind."""
    return ACTIONS[kind]
