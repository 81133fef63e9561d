"""Pydantic models for host engine events.

Snapshots describe databases and tables as the host engine saw them when
the event was raised. They are frozen so that a table's identity cannot
change underneath a translation, which matters for renames where the
engine-side table has already moved to its new name.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from lineagehook.global_models import EntityType, HookPhase, TableType, WriteType
from lineagehook.operations import OperationKind


class FieldSchema(BaseModel):
    """A column definition. Equality is structural over all three fields."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    type: str = Field(default="string", description="Column data type")
    comment: Optional[str] = Field(None, description="Column comment")


class StorageSnapshot(BaseModel):
    """Storage descriptor of a table."""

    model_config = ConfigDict(frozen=True)

    location: Optional[str] = Field(None, description="Data location URI")
    input_format: Optional[str] = None
    output_format: Optional[str] = None
    compressed: bool = False
    num_buckets: int = -1
    serialization_lib: Optional[str] = None
    serde_parameters: Dict[str, str] = Field(default_factory=dict)
    bucket_cols: Tuple[str, ...] = ()
    sort_cols: Tuple[str, ...] = ()
    parameters: Dict[str, str] = Field(default_factory=dict)


class DatabaseSnapshot(BaseModel):
    """A database as known to the host engine."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Database name")
    description: Optional[str] = None
    location_uri: Optional[str] = None
    parameters: Dict[str, str] = Field(default_factory=dict)
    owner_name: Optional[str] = None
    owner_type: Optional[str] = None


class TableSnapshot(BaseModel):
    """A table or view as known to the host engine."""

    model_config = ConfigDict(frozen=True)

    db_name: str = Field(..., description="Owning database name")
    table_name: str = Field(..., description="Table name")
    owner: Optional[str] = None
    table_type: TableType = TableType.MANAGED_TABLE
    temporary: bool = False
    columns: Tuple[FieldSchema, ...] = ()
    partition_keys: Tuple[FieldSchema, ...] = ()
    storage: StorageSnapshot = Field(default_factory=StorageSnapshot)
    parameters: Dict[str, str] = Field(default_factory=dict)
    comment: Optional[str] = None
    view_original_text: Optional[str] = None
    view_expanded_text: Optional[str] = None
    create_time: Optional[int] = Field(None, description="Seconds since epoch")
    last_access_time: Optional[int] = Field(None, description="Seconds since epoch")
    retention: int = 0

    @property
    def all_cols(self) -> List[FieldSchema]:
        """Regular columns followed by partition keys."""
        return list(self.columns) + list(self.partition_keys)

    @property
    def data_location(self) -> Optional[str]:
        """Storage location of the table data."""
        return self.storage.location

    @property
    def is_external(self) -> bool:
        return self.table_type == TableType.EXTERNAL_TABLE

    def same_identity(self, other: "TableSnapshot") -> bool:
        """Check whether two snapshots name the same (db, table)."""
        return (
            self.db_name.lower() == other.db_name.lower()
            and self.table_name.lower() == other.table_name.lower()
        )


class EntityRef(BaseModel):
    """A read or write entity reported by the host engine."""

    model_config = ConfigDict(frozen=True)

    type: EntityType = Field(..., description="Kind of referenced object")
    database: Optional[DatabaseSnapshot] = Field(
        None, description="Database, for DATABASE entities"
    )
    table: Optional[TableSnapshot] = Field(
        None, description="Table, for TABLE and PARTITION entities"
    )
    partition_values: Tuple[str, ...] = ()
    location: Optional[str] = Field(
        None, description="Path, for DFS_DIR and LOCAL_DIR entities"
    )
    write_type: Optional[WriteType] = Field(
        None, description="Write mode, for output entities"
    )
    temp_uri: bool = Field(
        default=False, description="True when the path is a query scratch location"
    )

    @property
    def database_name(self) -> Optional[str]:
        """Name of the database this entity lives in."""
        if self.database is not None:
            return self.database.name
        if self.table is not None:
            return self.table.db_name
        return None


class HookEvent(BaseModel):
    """A raw event as delivered by the host engine's execution hook."""

    hook_type: HookPhase = HookPhase.POST_EXEC
    operation_name: str = Field(..., description="Raw operation name")
    user_name: Optional[str] = None
    inputs: List[EntityRef] = Field(default_factory=list)
    outputs: List[EntityRef] = Field(default_factory=list)
    query_id: Optional[str] = None
    query_text: Optional[str] = None
    query_start_time: Optional[int] = Field(
        None, description="Query start time in milliseconds since epoch"
    )
    query_type: Optional[str] = None
    query_plan: Any = Field(None, description="Engine query plan, any JSON-able shape")


class EventContext(BaseModel):
    """Normalized, immutable view of one event, ready for translation."""

    model_config = ConfigDict(frozen=True)

    inputs: Tuple[EntityRef, ...] = ()
    outputs: Tuple[EntityRef, ...] = ()
    user: str
    operation: OperationKind
    hook_phase: HookPhase
    query_id: Optional[str] = None
    query_text: Optional[str] = None
    query_start_time: Optional[datetime] = None
    query_type: Optional[str] = None
    query_plan_json: Dict[str, Any] = Field(default_factory=dict)

    def outputs_of_type(self, entity_type: EntityType) -> List[EntityRef]:
        """Return output entities of the given type, in event order."""
        return [ref for ref in self.outputs if ref.type == entity_type]

    def first_output(self, entity_type: EntityType) -> Optional[EntityRef]:
        """Return the first output entity of the given type, if any."""
        for ref in self.outputs:
            if ref.type == entity_type:
                return ref
        return None
