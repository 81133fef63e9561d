"""Shared fixtures: a small sales catalog and an event context factory."""

from datetime import datetime, timezone

import pytest

from lineagehook.bridge.snapshot import SnapshotBridge
from lineagehook.events.models import (
    DatabaseSnapshot,
    EntityRef,
    EventContext,
    FieldSchema,
    StorageSnapshot,
    TableSnapshot,
)
from lineagehook.global_models import EntityType, HookPhase, TableType

FIXED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sales_db():
    return DatabaseSnapshot(
        name="sales",
        description="Sales data",
        location_uri="hdfs://nn/warehouse/sales.db",
        owner_name="etl",
        owner_type="USER",
    )


@pytest.fixture
def orders_table():
    return TableSnapshot(
        db_name="sales",
        table_name="orders",
        owner="etl",
        columns=(
            FieldSchema(name="id", type="int"),
            FieldSchema(name="amount", type="double"),
            FieldSchema(name="customer", type="string"),
        ),
        partition_keys=(FieldSchema(name="ds", type="string"),),
        storage=StorageSnapshot(location="hdfs://nn/warehouse/sales.db/orders"),
    )


@pytest.fixture
def customers_table():
    return TableSnapshot(
        db_name="sales",
        table_name="customers",
        owner="etl",
        columns=(
            FieldSchema(name="id", type="int"),
            FieldSchema(name="name", type="string"),
        ),
    )


@pytest.fixture
def external_table():
    return TableSnapshot(
        db_name="sales",
        table_name="raw_orders",
        owner="etl",
        table_type=TableType.EXTERNAL_TABLE,
        columns=(FieldSchema(name="line", type="string"),),
        storage=StorageSnapshot(location="hdfs://nn/data/Raw_Orders/"),
    )


@pytest.fixture
def bridge(sales_db, orders_table, customers_table, external_table):
    """Catalog with the sales database and its three tables."""
    bridge = SnapshotBridge(cluster_name="primary")
    bridge.put_database(sales_db)
    for table in (orders_table, customers_table, external_table):
        bridge.put_table(table)
    return bridge


@pytest.fixture
def clock():
    return lambda: FIXED_TIME


@pytest.fixture
def make_context():
    """Factory for post-execution event contexts."""

    def _make(operation, inputs=(), outputs=(), **kwargs):
        values = {
            "user": "alice",
            "hook_phase": HookPhase.POST_EXEC,
            "query_id": "query-1",
        }
        values.update(kwargs)
        return EventContext(
            operation=operation,
            inputs=tuple(inputs),
            outputs=tuple(outputs),
            **values,
        )

    return _make


@pytest.fixture
def table_ref():
    """Factory for TABLE entity references."""

    def _make(table, **kwargs):
        return EntityRef(type=EntityType.TABLE, table=table, **kwargs)

    return _make
