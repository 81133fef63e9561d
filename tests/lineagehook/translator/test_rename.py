"""Tests for table and column rename reconciliation."""

import pytest

from lineagehook.events.models import FieldSchema, TableSnapshot
from lineagehook.notification.models import (
    EntityCreateRequest,
    EntityPartialUpdateRequest,
)
from lineagehook.operations import OperationKind
from lineagehook.translator.entities import EntityBuilder
from lineagehook.translator.errors import PreconditionError
from lineagehook.translator.rename import RenameReconciler, find_changed_column_names


def _cols(*names):
    return tuple(FieldSchema(name=name) for name in names)


@pytest.fixture
def reconciler(bridge):
    return RenameReconciler(bridge, EntityBuilder(bridge))


class TestFindChangedColumnNames:
    """Tests for find_changed_column_names function."""

    def test_single_rename(self):
        """Test that the renamed column is found."""
        assert find_changed_column_names(_cols("a", "b", "c"), _cols("a", "x", "c")) == (
            "b",
            "x",
        )

    def test_type_change_counts_as_difference(self):
        """Test that columns compare on type as well as name."""
        old = (FieldSchema(name="a", type="int"), FieldSchema(name="b"))
        new = (FieldSchema(name="a", type="bigint"), FieldSchema(name="b"))
        assert find_changed_column_names(old, new) == ("a", "a")

    def test_no_difference_defaults_to_first_column(self):
        """Test the result when nothing changed."""
        assert find_changed_column_names(_cols("a", "b"), _cols("a", "b")) == ("a", "a")

    def test_reordered_columns_are_not_renames(self):
        """Test that a pure reorder reports no rename."""
        assert find_changed_column_names(_cols("a", "b"), _cols("b", "a")) == ("a", "a")


class TestRenameTable:
    """Tests for RenameReconciler.rename_table."""

    @pytest.fixture
    def renamed(self, orders_table):
        return orders_table.model_copy(update={"table_name": "orders_v2"})

    def test_message_order(self, reconciler, make_context, orders_table, renamed, table_ref):
        """Test create, then columns, then storage descriptor, then table."""
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(orders_table), table_ref(renamed)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        assert isinstance(messages[0], EntityCreateRequest)
        updates = messages[1:]
        assert all(isinstance(m, EntityPartialUpdateRequest) for m in updates)
        assert [m.type_name for m in updates] == (
            ["hive_column"] * 4 + ["hive_storagedesc", "hive_table"]
        )

    def test_keys_move_to_new_table(
        self, reconciler, make_context, orders_table, renamed, table_ref
    ):
        """Test old and new keys of every re-keyed entity."""
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(orders_table), table_ref(renamed)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        create = messages[0]
        assert create.entities[1].qualified_name == "sales.orders@primary"

        updates = messages[1:]
        assert [(m.attribute_value, m.entity.qualified_name) for m in updates] == [
            ("sales.orders.id@primary", "sales.orders_v2.id@primary"),
            ("sales.orders.amount@primary", "sales.orders_v2.amount@primary"),
            ("sales.orders.customer@primary", "sales.orders_v2.customer@primary"),
            ("sales.orders.ds@primary", "sales.orders_v2.ds@primary"),
            ("sales.orders@primary_storage", "sales.orders_v2@primary_storage"),
            ("sales.orders@primary", "sales.orders_v2@primary"),
        ]
        table_update = updates[-1].entity
        assert table_update.get("name") == "orders_v2"
        assert table_update.get("aliases") == ["orders"]

    def test_rename_without_columns(self, reconciler, make_context, table_ref):
        """Test a rename from sales.A to sales.B for a table without columns."""
        old = TableSnapshot(db_name="sales", table_name="A")
        new = TableSnapshot(db_name="sales", table_name="B")
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(old)],
            outputs=[table_ref(new)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        keys = [(m.attribute_value, m.entity.qualified_name) for m in messages[1:]]
        assert keys == [
            ("sales.a@primary_storage", "sales.b@primary_storage"),
            ("sales.a@primary", "sales.b@primary"),
        ]

    def test_old_name_only_is_noop(self, reconciler, make_context, orders_table, table_ref):
        """Test that outputs naming only the old table produce nothing."""
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(orders_table)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        assert messages == []

    def test_same_name_different_case_is_not_a_target(
        self, reconciler, make_context, orders_table, table_ref
    ):
        """Test that identity comparison ignores case."""
        upper = orders_table.model_copy(update={"table_name": "ORDERS"})
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(upper)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        assert messages == []

    def test_multiple_targets_rejected(
        self, reconciler, make_context, orders_table, renamed, table_ref
    ):
        """Test that two distinct new names are a precondition failure."""
        other = orders_table.model_copy(update={"table_name": "orders_v3"})
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(renamed), table_ref(other)],
        )

        with pytest.raises(PreconditionError):
            reconciler.rename_table(context, [])

    def test_requires_single_input(self, reconciler, make_context, renamed, table_ref):
        """Test that a rename without an input table is rejected."""
        context = make_context(OperationKind.ALTER_TABLE_RENAME, outputs=[table_ref(renamed)])
        with pytest.raises(PreconditionError):
            reconciler.rename_table(context, [])

    def test_requires_output_table(self, reconciler, make_context, orders_table, table_ref):
        """Test that a rename without output tables is rejected."""
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME, inputs=[table_ref(orders_table)]
        )
        with pytest.raises(PreconditionError):
            reconciler.rename_table(context, [])

    def test_temporary_table_skipped(self, reconciler, make_context, table_ref):
        """Test that renaming a temporary table emits only the database upsert."""
        old = TableSnapshot(db_name="sales", table_name="tmp_a", temporary=True)
        new = TableSnapshot(db_name="sales", table_name="tmp_b", temporary=True)
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(old)],
            outputs=[table_ref(new)],
        )
        messages = []

        reconciler.rename_table(context, messages)

        assert len(messages) == 1
        assert [e.type_name for e in messages[0].entities] == ["hive_db"]


class TestRenameColumn:
    """Tests for RenameReconciler.rename_column."""

    def test_column_rename(self, reconciler, bridge, make_context, customers_table, table_ref):
        """Test the messages for renaming customers.name to full_name."""
        new_table = customers_table.model_copy(
            update={"columns": _cols("id", "full_name")}
        )
        old_table = customers_table.model_copy(update={"columns": _cols("id", "name")})
        bridge.put_table(new_table)
        context = make_context(
            OperationKind.ALTER_TABLE_RENAMECOL,
            inputs=[table_ref(old_table)],
            outputs=[table_ref(new_table)],
        )
        messages = []

        reconciler.rename_column(context, messages)

        assert [type(m) for m in messages] == [
            EntityCreateRequest,
            EntityPartialUpdateRequest,
            EntityCreateRequest,
        ]
        pre, update, post = messages
        assert [c.get("name") for c in pre.entities[1].get("columns")] == ["id", "name"]
        assert update.type_name == "hive_column"
        assert update.attribute_value == "sales.customers.name@primary"
        assert update.entity.qualified_name == "sales.customers.full_name@primary"
        assert [c.get("name") for c in post.entities[1].get("columns")] == [
            "id",
            "full_name",
        ]

    def test_column_count_mismatch(
        self, reconciler, make_context, customers_table, table_ref
    ):
        """Test that differing column counts are rejected."""
        new_table = customers_table.model_copy(
            update={"columns": _cols("id", "name", "extra")}
        )
        context = make_context(
            OperationKind.ALTER_TABLE_RENAMECOL,
            inputs=[table_ref(customers_table)],
            outputs=[table_ref(new_table)],
        )
        messages = []

        with pytest.raises(PreconditionError):
            reconciler.rename_column(context, messages)
        assert messages == []

    def test_partition_keys_are_compared(
        self, reconciler, make_context, orders_table, table_ref
    ):
        """Test that partition keys take part in the column diff."""
        new_table = orders_table.model_copy(update={"partition_keys": _cols("day")})
        context = make_context(
            OperationKind.ALTER_TABLE_RENAMECOL,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(new_table)],
        )
        messages = []

        reconciler.rename_column(context, messages)

        update = messages[1]
        assert update.attribute_value == "sales.orders.ds@primary"
        assert update.entity.qualified_name == "sales.orders.day@primary"
