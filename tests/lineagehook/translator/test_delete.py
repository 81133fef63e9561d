"""Tests for delete handlers."""

from lineagehook.events.models import DatabaseSnapshot, EntityRef, TableSnapshot
from lineagehook.global_models import EntityType
from lineagehook.notification.models import EntityDeleteRequest
from lineagehook.operations import OperationKind
from lineagehook.translator.delete import DeleteHandler


class TestDeleteTables:
    """Tests for DeleteHandler.delete_tables."""

    def test_delete_each_table(self, bridge, make_context, orders_table, table_ref):
        """Test that every output table is deleted."""
        gone = TableSnapshot(db_name="sales", table_name="Gone")
        context = make_context(
            OperationKind.DROP_TABLE,
            outputs=[table_ref(orders_table), table_ref(gone)],
        )
        messages = []

        DeleteHandler(bridge).delete_tables(context, messages)

        assert all(isinstance(m, EntityDeleteRequest) for m in messages)
        assert [(m.type_name, m.attribute_value) for m in messages] == [
            ("hive_table", "sales.orders@primary"),
            ("hive_table", "sales.gone@primary"),
        ]
        assert all(m.attribute == "qualifiedName" for m in messages)
        assert all(m.user == "alice" for m in messages)

    def test_no_metastore_lookup(self, bridge, make_context, table_ref, mocker):
        """Test that deletes are derived from the event alone."""
        spy = mocker.spy(bridge, "get_table")
        context = make_context(
            OperationKind.DROP_VIEW,
            outputs=[table_ref(TableSnapshot(db_name="sales", table_name="v"))],
        )

        DeleteHandler(bridge).delete_tables(context, [])

        spy.assert_not_called()


class TestDeleteDatabase:
    """Tests for DeleteHandler.delete_database."""

    def test_cascade_order(self, bridge, make_context, table_ref):
        """Test that tables are deleted before their database."""
        db_ref = EntityRef(type=EntityType.DATABASE, database=DatabaseSnapshot(name="old"))
        context = make_context(
            OperationKind.DROP_DATABASE,
            outputs=[
                db_ref,
                table_ref(TableSnapshot(db_name="old", table_name="t1")),
                table_ref(TableSnapshot(db_name="old", table_name="t2")),
            ],
        )
        messages = []

        DeleteHandler(bridge).delete_database(context, messages)

        assert [(m.type_name, m.attribute_value) for m in messages] == [
            ("hive_table", "old.t1@primary"),
            ("hive_table", "old.t2@primary"),
            ("hive_db", "old@primary"),
        ]

    def test_empty_database(self, bridge, make_context):
        """Test dropping a database without tables."""
        db_ref = EntityRef(type=EntityType.DATABASE, database=DatabaseSnapshot(name="old"))
        messages = []

        DeleteHandler(bridge).delete_database(
            make_context(OperationKind.DROP_DATABASE, outputs=[db_ref]), messages
        )

        assert [m.attribute_value for m in messages] == ["old@primary"]
