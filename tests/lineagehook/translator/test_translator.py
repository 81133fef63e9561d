"""Tests for the main event translator."""

import pytest

from lineagehook.bridge.base import BridgeError
from lineagehook.events.models import EntityRef, TableSnapshot
from lineagehook.global_models import EntityType, HookPhase
from lineagehook.notification.models import EntityCreateRequest, EntityDeleteRequest
from lineagehook.operations import ACTIONS, OperationKind, TranslatorAction
from lineagehook.translator.errors import TranslationError
from lineagehook.translator.translator import EventTranslator


@pytest.fixture
def translator(bridge, clock):
    return EventTranslator(bridge, clock=clock)


class TestTranslate:
    """Tests for EventTranslator.translate."""

    @pytest.mark.parametrize("phase", [HookPhase.PRE_EXEC, HookPhase.ON_FAILURE])
    def test_non_post_exec_phase_rejected(self, translator, make_context, phase):
        """Test that only post-execution events are translated."""
        with pytest.raises(TranslationError):
            translator.translate(make_context(OperationKind.QUERY, hook_phase=phase))

    @pytest.mark.parametrize(
        "kind",
        [kind for kind, action in ACTIONS.items() if action is TranslatorAction.IGNORE],
    )
    def test_ignored_operations(self, translator, make_context, orders_table, table_ref, kind):
        """Test that ignored operations produce no messages."""
        context = make_context(
            kind, inputs=[table_ref(orders_table)], outputs=[table_ref(orders_table)]
        )
        assert translator.translate(context) == []

    def test_fresh_list_per_call(self, translator, make_context, sales_db):
        """Test that each call returns its own message list."""
        context = make_context(
            OperationKind.CREATE_DATABASE,
            outputs=[EntityRef(type=EntityType.DATABASE, database=sales_db)],
        )
        first = translator.translate(context)
        second = translator.translate(context)
        assert first == second
        assert first is not second

    def test_create_database(self, translator, make_context, sales_db):
        """Test that database creation upserts the database."""
        context = make_context(
            OperationKind.CREATE_DATABASE,
            outputs=[EntityRef(type=EntityType.DATABASE, database=sales_db)],
        )

        messages = translator.translate(context)

        assert len(messages) == 1
        assert isinstance(messages[0], EntityCreateRequest)
        assert messages[0].entities[0].qualified_name == "sales@primary"

    def test_alter_table_properties(self, translator, make_context, orders_table, table_ref):
        """Test that table alterations upsert the table."""
        context = make_context(
            OperationKind.ALTER_TABLE_PROPERTIES, outputs=[table_ref(orders_table)]
        )

        messages = translator.translate(context)

        assert [e.type_name for e in messages[0].entities] == ["hive_db", "hive_table"]

    def test_create_managed_table(self, translator, make_context, orders_table, table_ref):
        """Test that a managed table creation emits a single upsert."""
        context = make_context(
            OperationKind.CREATE_TABLE,
            outputs=[table_ref(orders_table)],
            query_text="CREATE TABLE sales.orders (id INT)",
        )
        assert len(translator.translate(context)) == 1

    def test_create_external_table(
        self, translator, make_context, external_table, table_ref
    ):
        """Test that an external table creation also registers path lineage."""
        context = make_context(
            OperationKind.CREATE_TABLE,
            outputs=[table_ref(external_table)],
            query_text="CREATE EXTERNAL TABLE sales.raw_orders (line STRING)",
        )

        messages = translator.translate(context)

        assert len(messages) == 2
        assert messages[1].entities[-1].type_name == "hive_process"

    def test_alter_location(self, translator, make_context, external_table, table_ref):
        """Test that a location change re-registers external lineage."""
        context = make_context(
            OperationKind.ALTER_TABLE_LOCATION,
            outputs=[table_ref(external_table)],
            query_text="ALTER TABLE sales.raw_orders SET LOCATION 'hdfs://nn/data/v2'",
        )

        messages = translator.translate(context)

        assert len(messages) == 2

    def test_drop_database(self, translator, make_context, sales_db, orders_table, table_ref):
        """Test that DROP DATABASE CASCADE deletes tables then the database."""
        context = make_context(
            OperationKind.DROP_DATABASE,
            outputs=[
                EntityRef(type=EntityType.DATABASE, database=sales_db),
                table_ref(orders_table),
            ],
        )

        messages = translator.translate(context)

        assert all(isinstance(m, EntityDeleteRequest) for m in messages)
        assert [m.type_name for m in messages] == ["hive_table", "hive_db"]

    def test_rename_dispatched(self, translator, make_context, orders_table, table_ref):
        """Test that table renames reach the rename reconciler."""
        renamed = orders_table.model_copy(update={"table_name": "orders_v2"})
        context = make_context(
            OperationKind.ALTER_TABLE_RENAME,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(renamed)],
        )

        messages = translator.translate(context)

        assert messages[-1].attribute_value == "sales.orders@primary"
        assert messages[-1].entity.qualified_name == "sales.orders_v2@primary"

    def test_query_dispatched(self, translator, make_context, orders_table, customers_table, table_ref):
        """Test that queries reach the process registrar."""
        context = make_context(
            OperationKind.QUERY,
            inputs=[table_ref(orders_table)],
            outputs=[table_ref(customers_table)],
            query_text="INSERT INTO TABLE sales.customers SELECT id, customer FROM sales.orders",
        )

        messages = translator.translate(context)

        assert messages[-1].entities[-1].type_name == "hive_process"

    def test_bridge_error_propagates(self, translator, make_context, table_ref):
        """Test that metastore failures abort the translation."""
        context = make_context(
            OperationKind.ALTER_TABLE_PROPERTIES,
            outputs=[table_ref(TableSnapshot(db_name="sales", table_name="missing"))],
        )
        with pytest.raises(BridgeError):
            translator.translate(context)
