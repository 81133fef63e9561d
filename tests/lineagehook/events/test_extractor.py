"""Tests for event context extraction."""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from lineagehook.events.extractor import describe, extract_context, get_user
from lineagehook.events.models import EntityRef, HookEvent
from lineagehook.global_models import EntityType, HookPhase
from lineagehook.operations import OperationKind, UnknownOperationError


class TestGetUser:
    """Tests for get_user function."""

    def test_event_user_is_used(self):
        """Test that the event's user name wins."""
        assert get_user("alice") == "alice"

    def test_falls_back_to_os_user(self, mocker):
        """Test that a missing user name falls back to the OS user."""
        mocker.patch("lineagehook.events.extractor.getpass.getuser", return_value="hive")
        assert get_user(None) == "hive"
        assert get_user("") == "hive"


class TestExtractContext:
    """Tests for extract_context function."""

    def test_basic_fields(self, orders_table, table_ref):
        """Test that event fields are carried over."""
        event = HookEvent(
            operation_name="QUERY",
            user_name="alice",
            inputs=[table_ref(orders_table)],
            query_id="q-42",
            query_text="SELECT * FROM sales.orders",
            query_start_time=1_700_000_000_000,
            query_type="QUERY",
        )

        context = extract_context(event)

        assert context.operation is OperationKind.QUERY
        assert context.hook_phase is HookPhase.POST_EXEC
        assert context.user == "alice"
        assert context.query_id == "q-42"
        assert context.query_text == "SELECT * FROM sales.orders"
        assert context.query_type == "QUERY"
        assert context.query_start_time == datetime(
            2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc
        )
        assert len(context.inputs) == 1
        assert context.outputs == ()

    def test_unknown_operation_raises(self):
        """Test that an unknown operation name fails extraction."""
        with pytest.raises(UnknownOperationError):
            extract_context(HookEvent(operation_name="NOT_AN_OPERATION"))

    def test_duplicate_refs_removed_in_order(self, orders_table, customers_table, table_ref):
        """Test that repeated entity references keep their first position."""
        event = HookEvent(
            operation_name="QUERY",
            user_name="alice",
            inputs=[
                table_ref(orders_table),
                table_ref(customers_table),
                table_ref(orders_table),
            ],
        )

        context = extract_context(event)

        assert [ref.table.table_name for ref in context.inputs] == [
            "orders",
            "customers",
        ]

    def test_plan_is_explained(self):
        """Test that the query plan is serialized into a dict."""
        event = HookEvent(
            operation_name="QUERY",
            user_name="alice",
            query_plan='{"stages": [1, 2]}',
        )
        assert extract_context(event).query_plan_json == {"stages": [1, 2]}

    def test_custom_explainer_is_used(self, mocker):
        """Test that a supplied explainer is called with the raw plan."""
        explainer = mocker.Mock()
        explainer.explain.return_value = {"custom": True}
        event = HookEvent(operation_name="QUERY", user_name="alice", query_plan="x")

        context = extract_context(event, explainer)

        explainer.explain.assert_called_once_with("x")
        assert context.query_plan_json == {"custom": True}

    def test_context_is_immutable(self):
        """Test that the extracted context cannot be modified."""
        context = extract_context(HookEvent(operation_name="QUERY", user_name="alice"))
        with pytest.raises(ValidationError):
            context.user = "mallory"

    def test_phase_is_preserved(self):
        """Test that a pre-execution phase reaches the context unchanged."""
        event = HookEvent(
            operation_name="QUERY", user_name="alice", hook_type=HookPhase.PRE_EXEC
        )
        assert extract_context(event).hook_phase is HookPhase.PRE_EXEC


class TestEventContext:
    """Tests for EventContext helpers."""

    def test_outputs_of_type(self, make_context, orders_table, sales_db, table_ref):
        """Test filtering outputs by entity type."""
        db_ref = EntityRef(type=EntityType.DATABASE, database=sales_db)
        context = make_context(
            OperationKind.DROP_DATABASE, outputs=[db_ref, table_ref(orders_table)]
        )

        assert context.outputs_of_type(EntityType.TABLE) == [table_ref(orders_table)]
        assert context.first_output(EntityType.DATABASE) == db_ref
        assert context.first_output(EntityType.PARTITION) is None


class TestDescribe:
    """Tests for describe function."""

    def test_describe_summary(self, make_context, orders_table, table_ref):
        """Test that describe reports the operation and entity counts."""
        context = make_context(
            OperationKind.QUERY, inputs=[table_ref(orders_table)], query_id="q-1"
        )

        summary = json.loads(describe(context))

        assert summary == {
            "operation": "QUERY",
            "query_id": "q-1",
            "inputs": 1,
            "outputs": 0,
        }
