"""Tests for operation classification."""

import pytest

from lineagehook.operations import (
    ACTIONS,
    OPERATION_MAP,
    PROCESS_NAMED_BY_QUERY,
    OperationKind,
    TranslatorAction,
    UnknownOperationError,
    action_for,
    classify,
)


class TestClassify:
    """Tests for classify function."""

    def test_every_kind_round_trips(self):
        """Test that each operation kind is found by its raw name."""
        for kind in OperationKind:
            assert classify(kind.value) is kind

    def test_classification_is_deterministic(self):
        """Test that repeated lookups give the same kind."""
        assert classify("CREATETABLE") is classify("CREATETABLE")

    @pytest.mark.parametrize(
        "raw_name,kind",
        [
            ("CREATEDATABASE", OperationKind.CREATE_DATABASE),
            ("CREATETABLE_AS_SELECT", OperationKind.CREATE_TABLE_AS_SELECT),
            ("ALTERTABLE_RENAMECOL", OperationKind.ALTER_TABLE_RENAMECOL),
            ("ALTERTABLE_LOCATION", OperationKind.ALTER_TABLE_LOCATION),
            ("DROPDATABASE", OperationKind.DROP_DATABASE),
            ("QUERY", OperationKind.QUERY),
            ("SHOW COMPACTIONS", OperationKind.SHOW_COMPACTIONS),
        ],
    )
    def test_known_names(self, raw_name, kind):
        """Test classification of representative raw names."""
        assert classify(raw_name) is kind

    def test_unknown_name_raises(self):
        """Test that an unknown raw name raises UnknownOperationError."""
        with pytest.raises(UnknownOperationError) as exc_info:
            classify("FROBNICATE")
        assert "FROBNICATE" in str(exc_info.value)

    def test_lookup_is_case_sensitive(self):
        """Test that raw names must match exactly."""
        with pytest.raises(UnknownOperationError):
            classify("createtable")

    def test_unknown_operation_error_is_key_error(self):
        """Test that UnknownOperationError can be caught as KeyError."""
        with pytest.raises(KeyError):
            classify("")


class TestOperationMap:
    """Tests for the operation lookup tables."""

    def test_map_covers_every_kind(self):
        """Test that the raw-name map has one entry per kind."""
        assert len(OPERATION_MAP) == len(OperationKind)
        assert set(OPERATION_MAP.values()) == set(OperationKind)

    def test_map_is_read_only(self):
        """Test that the lookup table cannot be modified."""
        with pytest.raises(TypeError):
            OPERATION_MAP["NEW"] = OperationKind.QUERY  # type: ignore

    def test_every_kind_has_action(self):
        """Test that every kind is assigned exactly one action."""
        assert set(ACTIONS) == set(OperationKind)

    @pytest.mark.parametrize(
        "kind,action",
        [
            (OperationKind.CREATE_DATABASE, TranslatorAction.UPSERT_DATABASE),
            (OperationKind.ALTER_DATABASE_OWNER, TranslatorAction.UPSERT_DATABASE),
            (OperationKind.CREATE_TABLE, TranslatorAction.CREATE_TABLE),
            (OperationKind.LOAD, TranslatorAction.REGISTER_PROCESS),
            (OperationKind.TRUNCATE_TABLE, TranslatorAction.REGISTER_PROCESS),
            (OperationKind.ALTER_VIEW_RENAME, TranslatorAction.RENAME_TABLE),
            (OperationKind.ALTER_TABLE_ADDCOLS, TranslatorAction.UPSERT_TABLE),
            (OperationKind.ALTER_TABLE_RENAMECOL, TranslatorAction.RENAME_COLUMN),
            (OperationKind.ALTER_TABLE_LOCATION, TranslatorAction.ALTER_LOCATION),
            (OperationKind.DROP_VIEW, TranslatorAction.DROP_TABLE),
            (OperationKind.DROP_DATABASE, TranslatorAction.DROP_DATABASE),
            (OperationKind.SHOW_TABLES, TranslatorAction.IGNORE),
            (OperationKind.ALTER_TABLE_ADDPARTS, TranslatorAction.IGNORE),
        ],
    )
    def test_action_for(self, kind, action):
        """Test the action assigned to representative kinds."""
        assert action_for(kind) is action

    def test_process_named_by_query(self):
        """Test which operations name their process by query text alone."""
        assert PROCESS_NAMED_BY_QUERY == {
            OperationKind.CREATE_TABLE_AS_SELECT,
            OperationKind.CREATE_VIEW,
            OperationKind.ALTER_VIEW_AS,
        }
