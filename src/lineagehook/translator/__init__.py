"""Event-to-notification translation engine."""

from lineagehook.translator.delete import DeleteHandler
from lineagehook.translator.entities import BuiltEntities, EntityBuilder
from lineagehook.translator.errors import PreconditionError, TranslationError
from lineagehook.translator.process import (
    ProcessRegistrar,
    get_process_qualified_name,
    is_select_query,
)
from lineagehook.translator.rename import RenameReconciler, find_changed_column_names
from lineagehook.translator.translator import EventTranslator

__all__ = [
    "BuiltEntities",
    "DeleteHandler",
    "EntityBuilder",
    "EventTranslator",
    "PreconditionError",
    "ProcessRegistrar",
    "RenameReconciler",
    "TranslationError",
    "find_changed_column_names",
    "get_process_qualified_name",
    "is_select_query",
]
