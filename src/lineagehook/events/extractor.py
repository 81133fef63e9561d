"""Normalize raw host events into immutable event contexts."""

import getpass
import json
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from lineagehook.events.models import EntityRef, EventContext, HookEvent
from lineagehook.operations import classify
from lineagehook.query.explainer import QueryExplainer


def get_user(user_name: Optional[str]) -> str:
    """Return the event's user, or the current OS user when it has none."""
    if user_name:
        return user_name
    return getpass.getuser()


def _unique(refs: Iterable[EntityRef]) -> Tuple[EntityRef, ...]:
    """Drop repeated entity references, keeping first-seen order."""
    seen = set()
    result: List[EntityRef] = []
    for ref in refs:
        key = ref.model_dump_json()
        if key not in seen:
            seen.add(key)
            result.append(ref)
    return tuple(result)


def _start_time(millis: Optional[int]) -> Optional[datetime]:
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


def extract_context(
    event: HookEvent, explainer: Optional[QueryExplainer] = None
) -> EventContext:
    """
    Build the translation context for a raw event.

    Args:
        event: Event as delivered by the host engine
        explainer: Plan serializer; a default QueryExplainer if omitted

    Returns:
        Frozen EventContext

    Raises:
        UnknownOperationError: If the operation name is not a host operation
    """
    explainer = explainer or QueryExplainer()
    return EventContext(
        inputs=_unique(event.inputs),
        outputs=_unique(event.outputs),
        user=get_user(event.user_name),
        operation=classify(event.operation_name),
        hook_phase=event.hook_type,
        query_id=event.query_id,
        query_text=event.query_text,
        query_start_time=_start_time(event.query_start_time),
        query_type=event.query_type,
        query_plan_json=explainer.explain(event.query_plan),
    )


def describe(context: EventContext) -> str:
    """Short human-readable summary used in log lines."""
    return json.dumps(
        {
            "operation": context.operation.name,
            "query_id": context.query_id,
            "inputs": len(context.inputs),
            "outputs": len(context.outputs),
        }
    )
