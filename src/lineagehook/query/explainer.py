"""Best-effort serialization of engine query plans."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class QueryExplainer:
    """Turn whatever plan the engine attached to an event into a JSON object.

    Never raises: a plan that cannot be represented as a JSON object is
    replaced by an empty dict.
    """

    def explain(self, plan: Any) -> Dict[str, Any]:
        """Serialize a query plan.

        Args:
            plan: A JSON string or bytes, a mapping, a pydantic model, or None.

        Returns:
            The plan as a JSON-compatible dict, or {} on failure.
        """
        if plan is None:
            return {}

        try:
            if isinstance(plan, BaseModel):
                parsed = plan.model_dump(mode="json")
            elif isinstance(plan, (str, bytes, bytearray)):
                parsed = json.loads(plan)
            elif isinstance(plan, Mapping):
                # Round trip to reject values that are not JSON-able
                parsed = json.loads(json.dumps(dict(plan)))
            else:
                raise TypeError(f"Unsupported plan type {type(plan).__name__}")
        except (TypeError, ValueError) as e:
            logger.info("Failed to get query plan: %s", e)
            return {}

        if not isinstance(parsed, dict):
            logger.info("Query plan is not a JSON object, ignoring it")
            return {}
        return parsed
