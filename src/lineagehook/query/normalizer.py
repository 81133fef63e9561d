"""Query text canonicalization using SQLGlot.

Lineage process names are derived from the query text, so two runs of the
same statement must produce the same string even when whitespace, keyword
case or literal values differ. The normalizer re-renders the statement
through SQLGlot and (optionally) masks literals.
"""

import logging
from typing import Optional

from sqlglot import exp, parse

logger = logging.getLogger(__name__)


def lower(text: Optional[str]) -> Optional[str]:
    """Lowercase and strip a string, mapping empty values to None."""
    if not text:
        return None
    return text.lower().strip()


def _mask_literal(node: exp.Expression) -> exp.Expression:
    if isinstance(node, exp.Literal):
        return exp.Placeholder()
    return node


class QueryNormalizer:
    """Canonicalize query text so equivalent statements compare equal."""

    def __init__(self, dialect: str = "hive", mask_literals: bool = True):
        """
        Initialize the normalizer.

        Args:
            dialect: SQL dialect used to parse and render queries.
            mask_literals: Replace literal values with placeholders so that
                           runs differing only in constants share a name.
        """
        self.dialect = dialect
        self.mask_literals = mask_literals

    def normalize(self, query: Optional[str]) -> Optional[str]:
        """
        Normalize a query string.

        Falls back to the original text when the query cannot be parsed.
        The result is always lowercased.

        Args:
            query: Raw query text as submitted to the engine.

        Returns:
            Canonical lowercased query text, or None for empty input.
        """
        if query is None:
            return None

        result = query
        try:
            expressions = [e for e in parse(query, dialect=self.dialect) if e is not None]
            if expressions:
                if self.mask_literals:
                    expressions = [e.transform(_mask_literal) for e in expressions]
                result = "; ".join(e.sql(dialect=self.dialect) for e in expressions)
        except Exception as e:
            logger.warning(
                "Could not rewrite query due to error. Proceeding with original query %s: %s",
                query,
                e,
            )
            result = query

        return lower(result)
