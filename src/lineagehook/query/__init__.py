"""Query text helpers: normalization for process naming and plan serialization."""

from lineagehook.query.explainer import QueryExplainer
from lineagehook.query.normalizer import QueryNormalizer, lower

__all__ = [
    "QueryExplainer",
    "QueryNormalizer",
    "lower",
]
