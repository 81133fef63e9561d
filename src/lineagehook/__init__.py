"""Lineage hook: translate SQL engine operations into catalog notifications."""

from lineagehook.hook import LineageHook
from lineagehook.operations import OperationKind, classify

__version__ = "0.1.0"

__all__ = [
    "LineageHook",
    "OperationKind",
    "classify",
    "__version__",
]
