"""Asynchronous dispatch of lineage work."""

from lineagehook.dispatch.executor import DispatchExecutor, DispatchRejectedError

__all__ = [
    "DispatchExecutor",
    "DispatchRejectedError",
]
