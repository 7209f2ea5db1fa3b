"""
Batch colorization (every page of a document under one fixed configuration).

Pages are rendered fresh, colorized and cached one at a time. A failing page
is logged and skipped; the run keeps going.
"""

from .contracts import (
    BatchCallbacks,
    BatchError,
    BatchPageOutcome,
    BatchProgress,
    BatchRunConfig,
    BatchRunResult,
    BatchStatus,
)
from .module import run_batch_colorize
from .page_cache import PageCache
from .session import ColorizeSession, NoDocumentError, SessionSettings

__all__ = [
    "BatchCallbacks",
    "BatchError",
    "BatchPageOutcome",
    "BatchProgress",
    "BatchRunConfig",
    "BatchRunResult",
    "BatchStatus",
    "ColorizeSession",
    "NoDocumentError",
    "PageCache",
    "SessionSettings",
    "run_batch_colorize",
]
