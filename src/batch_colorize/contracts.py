from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable

from colorize.contracts import ColorSpec
from render_pdf.contracts import DEFAULT_RENDER_SCALE, validate_render_scale


class BatchStatus(str, Enum):
    SUCCESS = "success"  # every page colorized
    PARTIAL = "partial"  # run completed, some pages failed
    FAULTED = "faulted"  # orchestration-level fault, remaining pages skipped
    CANCELLED = "cancelled"  # stopped between pages on request


@dataclass(frozen=True, slots=True)
class BatchError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class BatchProgress:
    current: int
    total: int


@dataclass(frozen=True, slots=True)
class BatchRunConfig:
    """
    Immutable per-run configuration.

    Built once when a run starts; the orchestrator never consults live
    settings after that.
    """

    color: ColorSpec
    render_scale: float = DEFAULT_RENDER_SCALE

    def __post_init__(self) -> None:
        if not isinstance(self.color, ColorSpec):
            raise TypeError("color must be a ColorSpec")
        validate_render_scale(self.render_scale)


@dataclass(frozen=True, slots=True)
class BatchPageOutcome:
    page_num: int
    ok: bool
    width_px: int | None = None
    height_px: int | None = None
    errors: list[BatchError] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BatchRunResult:
    """
    Terminal state of one batch run.

    `ok` is True only for SUCCESS. Pages lists every attempted page in
    ascending order; pages never attempted (fault/cancel) are absent.
    """

    ok: bool
    status: BatchStatus
    total_pages: int
    pages: list[BatchPageOutcome]
    errors: list[BatchError]
    meta: dict[str, Any]

    @property
    def failed_pages(self) -> list[int]:
        return [p.page_num for p in self.pages if not p.ok]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BatchCallbacks:
    """Callbacks the orchestrator uses to report progress between pages."""

    on_progress: Callable[[BatchProgress | None], None] | None = None
    on_page_failed: Callable[[int, BatchError], None] | None = None
    should_cancel: Callable[[], bool] | None = None
