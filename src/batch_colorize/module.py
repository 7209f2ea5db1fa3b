from __future__ import annotations

import logging
from typing import Any

from colorize.contracts import ColorizeError
from colorize.module import colorize_source_image
from render_pdf.contracts import RenderError
from render_pdf.engines import PageRenderingEngine

from .contracts import (
    BatchCallbacks,
    BatchError,
    BatchPageOutcome,
    BatchProgress,
    BatchRunConfig,
    BatchRunResult,
    BatchStatus,
)
from .page_cache import PageCache

log = logging.getLogger(__name__)


class _RunAborted(Exception):
    def __init__(self, status: BatchStatus, error: BatchError | None) -> None:
        super().__init__(status.value)
        self.status = status
        self.error = error


def _publish(callbacks: BatchCallbacks, progress: BatchProgress | None) -> None:
    if callbacks.on_progress is not None:
        callbacks.on_progress(progress)


def _page_failed(
    *,
    callbacks: BatchCallbacks,
    pages: list[BatchPageOutcome],
    page_num: int,
    error: BatchError,
) -> None:
    log.error("Error on page %d: [%s] %s", page_num, error.code, error.message)
    pages.append(BatchPageOutcome(page_num=page_num, ok=False, errors=[error]))
    if callbacks.on_page_failed is not None:
        callbacks.on_page_failed(page_num, error)


def _run_meta(*, engine: PageRenderingEngine, config: BatchRunConfig) -> dict[str, Any]:
    return {
        "backend": engine.backend_id(),
        "render_scale": config.render_scale,
        "target_hex": config.color.target_hex,
        "target_rgb": list(config.color.target_rgb),
        "boldness": config.color.boldness,
    }


def _colorize_pages(
    *,
    document: Any,
    engine: PageRenderingEngine,
    cache: PageCache,
    config: BatchRunConfig,
    callbacks: BatchCallbacks,
    total: int,
    pages: list[BatchPageOutcome],
) -> None:
    for page_num in range(1, total + 1):
        if callbacks.should_cancel is not None and callbacks.should_cancel():
            raise _RunAborted(
                BatchStatus.CANCELLED,
                BatchError(
                    code="BATCH_CANCELLED",
                    message="Batch run cancelled between pages",
                    detail={"next_page": page_num, "total_pages": total},
                ),
            )

        # Always a fresh render at the run's scale, never a preview raster.
        try:
            source = engine.render_page(document=document, page_num=page_num, scale=config.render_scale)
        except RenderError as e:
            _page_failed(
                callbacks=callbacks,
                pages=pages,
                page_num=page_num,
                error=BatchError(
                    code="BATCH_PAGE_RENDER_FAILED",
                    message="Page rendering failed",
                    detail={"page_num": page_num, "error": str(e)},
                ),
            )
            continue

        try:
            artifact = colorize_source_image(source, config.color)
        except ColorizeError as e:
            _page_failed(
                callbacks=callbacks,
                pages=pages,
                page_num=page_num,
                error=BatchError(
                    code="BATCH_PAGE_TRANSFORM_FAILED",
                    message="Page colorization failed",
                    detail={"page_num": page_num, "error": str(e)},
                ),
            )
            continue

        cache.set(page_num, artifact)
        pages.append(
            BatchPageOutcome(page_num=page_num, ok=True, width_px=artifact.width, height_px=artifact.height)
        )
        _publish(callbacks, BatchProgress(current=page_num, total=total))


def run_batch_colorize(
    *,
    document: Any,
    engine: PageRenderingEngine,
    cache: PageCache,
    config: BatchRunConfig,
    callbacks: BatchCallbacks | None = None,
) -> BatchRunResult:
    """
    Colorize every page of `document` sequentially under one fixed config.

    The cache is updated page by page, so observers can show partial
    results mid-run. A failing page is logged and skipped; anything outside
    the per-page taxonomy aborts the remaining pages and is reported as a
    single BATCH_ORCHESTRATION_FAULT. Progress is None again once the run
    ends, whatever the outcome.
    """

    callbacks = callbacks or BatchCallbacks()
    meta = _run_meta(engine=engine, config=config)
    pages: list[BatchPageOutcome] = []
    total = 0
    status = BatchStatus.SUCCESS
    errors: list[BatchError] = []

    try:
        try:
            total = engine.get_page_count(document=document)
        except Exception as e:
            raise _RunAborted(
                BatchStatus.FAULTED,
                BatchError(
                    code="BATCH_ORCHESTRATION_FAULT",
                    message="Failed to read document page count",
                    detail={"error": repr(e)},
                ),
            ) from e

        log.info(
            "Batch run started: %d pages, color=%s, boldness=%s, scale=%s",
            total,
            config.color.target_hex,
            config.color.boldness,
            config.render_scale,
        )
        _publish(callbacks, BatchProgress(current=0, total=total))
        _colorize_pages(
            document=document,
            engine=engine,
            cache=cache,
            config=config,
            callbacks=callbacks,
            total=total,
            pages=pages,
        )
    except _RunAborted as e:
        status = e.status
        if e.error is not None:
            errors.append(e.error)
        if status == BatchStatus.CANCELLED:
            log.warning("Batch run cancelled after %d of %d pages", len(pages), total)
        else:
            log.error("Batch processing stopped: %s", e.error.message if e.error else status.value)
    except Exception as e:
        status = BatchStatus.FAULTED
        errors.append(
            BatchError(
                code="BATCH_ORCHESTRATION_FAULT",
                message="Batch processing stopped due to an error",
                detail={"error": repr(e), "pages_attempted": len(pages), "total_pages": total},
            )
        )
        log.exception("Batch processing stopped due to an error")
    finally:
        _publish(callbacks, None)

    if status == BatchStatus.SUCCESS and any(not p.ok for p in pages):
        status = BatchStatus.PARTIAL

    meta["pages_ok"] = sum(1 for p in pages if p.ok)
    meta["pages_failed"] = sum(1 for p in pages if not p.ok)

    if status != BatchStatus.SUCCESS:
        log.info("Batch run finished with status %s (%d ok, %d failed)", status.value, meta["pages_ok"], meta["pages_failed"])
    else:
        log.info("Batch run finished: %d pages colorized", meta["pages_ok"])

    return BatchRunResult(
        ok=status == BatchStatus.SUCCESS,
        status=status,
        total_pages=total,
        pages=pages,
        errors=errors,
        meta=meta,
    )
