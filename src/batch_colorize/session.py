from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from assemble_pdf.artifacts import assembled_pdf_name, write_pdf_bytes
from assemble_pdf.contracts import (
    DEFAULT_CUSTOM_MARGIN,
    MARGIN_PRESETS,
    AssembleConfig,
    AssemblyError,
    clamp_margin_percent,
)
from assemble_pdf.module import assemble_pdf
from assemble_pdf.writer import DocumentWriter
from colorize.artifacts import single_page_png_name, write_artifact_png
from colorize.contracts import (
    DEFAULT_BOLDNESS,
    ColorizedArtifact,
    ColorizeError,
    ColorSpec,
    SourceImage,
    clamp_boldness,
)
from colorize.module import colorize_source_image
from colorize.themes import DEFAULT_CUSTOM_HEX, DEFAULT_THEME_ID, resolve_theme_hex
from render_pdf.contracts import (
    DEFAULT_RENDER_SCALE,
    DocumentOpenError,
    RenderError,
    validate_render_scale,
)
from render_pdf.data_access import DataAccessError
from render_pdf.engines import PageRenderingEngine
from render_pdf.module import get_engine, open_pdf, render_page_image

from .contracts import BatchCallbacks, BatchProgress, BatchRunConfig, BatchRunResult, BatchStatus
from .module import run_batch_colorize
from .page_cache import PageCache

log = logging.getLogger(__name__)


class NoDocumentError(RuntimeError):
    pass


@dataclass
class SessionSettings:
    """Live, user-editable settings. Runs snapshot these into a BatchRunConfig."""

    theme_id: str = DEFAULT_THEME_ID
    custom_hex: str = DEFAULT_CUSTOM_HEX
    boldness: float = DEFAULT_BOLDNESS
    render_scale: float = DEFAULT_RENDER_SCALE
    margin_percent: float = 0.0


class ColorizeSession:
    """
    State for one editing session: the open document, its page cache,
    batch progress, live settings and a single last-error slot.

    Errors never discard the document or already colorized pages.
    """

    def __init__(
        self,
        *,
        engine: PageRenderingEngine | None = None,
        writer: DocumentWriter | None = None,
    ) -> None:
        self.engine = engine or get_engine()
        self.writer = writer
        self.settings = SessionSettings()
        self.cache = PageCache()
        self.document: Any = None
        self.source_name: str | None = None
        self.num_pages = 0
        self.progress: BatchProgress | None = None
        self.last_error: str | None = None

    # -- settings -------------------------------------------------------

    def set_boldness(self, value: float) -> None:
        self.settings.boldness = clamp_boldness(value)

    def set_render_scale(self, value: float) -> None:
        validate_render_scale(value)
        self.settings.render_scale = value

    def set_margin_percent(self, value: float) -> None:
        self.settings.margin_percent = clamp_margin_percent(value)

    def set_margin_preset(self, name: str) -> None:
        if name == "custom":
            self.settings.margin_percent = DEFAULT_CUSTOM_MARGIN
            return
        if name not in MARGIN_PRESETS:
            raise ValueError(f"Unknown margin preset: {name!r}")
        self.settings.margin_percent = MARGIN_PRESETS[name]

    def set_theme(self, theme_id: str, custom_hex: str | None = None) -> None:
        self.settings.theme_id = theme_id
        if custom_hex is not None:
            self.settings.custom_hex = custom_hex

    def color_spec(self) -> ColorSpec:
        return ColorSpec(
            target_hex=resolve_theme_hex(self.settings.theme_id, self.settings.custom_hex),
            boldness=clamp_boldness(self.settings.boldness),
        )

    def build_run_config(self) -> BatchRunConfig:
        return BatchRunConfig(color=self.color_spec(), render_scale=self.settings.render_scale)

    @property
    def is_processing(self) -> bool:
        return self.progress is not None

    def _require_document(self) -> Any:
        if self.document is None:
            raise NoDocumentError("No document loaded")
        return self.document

    def _fail(self, message: str) -> None:
        self.last_error = message
        log.error(message)

    # -- document lifecycle ---------------------------------------------

    def _close_document(self) -> None:
        if self.document is not None:
            try:
                self.engine.close_document(document=self.document)
            except Exception as e:
                log.warning("Failed to close previous document: %s", e)
        self.document = None
        self.source_name = None
        self.num_pages = 0

    def open_document(self, pdf_path: Path) -> int:
        self.last_error = None
        self._close_document()
        self.cache.reset(None)
        self.progress = None
        try:
            document, page_count = open_pdf(engine=self.engine, pdf_path=pdf_path)
        except (DataAccessError, DocumentOpenError) as e:
            self._fail(f"Failed to load PDF. Please ensure it is a valid PDF file. ({e})")
            raise

        self.document = document
        self.source_name = pdf_path.name
        self.num_pages = page_count
        self.cache.reset(page_count)
        log.info("Opened %s (%d pages)", pdf_path.name, page_count)
        return page_count

    def reset(self) -> None:
        self._close_document()
        self.cache.reset(None)
        self.progress = None
        self.last_error = None
        self.settings = SessionSettings()

    # -- single page ----------------------------------------------------

    def preview_page(self, page_num: int) -> SourceImage:
        document = self._require_document()
        try:
            return render_page_image(
                engine=self.engine,
                document=document,
                page_num=page_num,
                scale=self.settings.render_scale,
            )
        except RenderError:
            self._fail("Failed to render page.")
            raise

    def colorize_page(self, page_num: int) -> ColorizedArtifact:
        """Render and colorize one page now; failures are raised to the caller."""
        document = self._require_document()
        self.last_error = None
        config = self.build_run_config()
        try:
            source = render_page_image(
                engine=self.engine,
                document=document,
                page_num=page_num,
                scale=config.render_scale,
            )
            artifact = colorize_source_image(source, config.color)
        except RenderError:
            self._fail("Failed to render page.")
            raise
        except ColorizeError as e:
            self._fail(f"Failed to process image locally. ({e})")
            raise

        self.cache.set(page_num, artifact)
        return artifact

    # -- batch ----------------------------------------------------------

    def colorize_all(
        self,
        *,
        on_progress: Callable[[BatchProgress | None], None] | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> BatchRunResult:
        document = self._require_document()
        self.last_error = None
        config = self.build_run_config()

        def _track(progress: BatchProgress | None) -> None:
            self.progress = progress
            if on_progress is not None:
                on_progress(progress)

        result = run_batch_colorize(
            document=document,
            engine=self.engine,
            cache=self.cache,
            config=config,
            callbacks=BatchCallbacks(on_progress=_track, should_cancel=should_cancel),
        )
        self.progress = None
        if result.status == BatchStatus.FAULTED:
            self.last_error = "Batch processing stopped due to an error."
        return result

    # -- export ---------------------------------------------------------

    def default_pdf_name(self) -> str:
        return assembled_pdf_name(self.settings.theme_id, self.source_name)

    def default_png_name(self, page_num: int) -> str:
        return single_page_png_name(page_num, self.settings.theme_id)

    def export_pdf(self, out_file: Path) -> Path | None:
        """
        Assemble every cached page into one PDF. Returns None (and writes
        nothing) when no page has been colorized yet.
        """

        pages = self.cache.snapshot()
        if not pages:
            return None
        try:
            config = AssembleConfig(margin_percent=clamp_margin_percent(self.settings.margin_percent))
            document = assemble_pdf(pages, config=config, writer=self.writer)
            return write_pdf_bytes(document=document, out_file=out_file)
        except AssemblyError:
            self._fail("Failed to generate PDF download. Try again.")
            raise

    def export_png(self, page_num: int, out_file: Path) -> Path | None:
        artifact = self.cache.get(page_num)
        if artifact is None:
            return None
        return write_artifact_png(artifact=artifact, out_file=out_file)
