from __future__ import annotations

from pathlib import Path
from typing import Any

from colorize.contracts import SourceImage

from .contracts import RenderEngineName, validate_render_scale
from .data_access import resolve_input_pdf
from .engines import PageRenderingEngine, Pypdfium2RenderingEngine


def get_engine(engine: RenderEngineName = RenderEngineName.PYPDFIUM2) -> PageRenderingEngine:
    if engine == RenderEngineName.PYPDFIUM2:
        return Pypdfium2RenderingEngine()
    raise ValueError(f"Unsupported rendering engine: {engine}")


def open_pdf(*, engine: PageRenderingEngine, pdf_path: Path) -> tuple[Any, int]:
    """
    Open an input PDF and count its pages.

    Returns (document handle, page count).
    """

    pdf_file = resolve_input_pdf(pdf_path)
    document = engine.open_document(pdf_file=pdf_file)
    return document, engine.get_page_count(document=document)


def render_page_image(
    *,
    engine: PageRenderingEngine,
    document: Any,
    page_num: int,
    scale: float,
) -> SourceImage:
    """Render one page freshly at `scale`; never served from a previous render."""
    validate_render_scale(scale)
    return engine.render_page(document=document, page_num=page_num, scale=scale)
