from __future__ import annotations

import logging
import math
from typing import Iterable

from colorize.contracts import ColorizedArtifact

from .contracts import AssembleConfig, AssembledDocument, AssemblyError, PageLayout
from .writer import DocumentWriter, Pypdfium2DocumentWriter

log = logging.getLogger(__name__)


def compute_page_layout(*, page_num: int, width: int, height: int, margin_percent: float) -> PageLayout:
    """
    Pad one page by a margin proportional to its own width, on all sides.
    """

    margin_px = math.floor(width * (margin_percent / 100))
    return PageLayout(
        page_num=page_num,
        page_width=width + 2 * margin_px,
        page_height=height + 2 * margin_px,
        image_x=margin_px,
        image_y=margin_px,
        image_width=width,
        image_height=height,
    )


def layout_pages(
    pages: Iterable[tuple[int, ColorizedArtifact]], *, margin_percent: float
) -> list[PageLayout]:
    """
    One layout per present artifact, ascending page number. Missing page
    numbers are skipped, never padded with blank pages.
    """

    ordered = sorted(pages, key=lambda item: item[0])
    return [
        compute_page_layout(
            page_num=page_num,
            width=artifact.width,
            height=artifact.height,
            margin_percent=margin_percent,
        )
        for page_num, artifact in ordered
    ]


def remove_placeholder_pages(*, writer: DocumentWriter, doc: object, expected_pages: int) -> None:
    """Drop a backend's default blank first page once real pages exist."""
    while writer.page_count(doc) > expected_pages:
        writer.delete_page(doc, 0)


def assemble_pdf(
    pages: Iterable[tuple[int, ColorizedArtifact]],
    *,
    config: AssembleConfig,
    writer: DocumentWriter | None = None,
) -> AssembledDocument:
    """
    Lay out stored artifacts into a single multi-page PDF.

    Raises AssemblyError for an empty artifact list (callers skip the call
    instead) and for any writer failure. Nothing is written to disk here.
    """

    ordered = sorted(pages, key=lambda item: item[0])
    if not ordered:
        raise AssemblyError("No colorized pages to assemble")

    if writer is None:
        writer = Pypdfium2DocumentWriter(points_per_pixel=config.points_per_pixel)

    layouts = layout_pages(ordered, margin_percent=config.margin_percent)

    try:
        doc = writer.new_document()
    except Exception as e:
        raise AssemblyError(f"Failed to generate PDF: {e}") from e

    try:
        for (page_num, artifact), layout in zip(ordered, layouts):
            writer.add_page(doc, layout.page_width, layout.page_height)
            writer.place_image(
                doc,
                artifact.to_pil_image(),
                layout.image_x,
                layout.image_y,
                layout.image_width,
                layout.image_height,
            )
            log.debug(
                "Placed page %d: canvas %dx%d, image at (%d, %d)",
                page_num,
                layout.page_width,
                layout.page_height,
                layout.image_x,
                layout.image_y,
            )
        remove_placeholder_pages(writer=writer, doc=doc, expected_pages=len(layouts))
        pdf_bytes = writer.save(doc)
    except Exception as e:
        writer.discard(doc)
        raise AssemblyError(f"Failed to generate PDF: {e}") from e

    log.info("Assembled %d pages (margin %s%%) into %d PDF bytes", len(layouts), config.margin_percent, len(pdf_bytes))
    return AssembledDocument(pdf_bytes=pdf_bytes, layouts=layouts)
