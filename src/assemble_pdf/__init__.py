"""
Output assembly (colorized page artifacts -> one margin-padded PDF).

Pages are laid out in ascending page-number order; unprocessed pages are
skipped rather than emitted blank.
"""

from .artifacts import assembled_pdf_name, write_pdf_bytes
from .contracts import (
    MARGIN_PRESETS,
    AssembleConfig,
    AssembledDocument,
    AssemblyError,
    PageLayout,
    clamp_margin_percent,
)
from .module import assemble_pdf, compute_page_layout, layout_pages
from .writer import DocumentWriter, Pypdfium2DocumentWriter

__all__ = [
    "MARGIN_PRESETS",
    "AssembleConfig",
    "AssembledDocument",
    "AssemblyError",
    "DocumentWriter",
    "PageLayout",
    "Pypdfium2DocumentWriter",
    "assemble_pdf",
    "assembled_pdf_name",
    "clamp_margin_percent",
    "compute_page_layout",
    "layout_pages",
    "write_pdf_bytes",
]
