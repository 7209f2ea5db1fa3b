"""
Rendering service (PDF page -> RGBA raster at a given scale).

This package is intentionally limited to rasterization:
- It renders one page per call, always fresh.
- It performs NO colorization, caching, or document assembly.
"""

from .contracts import (
    DEFAULT_RENDER_SCALE,
    DocumentOpenError,
    RenderEngineName,
    RenderError,
    validate_render_scale,
)
from .data_access import DataAccessError, resolve_input_pdf
from .module import get_engine, open_pdf, render_page_image

__all__ = [
    "DEFAULT_RENDER_SCALE",
    "DataAccessError",
    "DocumentOpenError",
    "RenderEngineName",
    "RenderError",
    "get_engine",
    "open_pdf",
    "render_page_image",
    "resolve_input_pdf",
    "validate_render_scale",
]
