"""
Rendering engines (PDF page -> RGBA raster).

The public rendering API lives in `render_pdf.*`.
"""

from .base import PageRenderingEngine
from .pypdfium2_engine import Pypdfium2RenderingEngine

__all__ = ["PageRenderingEngine", "Pypdfium2RenderingEngine"]
