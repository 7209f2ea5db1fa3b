from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from colorize.contracts import SourceImage


class PageRenderingEngine(ABC):
    """
    Page rasterization abstraction.

    Engines must:
    - Render one page per call at the requested scale (pixels per PDF point)
    - Return RGBA pixels, freshly rendered on every call
    - Perform NO colorization or caching
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def open_document(self, *, pdf_file: Path) -> Any:
        """Return an opaque document handle, or raise DocumentOpenError."""

        raise NotImplementedError

    @abstractmethod
    def get_page_count(self, *, document: Any) -> int:
        raise NotImplementedError

    @abstractmethod
    def render_page(self, *, document: Any, page_num: int, scale: float) -> SourceImage:
        """
        Render `page_num` (1-indexed). Raises RenderError on per-page failure.
        """

        raise NotImplementedError

    def close_document(self, *, document: Any) -> None:
        return None
