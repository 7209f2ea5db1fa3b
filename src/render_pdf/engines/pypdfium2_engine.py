from __future__ import annotations

from pathlib import Path
from typing import Any

from colorize.contracts import SourceImage

from ..contracts import DocumentOpenError, RenderError
from .base import PageRenderingEngine


class Pypdfium2RenderingEngine(PageRenderingEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for page rendering.") from e

    def open_document(self, *, pdf_file: Path) -> Any:
        pdfium = self._require_pdfium()
        try:
            return pdfium.PdfDocument(str(pdf_file))
        except Exception as e:
            raise DocumentOpenError(f"Failed to open PDF {str(pdf_file)!r}: {e}") from e

    def get_page_count(self, *, document: Any) -> int:
        return len(document)

    def render_page(self, *, document: Any, page_num: int, scale: float) -> SourceImage:
        page_count = len(document)
        if page_num < 1 or page_num > page_count:
            raise RenderError(f"Page out of range: {page_num} (1..{page_count})")

        page = None
        try:
            page = document[page_num - 1]
            bitmap = page.render(scale=scale)
            pil_img = bitmap.to_pil().convert("RGBA")
        except Exception as e:
            raise RenderError(f"Failed to render page {page_num} at scale {scale}: {e}") from e
        finally:
            if page is not None:
                page.close()

        width_px, height_px = pil_img.size
        return SourceImage(
            page_num=page_num,
            width=int(width_px),
            height=int(height_px),
            pixels=pil_img.tobytes(),
        )

    def close_document(self, *, document: Any) -> None:
        document.close()
