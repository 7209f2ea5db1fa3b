from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from typing import Any

from PIL import Image


class DocumentWriter(ABC):
    """
    Multi-page output document abstraction.

    Coordinates passed to `add_page`/`place_image` are layout pixels with a
    top-left origin; backends convert to their own units.
    """

    @abstractmethod
    def new_document(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def add_page(self, doc: Any, width: int, height: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def place_image(self, doc: Any, image: Image.Image, x: int, y: int, width: int, height: int) -> None:
        """Place `image` on the most recently added page."""

        raise NotImplementedError

    @abstractmethod
    def page_count(self, doc: Any) -> int:
        raise NotImplementedError

    @abstractmethod
    def delete_page(self, doc: Any, index: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, doc: Any) -> bytes:
        raise NotImplementedError

    def discard(self, doc: Any) -> None:
        """Release an unsaved document after a failure. Safe to call twice."""


@dataclass
class _PdfiumDraft:
    pdf: Any
    page: Any = None
    page_height_px: int = 0
    closed: bool = False


def _flatten_to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if "A" in image.getbands():
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


class Pypdfium2DocumentWriter(DocumentWriter):
    def __init__(self, *, points_per_pixel: float = 1.0) -> None:
        if points_per_pixel <= 0:
            raise ValueError("points_per_pixel must be > 0")
        self.points_per_pixel = points_per_pixel

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for PDF output.") from e

    def _finish_page(self, draft: _PdfiumDraft) -> None:
        if draft.page is not None:
            draft.page.gen_content()
            draft.page.close()
            draft.page = None

    def new_document(self) -> _PdfiumDraft:
        pdfium = self._require_pdfium()
        return _PdfiumDraft(pdf=pdfium.PdfDocument.new())

    def add_page(self, doc: _PdfiumDraft, width: int, height: int) -> None:
        self._finish_page(doc)
        ppp = self.points_per_pixel
        doc.page = doc.pdf.new_page(width * ppp, height * ppp)
        doc.page_height_px = height

    def place_image(self, doc: _PdfiumDraft, image: Image.Image, x: int, y: int, width: int, height: int) -> None:
        if doc.page is None:
            raise RuntimeError("place_image called before add_page")
        pdfium = self._require_pdfium()
        ppp = self.points_per_pixel

        # set_bitmap encodes the pixels into the image stream, so the bitmap
        # is released as soon as it has been handed over.
        bitmap = pdfium.PdfBitmap.from_pil(_flatten_to_rgb(image))
        try:
            image_obj = pdfium.PdfImage.new(doc.pdf)
            image_obj.set_bitmap(bitmap, pages=[doc.page])
        finally:
            bitmap.close()

        # PDF user space grows upwards from the bottom-left corner.
        bottom_px = doc.page_height_px - y - height
        matrix = pdfium.PdfMatrix().scale(width * ppp, height * ppp).translate(x * ppp, bottom_px * ppp)
        image_obj.set_matrix(matrix)
        doc.page.insert_obj(image_obj)

    def page_count(self, doc: _PdfiumDraft) -> int:
        return len(doc.pdf)

    def delete_page(self, doc: _PdfiumDraft, index: int) -> None:
        doc.pdf.del_page(index)

    def save(self, doc: _PdfiumDraft) -> bytes:
        self._finish_page(doc)
        buffer = BytesIO()
        try:
            doc.pdf.save(buffer)
        finally:
            self.discard(doc)
        return buffer.getvalue()

    def discard(self, doc: _PdfiumDraft) -> None:
        if doc.closed:
            return
        doc.closed = True
        if doc.page is not None:
            doc.page.close()
            doc.page = None
        doc.pdf.close()
