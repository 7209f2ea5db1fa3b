from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pypdfium2 as pdfium
from PIL import Image

from assemble_pdf.artifacts import write_pdf_bytes
from assemble_pdf.contracts import AssembleConfig, AssemblyError
from assemble_pdf.module import assemble_pdf
from assemble_pdf.writer import Pypdfium2DocumentWriter
from colorize.contracts import ColorizedArtifact, ColorSpec
from colorize.module import colorize_source_image
from render_pdf.contracts import RenderError
from render_pdf.module import get_engine, open_pdf, render_page_image


def _solid(width: int, height: int, rgb: tuple[int, int, int]) -> ColorizedArtifact:
    return ColorizedArtifact.from_pil_image(Image.new("RGBA", (width, height), rgb + (255,)))


def _close_to(actual: tuple[int, ...], expected: tuple[int, ...], tol: int = 3) -> bool:
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


class TestPdfiumRoundTrip(unittest.TestCase):
    def _assemble_to_file(self, pages, *, margin_percent: float, td: str) -> Path:
        doc = assemble_pdf(
            pages,
            config=AssembleConfig(margin_percent=margin_percent),
            writer=Pypdfium2DocumentWriter(),
        )
        return write_pdf_bytes(document=doc, out_file=Path(td) / "out.pdf")

    def test_page_sizes_and_order_survive_reopen(self) -> None:
        engine = get_engine()
        with tempfile.TemporaryDirectory() as td:
            out = self._assemble_to_file(
                [(4, _solid(30, 20, (0, 0, 255))), (1, _solid(40, 30, (255, 0, 0)))],
                margin_percent=0,
                td=td,
            )
            self.assertTrue(out.read_bytes().startswith(b"%PDF"))

            document, count = open_pdf(engine=engine, pdf_path=out)
            try:
                self.assertEqual(count, 2)
                first = render_page_image(engine=engine, document=document, page_num=1, scale=1.0)
                second = render_page_image(engine=engine, document=document, page_num=2, scale=1.0)
            finally:
                engine.close_document(document=document)

        self.assertEqual((first.width, first.height), (40, 30))
        self.assertEqual((second.width, second.height), (30, 20))

        def _center(src) -> tuple[int, ...]:
            img = Image.frombytes("RGBA", (src.width, src.height), src.pixels)
            return img.getpixel((src.width // 2, src.height // 2))

        self.assertTrue(_close_to(_center(first)[:3], (255, 0, 0)), _center(first))
        self.assertTrue(_close_to(_center(second)[:3], (0, 0, 255)), _center(second))

    def test_margin_is_left_white(self) -> None:
        engine = get_engine()
        with tempfile.TemporaryDirectory() as td:
            out = self._assemble_to_file([(1, _solid(20, 20, (16, 185, 129)))], margin_percent=25, td=td)
            document, count = open_pdf(engine=engine, pdf_path=out)
            try:
                src = render_page_image(engine=engine, document=document, page_num=1, scale=1.0)
            finally:
                engine.close_document(document=document)

        self.assertEqual(count, 1)
        self.assertEqual((src.width, src.height), (30, 30))
        img = Image.frombytes("RGBA", (src.width, src.height), src.pixels)
        self.assertTrue(_close_to(img.getpixel((1, 1))[:3], (255, 255, 255)))
        self.assertTrue(_close_to(img.getpixel((15, 15))[:3], (16, 185, 129)))

    def test_bitmaps_are_released_before_save(self) -> None:
        real_close = pdfium.PdfBitmap.close
        real_save = Pypdfium2DocumentWriter.save
        closed: list[object] = []
        closed_at_save: list[int] = []

        def _close(bitmap, *args, **kwargs):
            closed.append(bitmap)
            return real_close(bitmap, *args, **kwargs)

        def _save(writer, doc):
            closed_at_save.append(len(closed))
            return real_save(writer, doc)

        with patch.object(pdfium.PdfBitmap, "close", _close), patch.object(Pypdfium2DocumentWriter, "save", _save):
            doc = assemble_pdf(
                [(1, _solid(12, 10, (255, 0, 0))), (2, _solid(12, 10, (0, 0, 255)))],
                config=AssembleConfig(),
                writer=Pypdfium2DocumentWriter(),
            )

        self.assertEqual(closed_at_save, [2])

        # Pixel data survives the bitmaps being closed.
        reopened = pdfium.PdfDocument(doc.pdf_bytes)
        try:
            page = reopened[1]
            img = page.render(scale=1.0).to_pil().convert("RGB")
            page.close()
        finally:
            reopened.close()
        self.assertTrue(_close_to(img.getpixel((6, 5)), (0, 0, 255)), img.getpixel((6, 5)))

    def test_failed_assembly_closes_document(self) -> None:
        writer = Pypdfium2DocumentWriter()
        with patch.object(writer, "discard", wraps=writer.discard) as discard:
            with patch.object(Pypdfium2DocumentWriter, "place_image", side_effect=RuntimeError("bad bitmap")):
                with self.assertRaises(AssemblyError):
                    assemble_pdf([(1, _solid(4, 4, (0, 0, 0)))], config=AssembleConfig(), writer=writer)

        discard.assert_called_once()
        draft = discard.call_args.args[0]
        self.assertTrue(draft.closed)
        self.assertIsNone(draft.page)

    def test_render_colorize_assemble_pipeline(self) -> None:
        engine = get_engine()
        with tempfile.TemporaryDirectory() as td:
            source_pdf = self._assemble_to_file([(1, _solid(16, 16, (0, 0, 0)))], margin_percent=0, td=td)
            document, _ = open_pdf(engine=engine, pdf_path=source_pdf)
            try:
                src = render_page_image(engine=engine, document=document, page_num=1, scale=2.0)
                with self.assertRaises(RenderError):
                    render_page_image(engine=engine, document=document, page_num=2, scale=1.0)
            finally:
                engine.close_document(document=document)

        self.assertEqual((src.width, src.height), (32, 32))
        artifact = colorize_source_image(src, ColorSpec("#EF4444", 60))
        self.assertEqual((artifact.width, artifact.height), (32, 32))
        px = artifact.to_pil_image().convert("RGBA").getpixel((16, 16))
        self.assertTrue(_close_to(px[:3], (239, 68, 68)), px)


if __name__ == "__main__":
    unittest.main()
