from __future__ import annotations

import math
import unittest
from unittest.mock import patch

from PIL import Image

from colorize.contracts import ColorizeError, ColorSpec, SourceImage, clamp_boldness, parse_hex_color
from colorize.module import colorize_rgba, colorize_source_image, compute_tone_curve
from colorize.themes import resolve_theme_hex, theme_display_name, theme_ids


def _gray_rgba(values: list[int], alpha: int = 255) -> bytes:
    out = bytearray()
    for v in values:
        out += bytes((v, v, v, alpha))
    return bytes(out)


def _pixels(buf: bytes) -> list[tuple[int, int, int, int]]:
    return [tuple(buf[i : i + 4]) for i in range(0, len(buf), 4)]  # type: ignore[misc]


class TestToneCurve(unittest.TestCase):
    def test_boldness_zero_is_linear(self) -> None:
        curve = compute_tone_curve(0)
        self.assertEqual(curve.black_point, 0)
        self.assertEqual(curve.white_point, 245)
        self.assertEqual(curve.gamma, 1.0)

    def test_boldness_hundred(self) -> None:
        curve = compute_tone_curve(100)
        self.assertEqual(curve.black_point, 200)
        self.assertEqual(curve.white_point, 255)
        self.assertEqual(curve.gamma, 4.0)

    def test_boldness_sixty(self) -> None:
        curve = compute_tone_curve(60)
        self.assertEqual(curve.black_point, 120)
        self.assertEqual(curve.white_point, 251)
        self.assertAlmostEqual(curve.gamma, 2.8)

    def test_boldness_fifty(self) -> None:
        curve = compute_tone_curve(50)
        self.assertEqual((curve.black_point, curve.white_point), (100, 250))
        self.assertAlmostEqual(curve.gamma, 2.5)


class TestHexColor(unittest.TestCase):
    def test_parses_with_and_without_hash(self) -> None:
        self.assertEqual(parse_hex_color("#10B981"), (16, 185, 129))
        self.assertEqual(parse_hex_color("3b82f6"), (59, 130, 246))

    def test_malformed_falls_back_to_black(self) -> None:
        for bad in ["", "#fff", "#GGGGGG", "red", "#1234567", "not a color"]:
            with self.subTest(bad=bad):
                self.assertEqual(parse_hex_color(bad), (0, 0, 0))

    def test_color_spec_uses_fallback(self) -> None:
        self.assertEqual(ColorSpec(target_hex="oops", boldness=10).target_rgb, (0, 0, 0))

    def test_color_spec_rejects_out_of_range_boldness(self) -> None:
        with self.assertRaises(ValueError):
            ColorSpec(target_hex="#000000", boldness=101)
        with self.assertRaises(ValueError):
            ColorSpec(target_hex="#000000", boldness=-1)

    def test_clamp_boldness(self) -> None:
        self.assertEqual(clamp_boldness(150), 100.0)
        self.assertEqual(clamp_boldness(-5), 0.0)
        self.assertEqual(clamp_boldness(42), 42.0)


class TestThemes(unittest.TestCase):
    def test_presets_and_custom(self) -> None:
        self.assertEqual(theme_ids()[-1], "custom")
        self.assertEqual(resolve_theme_hex("green"), "#10B981")
        self.assertEqual(resolve_theme_hex("custom", "#abcdef"), "#abcdef")
        self.assertEqual(resolve_theme_hex("no-such-theme"), "#000000")
        self.assertEqual(theme_display_name("purple"), "Deep Purple")
        self.assertEqual(theme_display_name("custom"), "Custom Color")


class TestColorizeRgba(unittest.TestCase):
    def test_boldness_zero_black_target_is_linear_up_to_white_point(self) -> None:
        values = list(range(256))
        out = colorize_rgba(_gray_rgba(values), width=256, height=1, color=ColorSpec("#000000", 0))
        px = _pixels(out)

        expected = []
        for v in values:
            luminance = 0.299 * v + 0.587 * v + 0.114 * v
            t = min(luminance / 245, 1.0)
            expected.append(math.floor(255 * t + 0.5))

        self.assertEqual([p[0] for p in px], expected)
        self.assertTrue(all(p[0] == p[1] == p[2] for p in px))
        self.assertEqual(px[13][0], 14)
        self.assertEqual({p[0] for p in px[245:]}, {255})

        series = [p[0] for p in px]
        self.assertEqual(series, sorted(series))

    def test_boldness_zero_is_monotonic_for_colored_target(self) -> None:
        values = list(range(256))
        out = colorize_rgba(_gray_rgba(values), width=256, height=1, color=ColorSpec("#EF4444", 0))
        px = _pixels(out)
        for channel in range(3):
            series = [p[channel] for p in px]
            self.assertEqual(series, sorted(series))
        self.assertEqual(px[0][:3], (239, 68, 68))
        self.assertEqual(px[-1][:3], (255, 255, 255))

    def test_boldness_hundred_maps_dark_luminance_to_target(self) -> None:
        values = [0, 50, 128, 199, 200]
        out = colorize_rgba(_gray_rgba(values), width=len(values), height=1, color=ColorSpec("#3B82F6", 100))
        for p in _pixels(out):
            self.assertEqual(p, (59, 130, 246, 255))

    def test_black_target_boldness_sixty_endpoints(self) -> None:
        out = colorize_rgba(_gray_rgba([0, 255]), width=2, height=1, color=ColorSpec("#000000", 60))
        self.assertEqual(_pixels(out), [(0, 0, 0, 255), (255, 255, 255, 255)])

    def test_transparent_pixels_pass_through(self) -> None:
        buf = bytes((10, 20, 30, 0, 0, 0, 0, 128, 200, 100, 50, 0))
        out = colorize_rgba(buf, width=3, height=1, color=ColorSpec("#10B981", 60))
        px = _pixels(out)
        self.assertEqual(px[0], (10, 20, 30, 0))
        self.assertEqual(px[1], (16, 185, 129, 128))
        self.assertEqual(px[2], (200, 100, 50, 0))

    def test_midtone_golden_value(self) -> None:
        # boldness 50: black 100, white 250, gamma 2.5; gray 175 -> t = 0.5 ** 2.5
        out = colorize_rgba(_gray_rgba([175]), width=1, height=1, color=ColorSpec("#10B981", 50))
        self.assertEqual(_pixels(out), [(58, 197, 151, 255)])

    def test_chunked_pass_matches_single_pass(self) -> None:
        values = [(i * 37) % 256 for i in range(300)]
        color = ColorSpec("#8B5CF6", 35)
        whole = colorize_rgba(_gray_rgba(values), width=30, height=10, color=color)
        with patch("colorize.module._CHUNK_PIXELS", 7):
            chunked = colorize_rgba(_gray_rgba(values), width=30, height=10, color=color)
        self.assertEqual(whole, chunked)

    def test_buffer_length_mismatch_raises(self) -> None:
        with self.assertRaises(ColorizeError):
            colorize_rgba(b"\x00" * 15, width=2, height=2, color=ColorSpec())

    def test_input_buffer_is_not_modified(self) -> None:
        buf = _gray_rgba([0, 64, 128, 255])
        before = bytes(buf)
        colorize_rgba(buf, width=4, height=1, color=ColorSpec("#F97316", 80))
        self.assertEqual(buf, before)


class TestColorizeSourceImage(unittest.TestCase):
    def test_artifact_keeps_source_dimensions(self) -> None:
        width, height = 5, 3
        src = SourceImage(page_num=1, width=width, height=height, pixels=_gray_rgba([0] * (width * height)))
        artifact = colorize_source_image(src, ColorSpec("#EF4444", 60))

        self.assertEqual((artifact.width, artifact.height), (width, height))
        self.assertEqual(artifact.image_format, "PNG")
        img = artifact.to_pil_image()
        self.assertIsInstance(img, Image.Image)
        self.assertEqual(img.size, (width, height))
        self.assertEqual(img.convert("RGBA").getpixel((2, 1)), (239, 68, 68, 255))

    def test_bad_buffer_raises_colorize_error(self) -> None:
        src = SourceImage(page_num=4, width=10, height=10, pixels=b"\x00" * 4)
        with self.assertRaises(ColorizeError):
            colorize_source_image(src, ColorSpec())


if __name__ == "__main__":
    unittest.main()
