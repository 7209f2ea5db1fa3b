"""
Color transform engine (grayscale page raster -> target-color tinted raster).

This package is a pure function layer:
- It remaps luminance to a single target color using a boldness-driven curve.
- It does NOT render PDFs, cache pages, or write documents.
"""

from .contracts import (
    ColorizedArtifact,
    ColorizeError,
    ColorSpec,
    SourceImage,
    ToneCurve,
    clamp_boldness,
    parse_hex_color,
)
from .module import colorize_rgba, colorize_source_image, compute_tone_curve
from .themes import THEMES, ColorTheme, resolve_theme_hex, theme_display_name

__all__ = [
    "ColorizedArtifact",
    "ColorizeError",
    "ColorSpec",
    "ColorTheme",
    "SourceImage",
    "THEMES",
    "ToneCurve",
    "clamp_boldness",
    "colorize_rgba",
    "colorize_source_image",
    "compute_tone_curve",
    "parse_hex_color",
    "resolve_theme_hex",
    "theme_display_name",
]
