from __future__ import annotations

from enum import Enum

RENDER_SCALE_MIN = 0.5
RENDER_SCALE_MAX = 8.0
DEFAULT_RENDER_SCALE = 3.0


class RenderEngineName(str, Enum):
    """
    Rendering backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"


class RenderError(Exception):
    """A single page could not be rasterized."""


class DocumentOpenError(Exception):
    """The source document could not be opened at all."""


def validate_render_scale(scale: float) -> None:
    if not (RENDER_SCALE_MIN <= scale <= RENDER_SCALE_MAX):
        raise ValueError(f"render_scale must be within [{RENDER_SCALE_MIN}, {RENDER_SCALE_MAX}]")
