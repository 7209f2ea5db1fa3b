from __future__ import annotations

import re
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

_HEX_COLOR_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

BOLDNESS_MIN = 0
BOLDNESS_MAX = 100
DEFAULT_BOLDNESS = 60


class ColorizeError(Exception):
    pass


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """
    Parse "#RRGGBB" (leading "#" optional, any case) into an RGB triple.

    Anything else maps to black. Color pickers always hand over well-formed
    values, so the fallback is the defined result rather than an error.
    """

    m = _HEX_COLOR_RE.match(value or "")
    if m is None:
        return (0, 0, 0)
    return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))


def clamp_boldness(value: float) -> float:
    return min(float(BOLDNESS_MAX), max(float(BOLDNESS_MIN), float(value)))


@dataclass(frozen=True, slots=True)
class ColorSpec:
    """
    Target color + boldness for one run.

    `target_hex` is kept as given; `target_rgb` applies the black fallback.
    """

    target_hex: str = "#000000"
    boldness: float = DEFAULT_BOLDNESS

    def __post_init__(self) -> None:
        if not (BOLDNESS_MIN <= self.boldness <= BOLDNESS_MAX):
            raise ValueError("boldness must be within [0, 100]")

    @property
    def target_rgb(self) -> tuple[int, int, int]:
        return parse_hex_color(self.target_hex)


@dataclass(frozen=True, slots=True)
class ToneCurve:
    black_point: int  # luminance at or below -> 100% target color
    white_point: int  # luminance at or above -> white
    gamma: float


@dataclass(frozen=True, slots=True)
class SourceImage:
    page_num: int  # 1-indexed
    width: int
    height: int
    pixels: bytes  # RGBA, row-major, width*height*4 bytes


@dataclass(frozen=True, slots=True)
class ColorizedArtifact:
    """One page's colorized raster, PNG encoded."""

    image_bytes: bytes
    width: int
    height: int
    image_format: str = "PNG"

    @classmethod
    def from_pil_image(cls, pil_image: Image.Image, format: str = "PNG") -> "ColorizedArtifact":
        buffer = BytesIO()
        pil_image.save(buffer, format=format)
        width, height = pil_image.size
        return cls(image_bytes=buffer.getvalue(), width=width, height=height, image_format=format)

    def to_pil_image(self) -> Image.Image:
        img = Image.open(BytesIO(self.image_bytes))
        img.load()
        return img
