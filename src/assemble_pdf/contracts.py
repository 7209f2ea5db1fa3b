from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

MARGIN_PERCENT_MIN = 0.0
MARGIN_PERCENT_MAX = 50.0

# Named margin presets (percent of page width).
MARGIN_PRESETS: dict[str, float] = {
    "none": 0.0,
    "small": 5.0,
    "medium": 10.0,
    "large": 15.0,
}
DEFAULT_CUSTOM_MARGIN = 10.0


class AssemblyError(Exception):
    pass


def clamp_margin_percent(value: float) -> float:
    return min(MARGIN_PERCENT_MAX, max(MARGIN_PERCENT_MIN, float(value)))


@dataclass(frozen=True, slots=True)
class AssembleConfig:
    """
    Output assembly parameters.

    `margin_percent` pads every side of each page by a fraction of that
    page's own width. `points_per_pixel` maps layout pixels to PDF points.
    """

    margin_percent: float = 0.0
    points_per_pixel: float = 1.0

    def __post_init__(self) -> None:
        if not (MARGIN_PERCENT_MIN <= self.margin_percent <= MARGIN_PERCENT_MAX):
            raise ValueError("margin_percent must be within [0, 50]")
        if self.points_per_pixel <= 0:
            raise ValueError("points_per_pixel must be > 0")


@dataclass(frozen=True, slots=True)
class PageLayout:
    page_num: int  # source page number the artifact came from
    page_width: int
    page_height: int
    image_x: int  # top-left origin, layout pixels
    image_y: int
    image_width: int
    image_height: int


@dataclass(frozen=True, slots=True)
class AssembledDocument:
    pdf_bytes: bytes
    layouts: list[PageLayout]

    @property
    def page_count(self) -> int:
        return len(self.layouts)

    def layout_dict(self) -> list[dict[str, Any]]:
        return [asdict(layout) for layout in self.layouts]
