from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ColorTheme:
    theme_id: str
    name: str
    hex: str


CUSTOM_THEME_ID = "custom"
DEFAULT_THEME_ID = "black"
DEFAULT_CUSTOM_HEX = "#6366f1"

THEMES: tuple[ColorTheme, ...] = (
    ColorTheme(theme_id="black", name="Sharp Black", hex="#000000"),
    ColorTheme(theme_id="green", name="Emerald Green", hex="#10B981"),
    ColorTheme(theme_id="blue", name="Royal Blue", hex="#3B82F6"),
    ColorTheme(theme_id="red", name="Crimson Red", hex="#EF4444"),
    ColorTheme(theme_id="purple", name="Deep Purple", hex="#8B5CF6"),
    ColorTheme(theme_id="orange", name="Burnt Orange", hex="#F97316"),
)

_THEMES_BY_ID = {t.theme_id: t for t in THEMES}


def theme_ids() -> list[str]:
    return [t.theme_id for t in THEMES] + [CUSTOM_THEME_ID]


def resolve_theme_hex(theme_id: str, custom_hex: str = DEFAULT_CUSTOM_HEX) -> str:
    """Active target color for a theme selection. Unknown themes resolve to black."""
    if theme_id == CUSTOM_THEME_ID:
        return custom_hex
    theme = _THEMES_BY_ID.get(theme_id)
    return theme.hex if theme is not None else "#000000"


def theme_display_name(theme_id: str) -> str:
    if theme_id == CUSTOM_THEME_ID:
        return "Custom Color"
    theme = _THEMES_BY_ID.get(theme_id)
    return theme.name if theme is not None else "Unknown"
