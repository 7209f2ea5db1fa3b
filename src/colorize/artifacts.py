from __future__ import annotations

import re
from pathlib import Path

from .contracts import ColorizedArtifact


def _safe_token(value: str, *, fallback: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", value)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or fallback


def single_page_png_name(page_num: int, theme_id: str) -> str:
    return f"page_{page_num}_{_safe_token(theme_id, fallback='custom')}.png"


def write_artifact_png(*, artifact: ColorizedArtifact, out_file: Path) -> Path:
    """Write one artifact as a standalone raster file (single-page export)."""
    out_file.parent.mkdir(parents=True, exist_ok=True)
    tmp = out_file.with_name(out_file.name + ".part")
    tmp.write_bytes(artifact.image_bytes)
    tmp.replace(out_file)
    return out_file
