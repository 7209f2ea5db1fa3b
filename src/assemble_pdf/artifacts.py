from __future__ import annotations

import re
from pathlib import Path

from .contracts import AssembledDocument, AssemblyError


def assembled_pdf_name(theme_id: str, source_name: str | None) -> str:
    """chromapdf_<theme>_<source stem>.pdf"""
    stem = Path(source_name).stem if source_name else "document"
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", stem)
    stem = re.sub(r"_+", "_", stem).strip("_") or "document"
    return f"chromapdf_{theme_id}_{stem}.pdf"


def write_pdf_bytes(*, document: AssembledDocument, out_file: Path) -> Path:
    """
    Write the assembled PDF. The target only appears once fully written.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    tmp = out_file.with_name(out_file.name + ".part")
    try:
        tmp.write_bytes(document.pdf_bytes)
        tmp.replace(out_file)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise AssemblyError(f"Failed to write PDF to {str(out_file)!r}: {e}") from e
    return out_file
