from __future__ import annotations

from pathlib import Path


class DataAccessError(Exception):
    pass


def resolve_input_pdf(pdf_path: Path) -> Path:
    """
    Resolve an explicitly passed input path to an existing PDF file.

    Only PDFs are accepted (by .pdf extension); no implicit search paths.
    """

    if not isinstance(pdf_path, Path):
        raise TypeError("pdf_path must be a pathlib.Path")

    candidate = pdf_path.expanduser().resolve()
    if candidate.suffix.lower() != ".pdf":
        raise DataAccessError(f"Only PDFs are accepted (by .pdf extension), got: {str(pdf_path)!r}")
    if not candidate.is_file():
        raise DataAccessError(f"Input PDF not found: {str(candidate)!r}")
    return candidate
