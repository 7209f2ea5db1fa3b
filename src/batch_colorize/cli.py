from __future__ import annotations

import argparse
import logging
from pathlib import Path

from assemble_pdf.contracts import MARGIN_PRESETS, AssemblyError
from colorize.contracts import DEFAULT_BOLDNESS, ColorizeError
from colorize.themes import CUSTOM_THEME_ID, DEFAULT_THEME_ID, theme_display_name, theme_ids
from render_pdf.contracts import DEFAULT_RENDER_SCALE, DocumentOpenError, RenderError
from render_pdf.data_access import DataAccessError

from .artifacts import write_batch_report_json
from .contracts import BatchProgress
from .logging_utils import configure_logging
from .session import ColorizeSession

log = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chromapdf",
        description="Tint a black/white PDF with one target color and rebuild it as a new PDF.",
    )
    p.add_argument("--pdf", required=True, type=Path, help="Input PDF file.")
    p.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output file. Default: chromapdf_<theme>_<name>.pdf (or page_<n>_<theme>.png) next to the input.",
    )
    p.add_argument("--theme", choices=theme_ids(), default=DEFAULT_THEME_ID, help="Color theme preset.")
    p.add_argument("--color", default=None, help='Custom target color "#RRGGBB" (selects the custom theme).')
    p.add_argument(
        "--boldness",
        type=float,
        default=DEFAULT_BOLDNESS,
        help="0 (soft, linear) .. 100 (sharp, deep color). Clamped to [0, 100].",
    )
    p.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_RENDER_SCALE,
        help="Render scale in pixels per PDF point (0.5 .. 8.0).",
    )
    margin = p.add_mutually_exclusive_group()
    margin.add_argument("--margin", type=float, default=None, help="Output margin in percent of page width (0 .. 50).")
    margin.add_argument("--margin-preset", choices=sorted(MARGIN_PRESETS), default=None, help="Named output margin.")
    p.add_argument("--page", type=int, default=None, help="Colorize only this page and export it as PNG.")
    p.add_argument("--report", type=Path, default=None, help="Write a JSON batch run report.")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level.",
    )
    p.add_argument("--log-file", type=Path, default=None, help="Write logs to this file instead of stderr.")
    return p


def _log_progress(progress: BatchProgress | None) -> None:
    if progress is not None and progress.current > 0:
        log.info("Processed page %d of %d", progress.current, progress.total)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(getattr(logging, args.log_level), log_file=args.log_file)

    session = ColorizeSession()
    if args.color is not None:
        session.set_theme(CUSTOM_THEME_ID, custom_hex=args.color)
    else:
        session.set_theme(args.theme)
    session.set_boldness(args.boldness)
    try:
        session.set_render_scale(args.scale)
    except ValueError as e:
        log.error("%s", e)
        return 1
    if args.margin_preset is not None:
        session.set_margin_preset(args.margin_preset)
    elif args.margin is not None:
        session.set_margin_percent(args.margin)

    try:
        session.open_document(args.pdf)
    except (DataAccessError, DocumentOpenError):
        return 1

    color = session.color_spec()
    log.info(
        "Theme %s (%s), boldness %s, scale %s",
        theme_display_name(session.settings.theme_id),
        color.target_hex,
        color.boldness,
        session.settings.render_scale,
    )

    if args.page is not None:
        try:
            session.colorize_page(args.page)
        except (RenderError, ColorizeError, ValueError):
            return 1
        out_file = args.out or args.pdf.parent / session.default_png_name(args.page)
        session.export_png(args.page, out_file)
        log.info("Wrote %s", out_file)
        return 0

    result = session.colorize_all(on_progress=_log_progress)
    if args.report is not None:
        write_batch_report_json(result=result, out_report=args.report)

    out_file = args.out or args.pdf.parent / session.default_pdf_name()
    try:
        written = session.export_pdf(out_file)
    except AssemblyError:
        return 1
    if written is None:
        log.error("No pages were colorized; no PDF written")
    else:
        log.info("Wrote %s", written)

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
