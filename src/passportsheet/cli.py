"""
Lay one cropped photo out as a printable A4 sheet of 35x45 passport photos.

Usage:
  passport-sheet --input in.jpg --crop 120,80,700,900
  passport-sheet -i in.jpg --rows 4 --cols 4 --gap 40 --mode cell-then-letterbox
  passport-sheet -i in.jpg --auto-crop --single --output photo.png
  passport-sheet -i in.jpg --report

Without --crop the largest centered 35:45 crop is used. --auto-crop frames
the crop around a detected face (needs the `face` extra).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from passportsheet.app.export import ExportPaths, save_raster
from passportsheet.app.state import SessionState
from passportsheet.core.crop import centered_crop, parse_crop
from passportsheet.core.errors import PassportSheetError
from passportsheet.core.models import LayoutMode, SheetParams
from passportsheet.validation.validator import format_report_text, validate_layout

logger = logging.getLogger("passportsheet")


def _build_arg_parser() -> argparse.ArgumentParser:
    d = SheetParams()
    p = argparse.ArgumentParser(description="Generate an A4 sheet (or a single photo) of 35x45 passport photos.")
    p.add_argument("--input", "-i", required=True, help="Path to input image (jpg/png/webp, etc.)")
    p.add_argument("--output", "-o", help="Output path (default: passport_sheet_A4.png or passport_photo_<ms>.png)")
    crop = p.add_mutually_exclusive_group()
    crop.add_argument("--crop", help="Crop rectangle in source pixels: x,y,width,height")
    crop.add_argument("--auto-crop", action="store_true", help="Frame the crop around a detected face (mediapipe)")
    p.add_argument("--rows", type=int, default=d.rows, help=f"Rows, 1-10 (default: {d.rows})")
    p.add_argument("--cols", type=int, default=d.cols, help=f"Columns, 1-10 (default: {d.cols})")
    p.add_argument("--margin", type=int, default=d.margin, help=f"Page margin in px, 0-400 (default: {d.margin})")
    p.add_argument("--gap", type=int, default=d.gap, help=f"Gap between photos in px, 0-200 (default: {d.gap})")
    p.add_argument("--border", type=int, default=d.border, help=f"White border inside each photo in px (default: {d.border})")
    p.add_argument(
        "--mode",
        choices=[m.value for m in LayoutMode],
        default=d.mode.value,
        help=f"Layout strategy (default: {d.mode.value})",
    )
    p.add_argument("--single", action="store_true", help="Export one full-size photo instead of the sheet")
    p.add_argument("--report", action="store_true", help="Print the layout check report")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def run(args: argparse.Namespace) -> str:
    state = SessionState()
    state.update_params(
        rows=args.rows,
        cols=args.cols,
        margin=args.margin,
        gap=args.gap,
        border=args.border,
        mode=LayoutMode(args.mode),
    )
    source = state.load_source(args.input)

    if args.crop:
        state.set_crop(parse_crop(args.crop))
    elif args.auto_crop:
        from passportsheet.core.face import face_crop

        state.set_crop(face_crop(source))
    else:
        state.set_crop(centered_crop(source.width, source.height))
    logger.info("crop %s on %dx%d source", state.crop, source.width, source.height)

    problem = state.problem()
    if problem is not None:
        raise PassportSheetError(problem)

    paths = ExportPaths.default()
    if args.single:
        raster = state.render_single()
        out = args.output or paths.single_photo()
    else:
        raster = state.render_sheet()
        out = args.output or paths.sheet_image
        if args.report:
            print(format_report_text(validate_layout(state.plan(), state.params.spacing(), raster)))

    return str(save_raster(raster, out))


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        out = run(args)
    except (PassportSheetError, ValueError, OSError, ImportError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Saved: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
