from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from shade_finder.src.shade_match.catalog import default_catalog, load_catalog
from shade_finder.src.shade_match.config import Settings
from shade_finder.src.shade_match.errors import ShadeMatchError
from shade_finder.src.shade_match.matcher import ShadeMatcher
from shade_finder.src.shade_match.models import RGBColor
from shade_finder.src.shade_match.pipeline import ShadeMatchPipeline
from shade_finder.src.shade_match.sampling import FixedRegionLocator


def _parse_rgb(value: str) -> RGBColor:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("expected R,G,B")
    try:
        return RGBColor(*(int(part) for part in parts))
    except (ValueError, ShadeMatchError) as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_region(value: str) -> FixedRegionLocator:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("expected X,Y,W,H as fractions of the image")
    try:
        return FixedRegionLocator(*(float(part) for part in parts))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shade-finder",
        description="Match a skin-tone sample to the closest foundation shade (CIEDE2000).",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Path to a shade catalog (.csv/.json with brand, shade, hex).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to SHADE_MATCH_LOG_LEVEL or INFO).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    match = subparsers.add_parser(
        "match", help="Sample skin tone from a photo and find the closest shade."
    )
    match.add_argument("--image", required=True, help="Path or URL to the photo.")
    match.add_argument(
        "--region",
        type=_parse_region,
        default=None,
        help="Sample box as X,Y,W,H fractions (default: 0.2,0.35,0.6,0.25).",
    )
    match.add_argument(
        "--top-n",
        type=int,
        default=None,
        help="Number of shades to report, best match included.",
    )
    match.add_argument(
        "--out",
        default=None,
        help="Optional JSON output path. If omitted, prints JSON to stdout.",
    )

    match_rgb = subparsers.add_parser(
        "match-rgb", help="Find the closest shade for an already averaged color."
    )
    match_rgb.add_argument(
        "--rgb", required=True, type=_parse_rgb, help="Sampled color as R,G,B."
    )
    match_rgb.add_argument("--top-n", type=int, default=None)
    match_rgb.add_argument("--out", default=None)

    subparsers.add_parser("catalog", help="List the shades in the catalog.")

    return parser


def _emit(payload: object, out: str | None) -> None:
    text = json.dumps(payload, indent=2)
    if out:
        output_path = Path(out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    top_n = getattr(args, "top_n", None)
    if top_n is None:
        top_n = settings.top_n
    if top_n < 1:
        parser.error("--top-n must be at least 1")

    try:
        catalog_path = args.catalog or settings.catalog_path
        catalog = load_catalog(catalog_path) if catalog_path else default_catalog()

        if args.command == "catalog":
            _emit([entry.to_dict() for entry in catalog], None)
            return

        if args.command == "match":
            pipeline = ShadeMatchPipeline(
                catalog=catalog,
                locator=args.region,
                settings=settings,
            )
            result = pipeline.run(args.image, alternatives=top_n - 1)
            _emit(result.to_dict(), args.out)
            return

        if args.command == "match-rgb":
            result = ShadeMatcher(catalog).find_closest(args.rgb, alternatives=top_n - 1)
            _emit(result.to_dict(), args.out)
            return
    except (ShadeMatchError, FileNotFoundError) as exc:
        parser.exit(1, f"{parser.prog}: error: {exc}\n")

    parser.error("unknown command")


if __name__ == "__main__":
    main()
