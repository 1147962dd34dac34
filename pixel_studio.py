"""
Pixel Studio command line.

Runs one editing operation on an image file and writes the result under its
default download filename.

Usage:
    python pixel_studio.py crop photo.png --x 10 --y 10 --width 200 --height 150
    python pixel_studio.py crop photo.png --aspect 16:9
    python pixel_studio.py filter photo.png --sepia 80 --contrast 120
    python pixel_studio.py denoise photo.png --strength 6
    python pixel_studio.py carve photo.png --stroke "10,10 80,12 120,40" --brush 15
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from PS_Libs.constants import (
    ASPECT_PRESETS,
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_NOISE_STRENGTH,
    FILTER_IDENTITY,
    FILTER_ORDER,
)
from PS_Libs.ImageEditingLib.errors import EncodeError
from PS_Libs.ImageEditingLib.image_models import Point, Raster
from PS_Libs.SessionLib.editing_session import EditingSession
from PS_Libs.SessionLib.export_handler import ExportConfig, ExportHandler
from PS_Libs.SessionLib.operation_registry import RECT_KEYS, get_default_registry

COMMAND_OPERATIONS = {
    "crop": "Crop",
    "filter": "Filters",
    "denoise": "Noise Reduction",
    "carve": "Remove Background",
}


def parse_stroke(text: str) -> List[Point]:
    """Parse "x1,y1 x2,y2 ..." into a list of points."""
    points = []
    for pair in text.split():
        try:
            x, y = pair.split(",")
            points.append((float(x), float(y)))
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid stroke point '{pair}', expected x,y")
    if not points:
        raise argparse.ArgumentTypeError("A stroke needs at least one point")
    return points


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixel_studio",
        description="Crop, filter, denoise or carve the background of an image",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input", help="Input image file")
    common.add_argument("-o", "--output-dir", default=".", help="Directory for the result")
    common.add_argument("--overwrite", action="store_true", help="Replace an existing result")

    commands = parser.add_subparsers(dest="command", required=True)

    crop = commands.add_parser("crop", parents=[common], help="Crop the image")
    crop.add_argument("--x", type=float)
    crop.add_argument("--y", type=float)
    crop.add_argument("--width", type=float)
    crop.add_argument("--height", type=float)
    crop.add_argument("--aspect", choices=sorted(ASPECT_PRESETS), default="free")

    filters = commands.add_parser("filter", parents=[common], help="Apply color/tone filters")
    for name in FILTER_ORDER:
        filters.add_argument(f"--{name}", type=float, default=FILTER_IDENTITY[name])

    denoise = commands.add_parser("denoise", parents=[common], help="Reduce noise")
    denoise.add_argument("--strength", type=int, default=DEFAULT_NOISE_STRENGTH)

    carve = commands.add_parser("carve", parents=[common], help="Make brushed areas transparent")
    carve.add_argument("--stroke", type=parse_stroke, action="append", required=True,
                       help='Brush stroke as "x1,y1 x2,y2 ..." (repeatable)')
    carve.add_argument("--brush", type=float, default=DEFAULT_BRUSH_RADIUS, help="Brush radius")

    return parser


def operation_params(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed arguments into registry operation parameters."""
    if args.command == "crop":
        params: Dict[str, Any] = {key: getattr(args, key) for key in RECT_KEYS}
        params["aspect_ratio"] = ASPECT_PRESETS[args.aspect]
        return params

    if args.command == "filter":
        return {name: getattr(args, name) for name in FILTER_ORDER}

    if args.command == "denoise":
        return {"strength": args.strength}

    return {"strokes": args.stroke, "brush_radius": args.brush}


def run(args: argparse.Namespace) -> Tuple[str, Raster]:
    """Execute the parsed command; returns (export feature, processed raster)."""
    session = EditingSession()
    session.load_image(args.input)

    return get_default_registry().execute(
        COMMAND_OPERATIONS[args.command], session, operation_params(args))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = ExportHandler(ExportConfig(
        output_dir=args.output_dir,
        overwrite=args.overwrite,
    ))

    try:
        feature, raster = run(args)
        path = handler.save(raster, feature)
    except EncodeError as e:
        print(f"Error: could not encode the result: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Saved {raster.width}x{raster.height} image to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
