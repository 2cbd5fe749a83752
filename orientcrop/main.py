"""Точка входа: командная строка orientcrop."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from orientcrop.controllers.crop_controller import CropController
from orientcrop.models.config import GeneratorConfig, ImageFormat
from orientcrop.models.errors import OrientCropError
from orientcrop.models.geometry import Rect, Size
from orientcrop.services.generator_service import OrientedGenerator
from orientcrop.services.image_service import ImageService

logger = logging.getLogger("orientcrop")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_rect(value: str) -> Rect:
    try:
        x, y, w, h = (float(v) for v in value.split(","))
        return Rect(x, y, w, h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"ожидалось X,Y,W,H: {value!r}") from exc


def _parse_size(value: str) -> Size:
    try:
        w, h = (float(v) for v in value.lower().split("x"))
        return Size(w, h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"ожидалось ШИРИНАxВЫСОТА: {value!r}") from exc


def _parse_quality(value: str) -> float:
    q = float(value)
    if not 0.0 <= q <= 1.0:
        raise argparse.ArgumentTypeError(f"quality должно быть в диапазоне 0.0–1.0: {value}")
    return q


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orientcrop",
        description="EXIF orientation aware cropping and reference image generation.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("ORIENTCROP_LOG_LEVEL", "INFO").upper(),
        choices=LOG_LEVELS,
        help="Logging level (default: $ORIENTCROP_LOG_LEVEL or INFO)",
    )
    formats = [f.value for f in ImageFormat]
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Write 8 copies of SOURCE, one per EXIF orientation code.")
    gen.add_argument("source")
    gen.add_argument("destination")
    gen.add_argument("--format", choices=formats, default=ImageFormat.JPEG.value)
    gen.add_argument("--max-size", type=_parse_size, help="Fit inside WxH, never upscale")
    gen.add_argument("--quality", type=_parse_quality, help="0.0-1.0, lossy formats only")
    gen.add_argument("--no-labels", action="store_true", help="Do not draw direction labels")

    crp = sub.add_parser("crop", help="Crop SOURCE by a rectangle given in display coordinates.")
    crp.add_argument("source")
    crp.add_argument("output")
    crp.add_argument("--rect", type=_parse_rect, required=True, help="X,Y,W,H in display coordinates")
    crp.add_argument(
        "--keep-orientation",
        action="store_true",
        help="Keep raw pixel layout and the original orientation tag",
    )
    crp.add_argument("--format", choices=formats, help="Output format (default: from extension)")
    crp.add_argument("--quality", type=_parse_quality)

    ori = sub.add_parser("orient", help="Bake the orientation tag into the pixels.")
    ori.add_argument("source")
    ori.add_argument("output")
    ori.add_argument("--format", choices=formats, help="Output format (default: from extension)")
    ori.add_argument("--quality", type=_parse_quality)

    info = sub.add_parser("info", help="Print raw size, display size and orientation.")
    info.add_argument("source")
    return parser


def run(args: argparse.Namespace) -> int:
    image_format = ImageFormat(args.format) if getattr(args, "format", None) else None
    if args.command == "generate":
        config = GeneratorConfig(
            format=image_format,
            max_size=args.max_size,
            quality=args.quality,
            **({"label_style": None} if args.no_labels else {}),
        )
        paths = OrientedGenerator().generate(args.source, args.destination, config)
        for path in paths:
            print(path)
    elif args.command == "crop":
        print(CropController().crop_file(args.source, args.rect, args.output, args.keep_orientation, image_format, args.quality))
    elif args.command == "orient":
        print(CropController().reorient_file(args.source, args.output, image_format, args.quality))
    elif args.command == "info":
        image = ImageService().load_image(args.source)
        print(f"size: {image.size.width}x{image.size.height}")
        print(f"display size: {image.display_size.width}x{image.display_size.height}")
        print(f"orientation: {int(image.orientation)} ({image.orientation.label})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, настраивает логирование и выполняет команду."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    try:
        return run(args)
    except (OrientCropError, OSError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
