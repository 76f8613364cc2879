"""CLI entry point for patch extraction."""

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

import numpy as np

from patch_extractor.core.exceptions import PatchExtractionError
from patch_extractor.core.settings import get_settings
from patch_extractor.core.utils import setup_logging
from patch_extractor.enums import SamplingMethod
from patch_extractor.models import ExtractionSummary, GridDimensions, PatchFile, Size
from patch_extractor.services import (
    PatchExtractor,
    encode_image,
    load_image,
    mask_region_from_factor,
)

logger = logging.getLogger(__name__)


def main() -> int:
    """
    Main CLI entry point.

        int: Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Image Patch Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Extract patches from an image")
    extract_parser.add_argument("image", help="Source image file")
    extract_parser.add_argument(
        "--patch-size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Patch size in pixels",
    )
    extract_parser.add_argument("--count", type=int, default=None, help="Number of patches")
    extract_parser.add_argument(
        "--sampling",
        choices=[method.value for method in SamplingMethod],
        default=None,
        help="Patch placement method",
    )
    extract_parser.add_argument(
        "--grid",
        type=int,
        nargs=2,
        metavar=("COLUMNS", "ROWS"),
        default=None,
        help="Explicit uniform grid (overrides --count and --sampling)",
    )
    extract_parser.add_argument(
        "--mask-factor",
        type=float,
        default=None,
        help="Fraction of the image, centered, to sample from",
    )
    extract_parser.add_argument("--seed", type=int, default=None, help="Random sampling seed")
    extract_parser.add_argument("--output-dir", default=None, help="Directory for patch images")
    extract_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Override the configured log level",
    )

    args = parser.parse_args()

    if args.command == "extract":
        return run_extract(args)
    else:
        parser.print_help()
        return 0


def run_extract(args: argparse.Namespace) -> int:
    """
    Extract patches from an image and write them to a directory.

    Prints a JSON summary of the written patches to stdout.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

        int: Exit code (0 for success, 1 if extraction failed).
    """
    settings = get_settings()
    setup_logging(settings=settings.logging, level=args.log_level)
    extraction = settings.extraction

    width, height = args.patch_size or (extraction.patch_width, extraction.patch_height)
    count = args.count if args.count is not None else extraction.count
    sampling = SamplingMethod(args.sampling or extraction.sampling)
    mask_factor = args.mask_factor if args.mask_factor is not None else extraction.mask_factor
    output_dir = Path(args.output_dir or settings.output.output_dir)
    extension = settings.output.image_extension

    seed = args.seed if args.seed is not None else extraction.seed
    extractor = PatchExtractor(
        settings=settings,
        converter=partial(encode_image, extension=extension),
        rng=np.random.default_rng(seed),
    )

    try:
        patch_size = Size(width=width, height=height)
        image = load_image(args.image)
        mask_region = mask_region_from_factor(image_size=image.size, mask_factor=mask_factor)
        if args.grid:
            columns, rows = args.grid
            result = extractor.extract_grid(
                image=image,
                patch_size=patch_size,
                grid=GridDimensions(columns=columns, rows=rows),
                mask_region=mask_region,
            )
        else:
            result = extractor.extract(
                image=image,
                patch_size=patch_size,
                count=count,
                sampling=sampling,
                mask_region=mask_region,
            )
    except (PatchExtractionError, ValueError) as e:
        logger.error(f"Patch extraction failed: {e}")
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(args.image).stem
    written: list[PatchFile] = []
    for index, (payload, rect) in enumerate(zip(result.payloads, result.rects)):
        path = output_dir / f"{stem}_{index:04d}{extension}"
        path.write_bytes(payload)
        written.append(PatchFile(path=str(path), rect=rect))

    logger.info(f"Wrote {len(written)} patches to {output_dir}")

    summary = ExtractionSummary(
        image=str(args.image),
        patch_size=patch_size,
        sampling=None if args.grid else sampling,
        mask_region=mask_region,
        patches=written,
        skipped=result.skipped,
    )
    print(summary.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
