"""Bounding-box grid pipeline.

This module ties the pieces together: it builds the run configuration,
tiles the study area into boxes roughly 25 miles wide, and writes them
out as filter rules.

Usage:
    python -m geogrid.pipeline -w -109 -e -102 -n 41 -s 37 -t geo-colorado -f colorado-boxes.json
    python -m geogrid.pipeline -w 33.78 -e 42 -n 5.1 -s 4.8 -d
    python -m geogrid.pipeline --config colorado.yaml
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

import numpy as np
from tqdm import tqdm

from .config import OUTPUT_FORMATS, RunConfig, build_run_config
from .exceptions import GeoGridError, MalformedNumericInputError
from .geometry import BoundingBox, parse_coordinate
from .io.rules import boxes_to_dataframe, write_rules
from .tiling.grid_tiler import GridTiler
from .tiling.offsets import estimate_box_count
from .utils.config import load_config
from .utils.logging import get_logger, set_level

logger = get_logger(__name__)


class BoxGridPipeline:
    """Tile a study area and write the resulting rules."""

    def __init__(self, config: RunConfig, show_progress: bool = False):
        """Initialize the pipeline.

        Parameters
        ----------
        config : RunConfig
            Immutable configuration for this run.
        show_progress : bool, optional
            Whether to display a progress bar over the rows.
        """
        self.config = config
        self.show_progress = show_progress
        self.tiler = GridTiler(params=config.tiling)

        # Pipeline state
        self.boxes: List[BoundingBox] = []

    def step_1_tile(self) -> List[BoundingBox]:
        """Step 1: Walk the study area and build the boxes."""
        area = self.config.area
        offset = self.config.offset
        logger.info(
            "Tiling [%.5f %.5f %.5f %.5f] with offsets lat=%.4f long=%.4f",
            area.west, area.south, area.east, area.north, offset.lat, offset.long,
        )

        rows, _ = estimate_box_count(area, offset)
        with tqdm(total=rows, unit="row", disable=not self.show_progress) as progress:
            self.boxes = self.tiler.tile(area, offset, on_row=lambda row: progress.update(1))
        return self.boxes

    def step_2_write(self, boxes: List[BoundingBox]) -> None:
        """Step 2: Write the boxes in the configured format."""
        write_rules(
            boxes,
            self.config.filepath,
            output_format=self.config.output_format,
            tag=self.config.tag,
        )

    def run(self) -> Dict:
        """Run the complete pipeline.

        Returns
        -------
        dict
            Summary statistics.
        """
        boxes = self.step_1_tile()
        self.step_2_write(boxes)

        widths = boxes_to_dataframe(boxes)["width_miles"].to_numpy(dtype=float)
        summary = {
            "total_boxes": len(boxes),
            "rows": len({box.south for box in boxes}),
            "mean_width_miles": float(np.mean(widths)) if len(widths) else 0.0,
            "output_path": str(self.config.filepath),
            "output_format": self.config.output_format,
        }
        logger.info(
            "Done: %d boxes in %d rows, mean width %.2f mi -> %s",
            summary["total_boxes"], summary["rows"],
            summary["mean_width_miles"], summary["output_path"],
        )
        return summary


def _coordinate(name: str):
    """argparse ``type`` that reports malformed numbers by field name."""
    def parse(value: str) -> float:
        try:
            return parse_coordinate(value, name)
        except MalformedNumericInputError as e:
            raise argparse.ArgumentTypeError(str(e))
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Break a rectangular area into ~25-mile bounding boxes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  geogrid -w -109 -e -102 -n 41 -s 37 -t "Geo-Colorado" -f colorado-boxes.json
  geogrid -w -106 -e -102 -n 41 -s 39 -t geo-colorado-nw -d
  geogrid -w 33.78 -e 42 -n 5.1 -s 4.8 --format csv
  geogrid --config colorado.yaml
        """
    )
    parser.add_argument("-w", "--west", type=_coordinate("west"), help="Western longitude")
    parser.add_argument("-s", "--south", type=_coordinate("south"), help="Southern latitude")
    parser.add_argument("-e", "--east", type=_coordinate("east"), help="Eastern longitude")
    parser.add_argument("-n", "--north", type=_coordinate("north"), help="Northern latitude")
    parser.add_argument("-t", "--tag", help="Tag attached to every JSON rule")
    parser.add_argument(
        "-f", "--filepath",
        help="Output file (default: geo_rules.json, geo_rules.txt or geo_boxes.csv)"
    )
    parser.add_argument(
        "-la", "--limit-lat",
        type=_coordinate("limit_lat"),
        help="Row height in degrees (default: 0.35)"
    )
    parser.add_argument(
        "-lo", "--limit-long",
        type=_coordinate("limit_long"),
        help="Initial column width in degrees (default depends on latitude)"
    )
    parser.add_argument(
        "-d", "--dashboard",
        action="store_true",
        help="Write plain-text rules, one per line"
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json)"
    )
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every resize step")
    parser.add_argument("-q", "--quiet", action="store_true", help="Hide the progress bar")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)

    output_format = args.format
    if args.dashboard and output_format is None:
        output_format = "text"

    try:
        file_values = load_config(args.config, required=True) if args.config else {}
        config = build_run_config(
            file_values,
            west=args.west,
            south=args.south,
            east=args.east,
            north=args.north,
            tag=args.tag,
            filepath=args.filepath,
            output_format=output_format,
            limit_lat=args.limit_lat,
            limit_long=args.limit_long,
        )
        BoxGridPipeline(config, show_progress=not args.quiet).run()
        return 0

    except GeoGridError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
