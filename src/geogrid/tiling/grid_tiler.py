"""Partition a study area into boxes of roughly constant width.

This module walks a study area row by row (south to north) and column by
column (west to east) emitting bounding boxes.  The row height is fixed,
but a degree of longitude shrinks towards the poles, so the column width
is re-derived at the end of every row: the longitude step is nudged until
the great-circle width of a box at that latitude falls inside a target
band (24.8–24.9 miles by default).

The nudge size depends on how close the row is to a pole, since the same
delta in degrees covers less ground at high latitudes.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from ..exceptions import InvalidOffsetError, NonConvergenceError
from ..geometry import BoundingBox, GeoPoint, Offset, StudyArea, TilingState
from ..utils.geodesy import distance_miles
from ..utils.logging import get_logger
from .offsets import estimate_box_count

logger = get_logger(__name__)


@dataclass(frozen=True)
class TilingParameters:
    """Tuning knobs for the longitude resize loop."""

    band_min_miles: float = 24.8
    """Exclusive lower bound of the accepted box width."""

    band_max_miles: float = 24.9
    """Inclusive upper bound of the accepted box width."""

    delta_tiers: Tuple[Tuple[float, float], ...] = ((75.0, 0.0001), (85.0, 0.001))
    """``(latitude limit, delta)`` pairs: the delta applies below the limit."""

    polar_delta: float = 0.01
    """Delta used at or above the last tier limit."""

    max_iterations: int = 20000
    """Number of adjustments after which resizing is abandoned."""

    row_precision: int = 8
    """Decimal places the row edges are rounded to after each advance."""

    polar_warning_latitude: float = 89.0
    """Absolute latitude above which convergence is known to be unreliable."""

    def __post_init__(self):
        if not self.band_min_miles < self.band_max_miles:
            raise ValueError("band_min_miles must be smaller than band_max_miles")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        limits = [limit for limit, _ in self.delta_tiers]
        if limits != sorted(limits):
            raise ValueError("delta_tiers must be sorted by latitude limit")
        if any(not delta > 0 for _, delta in self.delta_tiers) or not self.polar_delta > 0:
            raise ValueError("tier deltas and polar_delta must be positive")

    def delta_for(self, latitude: float) -> float:
        """Return the step delta for a row at ``latitude``."""
        lat = abs(latitude)
        for limit, delta in self.delta_tiers:
            if lat < limit:
                return delta
        return self.polar_delta

    def in_band(self, distance: float) -> bool:
        return self.band_min_miles < distance <= self.band_max_miles


@dataclass
class GridTiler:
    """Tile a study area into boxes about 25 miles wide."""

    params: TilingParameters = field(default_factory=TilingParameters)

    def measure_width(self, step: float, west_edge: float, latitude: float) -> float:
        """Great-circle width in miles of a box ``step`` degrees wide."""
        return distance_miles(
            GeoPoint(longitude=west_edge, latitude=latitude),
            GeoPoint(longitude=west_edge + step, latitude=latitude),
        )

    def resize_longitude_step(self, current_step: float, west_edge: float, south_lat: float) -> float:
        """Adjust a longitude step until its width falls in the target band.

        Parameters
        ----------
        current_step : float
            Starting longitude step in degrees.
        west_edge : float
            Longitude of the western edge of the row.
        south_lat : float
            Latitude of the southern edge of the row.

        Returns
        -------
        float
            Longitude step whose width lies in
            ``(band_min_miles, band_max_miles]``.

        Raises
        ------
        NonConvergenceError
            If the band is not reached within ``max_iterations`` or the
            step shrinks to zero.
        """
        delta = self.params.delta_for(south_lat)
        step = current_step
        distance = self.measure_width(step, west_edge, south_lat)

        for iteration in range(self.params.max_iterations):
            logger.debug("lat %.5f step %.6f -> %.4f mi", south_lat, step, distance)
            if self.params.in_band(distance):
                return step
            if distance <= self.params.band_min_miles:
                step = step + delta
            else:
                step = step - delta
            if step <= 0:
                raise NonConvergenceError(
                    south_lat, step, distance, iteration + 1,
                    reason="step shrank to zero",
                )
            distance = self.measure_width(step, west_edge, south_lat)

        if self.params.in_band(distance):
            return step
        raise NonConvergenceError(south_lat, step, distance, self.params.max_iterations)

    def check_offset(self, area: StudyArea, offset: Offset) -> None:
        """Reject offsets too small to move the cursor across ``area``.

        A row height below the row rounding precision, or a column width
        lost in floating point at the largest longitude of the area,
        would leave the cursor in place and the walk would never end.

        Raises
        ------
        InvalidOffsetError
            If either step does not advance the cursor.
        """
        precision = self.params.row_precision
        if offset.lat < 10 ** -precision or round(area.south + offset.lat, precision) <= area.south:
            raise InvalidOffsetError(
                f"latitude offset {offset.lat} is below the row precision of "
                f"{precision} decimal places"
            )
        widest = max(abs(area.west), abs(area.east))
        if widest + offset.long <= widest or area.west + offset.long <= area.west:
            raise InvalidOffsetError(
                f"longitude offset {offset.long} is too small to advance from {area.west}"
            )

    def iter_rows(self, area: StudyArea, offset: Offset) -> Iterator[List[BoundingBox]]:
        """Walk the study area and yield the boxes of one row at a time.

        The walk starts at the south-west corner, marches east, then
        moves up a row and repeats.  Boxes that overhang the northern or
        eastern edge are snapped back onto it.  The column width of each
        new row comes from ``resize_longitude_step``.

        Parameters
        ----------
        area : StudyArea
            Area to cover.
        offset : Offset
            Row height and initial column width in degrees.

        Yields
        ------
        list of BoundingBox
            Boxes of one row, west to east.
        """
        if area.max_abs_latitude() > self.params.polar_warning_latitude:
            logger.warning(
                "Study area reaches latitude %.2f; longitude resizing may not converge "
                "beyond %.1f degrees",
                area.max_abs_latitude(), self.params.polar_warning_latitude,
            )

        self.check_offset(area, offset)
        state = TilingState.at_origin(area, offset)
        while state.south < area.north:
            row: List[BoundingBox] = []
            while state.west < area.east:
                row.append(state.snapshot(area))
                state.west = state.west + offset.long
                state.east = state.east + offset.long
            yield row

            state.west = area.west
            offset = offset.with_long(
                self.resize_longitude_step(offset.long, state.west, state.south)
            )
            self.check_offset(area, offset)
            state.east = state.west + offset.long
            state.south = round(state.south + offset.lat, self.params.row_precision)
            state.north = round(state.north + offset.lat, self.params.row_precision)

    def tile(
        self,
        area: StudyArea,
        offset: Offset,
        on_row: Optional[Callable[[List[BoundingBox]], None]] = None,
    ) -> List[BoundingBox]:
        """Split the study area into a list of boxes.

        Parameters
        ----------
        area : StudyArea
            Area to cover.
        offset : Offset
            Row height and initial column width in degrees.
        on_row : callable, optional
            Called with the boxes of each finished row, e.g. to advance a
            progress bar.

        Returns
        -------
        list of BoundingBox
            All boxes, row by row from the south-west corner.
        """
        rows, columns = estimate_box_count(area, offset)
        logger.info(
            "Expecting %d boxes (%d rows x %d columns)", rows * columns, rows, columns
        )
        boxes: List[BoundingBox] = []
        for row in self.iter_rows(area, offset):
            boxes.extend(row)
            if on_row is not None:
                on_row(row)
        logger.info("Generated %d boxes", len(boxes))
        return boxes
