"""Unit tests for the grid tiler."""

import logging

import pytest

from geogrid.exceptions import InvalidOffsetError, NonConvergenceError
from geogrid.geometry import BoundingBox, Offset, StudyArea
from geogrid.tiling.grid_tiler import GridTiler, TilingParameters
from geogrid.tiling.offsets import default_offset


COLORADO = StudyArea(west=-109.0, south=37.0, east=-102.0, north=41.0)


def assert_within(area, boxes):
    for box in boxes:
        assert area.west <= box.west < box.east <= area.east
        assert area.south <= box.south < box.north <= area.north


class TestTilingParameters:
    """Test suite for TilingParameters."""

    def test_delta_tiers(self):
        """Test the latitude-tiered step deltas."""
        params = TilingParameters()
        assert params.delta_for(0.0) == 0.0001
        assert params.delta_for(74.99) == 0.0001
        assert params.delta_for(75.0) == 0.001
        assert params.delta_for(-84.9) == 0.001
        assert params.delta_for(85.0) == 0.01
        assert params.delta_for(-89.5) == 0.01

    def test_band_bounds(self):
        """Test that the band excludes its lower and includes its upper bound."""
        params = TilingParameters()
        assert not params.in_band(24.8)
        assert params.in_band(24.85)
        assert params.in_band(24.9)
        assert not params.in_band(24.9001)

    def test_invalid_band(self):
        """Test that an empty band is rejected."""
        with pytest.raises(ValueError):
            TilingParameters(band_min_miles=25.0, band_max_miles=24.0)

    def test_unsorted_tiers(self):
        """Test that tiers must be sorted by latitude."""
        with pytest.raises(ValueError):
            TilingParameters(delta_tiers=((85.0, 0.001), (75.0, 0.0001)))

    def test_non_positive_deltas(self):
        """Test that zero or negative resize deltas are rejected."""
        with pytest.raises(ValueError):
            TilingParameters(polar_delta=0.0)
        with pytest.raises(ValueError):
            TilingParameters(delta_tiers=((75.0, -0.0001), (85.0, 0.001)))


class TestResizeLongitudeStep:
    """Test suite for GridTiler.resize_longitude_step."""

    @pytest.mark.parametrize("start,latitude", [
        (0.45, 37.0),
        (0.35, 0.0),
        (0.35, -4.65),
        (0.6, 60.0),
        (3.0, 81.0),
        (3.0, -86.0),
    ])
    def test_result_in_band(self, start, latitude):
        """Test that the returned step measures inside the target band."""
        tiler = GridTiler()
        step = tiler.resize_longitude_step(start, -109.0, latitude)
        width = tiler.measure_width(step, -109.0, latitude)
        assert 24.8 < width <= 24.9

    def test_step_already_in_band(self):
        """Test that an in-band step is returned unchanged."""
        tiler = GridTiler()
        step = tiler.resize_longitude_step(0.45, -109.0, 37.0)
        assert tiler.resize_longitude_step(step, -109.0, 37.0) == step

    def test_polar_tier_delta(self):
        """Test that rows above 85 degrees move in 0.01 degree steps."""
        tiler = GridTiler()
        step = tiler.resize_longitude_step(3.0, 10.0, 86.0)
        n_steps = (step - 3.0) / 0.01
        assert step != 3.0
        assert n_steps == pytest.approx(round(n_steps), abs=1e-6)

    def test_custom_band(self):
        """Test that the target band is configurable."""
        tiler = GridTiler(TilingParameters(band_min_miles=9.9, band_max_miles=10.0))
        step = tiler.resize_longitude_step(0.2, 0.0, 45.0)
        assert 9.9 < tiler.measure_width(step, 0.0, 45.0) <= 10.0

    def test_iteration_cap(self):
        """Test that running out of iterations raises with diagnostics."""
        tiler = GridTiler(TilingParameters(max_iterations=5))
        with pytest.raises(NonConvergenceError) as exc_info:
            tiler.resize_longitude_step(0.1, -109.0, 37.0)

        err = exc_info.value
        assert err.latitude == 37.0
        assert err.iterations == 5
        assert err.step == pytest.approx(0.1005)
        assert "37.0" in str(err)

    def test_step_shrinks_to_zero(self):
        """Test that a step pushed to zero is reported instead of going negative."""
        tiler = GridTiler(TilingParameters(band_min_miles=0.0, band_max_miles=0.001))
        with pytest.raises(NonConvergenceError, match="shrank to zero"):
            tiler.resize_longitude_step(0.0001, 0.0, 0.0)


class TestTile:
    """Test suite for GridTiler.tile."""

    def test_colorado_grid(self):
        """Test the Colorado grid from the south-west corner to the clipped top row."""
        boxes = GridTiler().tile(COLORADO, default_offset(COLORADO))

        assert len(boxes) > 0
        assert all(isinstance(box, BoundingBox) for box in boxes)
        assert boxes[0].west == -109.0
        assert boxes[0].south == 37.0
        assert boxes[0].east == pytest.approx(-108.55)
        assert boxes[0].north == pytest.approx(37.35)

        last = boxes[-1]
        assert last.north == 41.0
        assert last.east == -102.0
        assert last.south == pytest.approx(40.85)
        assert_within(COLORADO, boxes)

    def test_rows_share_edges(self):
        """Test that each row has one south/north and rows move north."""
        tiler = GridTiler()
        rows = list(tiler.iter_rows(COLORADO, default_offset(COLORADO)))

        assert len(rows) == 12
        previous_south = None
        for row in rows:
            assert len({box.south for box in row}) == 1
            assert len({box.north for box in row}) == 1
            assert row[0].west == COLORADO.west
            assert row[-1].east == COLORADO.east
            if previous_south is not None:
                assert row[0].south >= previous_south
            previous_south = row[0].south

    def test_box_widths_near_target(self):
        """Test that unclipped boxes are all about 25 miles wide."""
        tiler = GridTiler()
        boxes = tiler.tile(COLORADO, default_offset(COLORADO))
        for box in boxes:
            if box.east == COLORADO.east:
                continue
            width = tiler.measure_width(box.east - box.west, box.west, box.south)
            assert 24.0 < width < 25.5

    def test_columns_widen_northward(self):
        """Test that the column width grows as rows move north."""
        rows = list(GridTiler().iter_rows(COLORADO, default_offset(COLORADO)))
        first_width = rows[1][0].east - rows[1][0].west
        last_width = rows[-1][0].east - rows[-1][0].west
        assert last_width > first_width

    def test_boxes_are_distinct_values(self):
        """Test that emitted boxes do not alias one another."""
        boxes = GridTiler().tile(COLORADO, default_offset(COLORADO))
        assert len({box.as_tuple() for box in boxes}) == len(boxes)

    def test_equator_grid(self):
        """Test an area straddling the equator."""
        area = StudyArea(west=30.0, south=-5.0, east=32.0, north=5.0)
        boxes = GridTiler().tile(area, default_offset(area))
        assert len(boxes) > 0
        assert boxes[-1].north == 5.0
        assert_within(area, boxes)

    def test_polar_grid(self):
        """Test an area near the pole with the large starting width."""
        area = StudyArea(west=10.0, south=81.0, east=30.0, north=85.0)
        boxes = GridTiler().tile(area, default_offset(area))
        assert len(boxes) > 0
        assert boxes[0].east - boxes[0].west == pytest.approx(3.0)
        assert boxes[-1].north == 85.0
        assert_within(area, boxes)

    def test_area_smaller_than_one_box(self):
        """Test that a tiny area yields a single clipped box."""
        area = StudyArea(west=-105.0, south=39.0, east=-104.9, north=39.1)
        boxes = GridTiler().tile(area, default_offset(area))
        assert boxes == [BoundingBox(west=-105.0, south=39.0, east=-104.9, north=39.1)]

    def test_explicit_offset(self):
        """Test tiling with a caller-supplied offset."""
        boxes = GridTiler().tile(COLORADO, Offset(lat=1.0, long=1.0))
        rows = sorted({box.south for box in boxes})
        assert rows == [37.0, 38.0, 39.0, 40.0]
        assert_within(COLORADO, boxes)

    def test_non_convergence_propagates(self):
        """Test that a resize failure stops the walk."""
        tiler = GridTiler(TilingParameters(max_iterations=3))
        with pytest.raises(NonConvergenceError):
            tiler.tile(COLORADO, Offset(lat=0.35, long=0.1))

    def test_polar_warning(self, caplog):
        """Test that areas beyond 89 degrees log a convergence warning."""
        area = StudyArea(west=0.0, south=89.2, east=5.0, north=89.5)
        with caplog.at_level(logging.WARNING, logger="geogrid.tiling.grid_tiler"):
            boxes = GridTiler().tile(area, default_offset(area))
        assert len(boxes) == 2
        assert any("may not converge" in record.message for record in caplog.records)

    def test_on_row_callback(self):
        """Test that the row callback sees every row in walk order."""
        rows = []
        boxes = GridTiler().tile(COLORADO, default_offset(COLORADO), on_row=rows.append)
        assert len(rows) == 12
        assert [box for row in rows for box in row] == boxes
        assert [row[0].south for row in rows] == sorted(row[0].south for row in rows)


class TestCheckOffset:
    """Test suite for GridTiler.check_offset."""

    def test_default_offset_accepted(self):
        """Test that the default offsets pass."""
        GridTiler().check_offset(COLORADO, default_offset(COLORADO))

    def test_row_height_below_precision(self):
        """Test that a row height lost to row rounding is rejected before walking."""
        area = StudyArea(west=-109.0, south=37.0, east=-108.9, north=37.1)
        with pytest.raises(InvalidOffsetError, match="latitude offset"):
            next(GridTiler().iter_rows(area, Offset(lat=1e-9, long=0.45)))

    def test_row_height_rounding_to_zero(self):
        """Test that a row height that rounds away at 8 places is rejected."""
        with pytest.raises(InvalidOffsetError):
            GridTiler().check_offset(COLORADO, Offset(lat=4e-9, long=0.45))

    def test_column_width_lost_in_float(self):
        """Test that a column width too small to move the west edge is rejected."""
        with pytest.raises(InvalidOffsetError, match="longitude offset"):
            GridTiler().tile(COLORADO, Offset(lat=0.35, long=1e-15))

    def test_column_width_checked_at_far_edge(self):
        """Test that the column width must also advance at the widest longitude."""
        area = StudyArea(west=0.0, south=37.0, east=179.0, north=38.0)
        with pytest.raises(InvalidOffsetError):
            GridTiler().check_offset(area, Offset(lat=0.35, long=1e-15))

    def test_coarser_row_precision(self):
        """Test that the row check follows the configured precision."""
        tiler = GridTiler(TilingParameters(row_precision=2))
        with pytest.raises(InvalidOffsetError):
            tiler.check_offset(COLORADO, Offset(lat=0.001, long=0.45))
