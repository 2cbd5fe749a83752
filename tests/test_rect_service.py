import pytest
from hypothesis import given, strategies as st

from orientcrop.models.errors import OutOfBoundsError
from orientcrop.models.geometry import Rect, Size
from orientcrop.models.orientation import Orientation
from orientcrop.services.rect_service import display_rect, display_to_raw_crop, orient_rect
from orientcrop.services.transform_service import inverse_orientation_transform


@st.composite
def sized_rects(draw):
    """A size and an integral rect lying inside it."""
    width = draw(st.integers(min_value=1, max_value=400))
    height = draw(st.integers(min_value=1, max_value=400))
    x = draw(st.integers(min_value=0, max_value=width - 1))
    y = draw(st.integers(min_value=0, max_value=height - 1))
    w = draw(st.integers(min_value=1, max_value=width - x))
    h = draw(st.integers(min_value=1, max_value=height - y))
    return Size(width, height), Rect(x, y, w, h)


orientations = st.sampled_from(list(Orientation))


class TestClosedForms:
    """Each orientation's explicit mapping, reference size 1800x1200."""

    @pytest.mark.parametrize("orientation,expected", [
        (Orientation.UP, (100, 50, 300, 200)),
        (Orientation.UP_MIRRORED, (1400, 50, 300, 200)),
        (Orientation.DOWN, (1400, 950, 300, 200)),
        (Orientation.DOWN_MIRRORED, (100, 950, 300, 200)),
        (Orientation.LEFT_MIRRORED, (50, 100, 200, 300)),
        (Orientation.RIGHT, (50, 1400, 200, 300)),
        (Orientation.RIGHT_MIRRORED, (950, 1400, 200, 300)),
        (Orientation.LEFT, (950, 100, 200, 300)),
    ])
    def test_mapping(self, orientation, expected):
        result = orient_rect(Rect(100, 50, 300, 200), orientation, Size(1800, 1200))
        assert result.as_tuple() == expected

    def test_left_mirrored_transposes(self):
        assert orient_rect(Rect(0, 0, 100, 50), Orientation.LEFT_MIRRORED, Size(1000, 1000)) == Rect(0, 0, 50, 100)

    def test_right_display_crop_to_raw(self):
        # raw 1200x1800 displayed as 1800x1200
        raw = display_to_raw_crop(Rect(512, 0, 1024, 1024), Orientation.RIGHT, Size(1200, 1800))
        assert raw == Rect(0, 264, 1024, 1024)
        assert Rect(0, 0, 1200, 1800).contains(raw)

    def test_output_is_rounded(self):
        result = orient_rect(Rect(10.4, 0.5, 20.5, 30.2), Orientation.UP_MIRRORED, Size(100, 100))
        # x' = 100 - 20.5 - 10.4 = 69.1
        assert result == Rect(69, 1, 21, 30)

    @pytest.mark.parametrize("orientation", list(Orientation))
    def test_matches_inverse_transform_bounding_box(self, orientation):
        display = Size(1800, 1200)
        rect = Rect(100, 50, 300, 200)
        raw_size = display.oriented(orientation)
        via_matrix = inverse_orientation_transform(orientation, raw_size).apply_to_rect(rect).rounded()
        assert orient_rect(rect, orientation, display) == via_matrix

    @pytest.mark.parametrize("orientation", list(Orientation))
    def test_display_rect_undoes_orient_rect(self, orientation):
        display = Size(640, 480)
        rect = Rect(10, 20, 30, 40)
        raw = orient_rect(rect, orientation, display)
        assert display_rect(raw, orientation, display.oriented(orientation)) == rect


class TestDisplayToRawCrop:
    """Mapping to raw coordinates, then intersection with the raw bounds."""

    def test_clips_to_display_bounds(self):
        raw = display_to_raw_crop(Rect(-10, -10, 50, 50), Orientation.UP, Size(100, 100))
        assert raw == Rect(0, 0, 40, 40)

    def test_original_cropping_case(self):
        # 2048 square crop from the top-left of a 1200x1800 upright image
        raw = display_to_raw_crop(Rect(0, 0, 2048, 2048), Orientation.DOWN, Size(1200, 1800))
        assert raw == Rect(0, 0, 1200, 1800)

    def test_disjoint_rect_fails(self):
        with pytest.raises(OutOfBoundsError):
            display_to_raw_crop(Rect(200, 200, 10, 10), Orientation.LEFT, Size(100, 100))

    def test_fractional_rect_inside_image_stays_in_bounds(self):
        # 0.5 rounds up to 1 while 99.5 rounds up to 100
        raw = display_to_raw_crop(Rect(0.5, 0, 99.5, 10), Orientation.UP, Size(100, 100))
        assert raw == Rect(1, 0, 99, 10)

    @pytest.mark.parametrize("orientation", list(Orientation))
    def test_fractional_rect_result_fits_raw_bounds(self, orientation):
        raw_size = Size(90, 60)
        display = raw_size.oriented(orientation)
        rect = Rect(0.5, 0.5, display.width - 0.5, display.height - 0.5)
        raw = display_to_raw_crop(rect, orientation, raw_size)
        assert raw.is_integral()
        assert Rect.from_size(raw_size).contains(raw)


class TestProperties:
    """Universally quantified properties over sizes, rects and codes."""

    @given(sized_rects(), orientations)
    def test_round_trip(self, sized, orientation):
        size, rect = sized
        there = orient_rect(rect, orientation, size)
        back = orient_rect(there, orientation.inverse, size.oriented(orientation))
        assert back == rect

    @given(sized_rects())
    def test_up_is_identity(self, sized):
        size, rect = sized
        assert orient_rect(rect, Orientation.UP, size) == rect

    @given(sized_rects(), orientations)
    def test_area_preserved(self, sized, orientation):
        size, rect = sized
        assert orient_rect(rect, orientation, size).area == rect.area

    @given(sized_rects(), orientations)
    def test_stays_inside_oriented_bounds(self, sized, orientation):
        size, rect = sized
        result = orient_rect(rect, orientation, size)
        assert Rect.from_size(size.oriented(orientation)).contains(result)
