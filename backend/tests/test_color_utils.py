"""
Unit tests for color space helpers: hex conversion, weighted distance,
color naming and quantization.
"""
import math

import numpy as np
import pytest

from shirtsort.models import NAMED_COLORS, NamedColor
from shirtsort.services.colors.utils import (
    closest_color_name, closest_named_color, color_distance, hex_to_rgb,
    quantize, rgb_to_hex
)


class TestHexConversion:
    """Test RGB <-> hex conversion"""

    def test_rgb_to_hex_basic_colors(self):
        assert rgb_to_hex((255, 0, 0)) == "#FF0000"
        assert rgb_to_hex((0, 0, 0)) == "#000000"
        assert rgb_to_hex((255, 255, 255)) == "#FFFFFF"
        assert rgb_to_hex(np.array([31, 78, 121], dtype=np.uint8)) == "#1F4E79"

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1F4E79") == (31, 78, 121)
        assert hex_to_rgb("1f4e79") == (31, 78, 121)

    @pytest.mark.parametrize("bad", ["#12345", "zzzzzz", "", "#1234567"])
    def test_hex_to_rgb_invalid(self, bad):
        with pytest.raises(ValueError):
            hex_to_rgb(bad)


class TestColorDistance:
    """Test the green-weighted perceptual distance"""

    PAIRS = [
        ((0, 0, 0), (255, 255, 255)),
        ((224, 16, 16), (16, 48, 208)),
        ((100, 100, 100), (125, 100, 100)),
        ((12, 200, 7), (12, 201, 7)),
    ]

    @pytest.mark.parametrize("c1,c2", PAIRS)
    def test_identity_and_symmetry(self, c1, c2):
        assert color_distance(c1, c1) == 0
        assert color_distance(c2, c2) == 0
        assert color_distance(c1, c2) == color_distance(c2, c1)

    def test_channel_weights(self):
        origin = (0, 0, 0)
        assert color_distance(origin, (1, 0, 0)) == pytest.approx(math.sqrt(2))
        assert color_distance(origin, (0, 1, 0)) == pytest.approx(2.0)
        assert color_distance(origin, (0, 0, 1)) == pytest.approx(math.sqrt(3))

    def test_green_differences_weigh_most(self):
        origin = (0, 0, 0)
        assert color_distance(origin, (0, 10, 0)) > color_distance(origin, (0, 0, 10))
        assert color_distance(origin, (0, 0, 10)) > color_distance(origin, (10, 0, 0))

    def test_accepts_numpy_values(self):
        c1 = np.array([250, 10, 10], dtype=np.uint8)
        c2 = np.array([10, 250, 10], dtype=np.uint8)
        # uint8 subtraction must not wrap around
        assert color_distance(c1, c2) == pytest.approx(math.sqrt(2 * 240 ** 2 + 4 * 240 ** 2))


class TestColorNaming:
    """Test nearest-name lookup over the reference table"""

    def test_table_is_large_enough(self):
        assert len(NAMED_COLORS) >= 20
        names = [c.name for c in NAMED_COLORS]
        for expected in ("Red", "Blue", "Black", "White", "Gray", "Navy"):
            assert expected in names

    def test_table_entries_name_themselves(self):
        for entry in NAMED_COLORS:
            assert closest_color_name(entry.rgb) == entry.name

    def test_near_colors(self):
        assert closest_color_name((224, 16, 16)) == "Red"
        assert closest_color_name((16, 48, 208)) == "Blue"
        assert closest_color_name((0, 0, 120)) == "Navy"
        assert closest_color_name((130, 126, 129)) == "Gray"

    def test_tie_goes_to_first_entry(self):
        table = (NamedColor("First", (0, 0, 0)), NamedColor("Second", (20, 0, 0)))
        assert closest_named_color((10, 0, 0), table).name == "First"


class TestQuantize:
    """Test channel quantization"""

    def test_rounds_to_nearest_step(self):
        pixels = np.array([[0, 7, 8], [15, 16, 255], [24, 247, 248]], dtype=np.uint8)
        expected = np.array([[0, 0, 16], [16, 16, 255], [32, 240, 255]])
        np.testing.assert_array_equal(quantize(pixels, 16), expected)

    def test_step_centers_are_stable(self):
        pixels = np.array([[224, 16, 16], [16, 48, 208]], dtype=np.uint8)
        np.testing.assert_array_equal(quantize(pixels, 16), pixels.astype(np.int32))
