"""Tests for hue / chroma / lightness adjustment."""

import math
import warnings

import numpy as np
import pytest

from okcolor_adjust import (
    scale_chroma,
    set_chroma,
    set_hue,
    set_lightness,
    shift_hue,
    shift_lightness,
    wrap_hue,
)
from okcolor_engine import TAU, rgb2oklch
from okcolor_vector import Vec3

ORANGE = np.array([0.9, 0.5, 0.2])


class TestWrapHue:
    """Hue wrapping into [0, 2*pi)."""

    def test_in_range_unchanged(self):
        assert wrap_hue(1.0) == 1.0
        assert wrap_hue(0.0) == 0.0

    def test_negative(self):
        assert wrap_hue(-math.pi / 2) == pytest.approx(1.5 * math.pi)

    def test_large_positive(self):
        assert wrap_hue(7 * math.pi) == pytest.approx(math.pi, abs=1e-12)

    def test_full_turn(self):
        assert wrap_hue(TAU) == 0.0
        assert wrap_hue(-TAU) == 0.0

    def test_tiny_negative_folds_to_zero(self):
        """-1e-20 + 2*pi rounds to exactly 2*pi, which folds to 0."""
        assert wrap_hue(-1e-20) == 0.0

    @pytest.mark.parametrize("value", [7 * math.pi, -7 * math.pi, 1e6, -1e6, -1e-20, 123.456])
    def test_always_in_range(self, value):
        h = wrap_hue(value)
        assert 0.0 <= h < TAU

    def test_array(self):
        h = wrap_hue(np.array([-1.0, 0.5, 10.0]))
        assert isinstance(h, np.ndarray)
        np.testing.assert_allclose(h, [TAU - 1.0, 0.5, 10.0 - TAU])

    def test_nan(self):
        assert math.isnan(wrap_hue(float("nan")))

    @pytest.mark.parametrize("value", [math.inf, -math.inf])
    def test_infinite_is_nan_without_warning(self, value):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert math.isnan(wrap_hue(value))
            assert np.isnan(wrap_hue(np.array([value, 1.0]))[0])


class TestHue:
    """set_hue / shift_hue."""

    def test_set_hue_wraps(self):
        """7*pi behaves like 7*pi mod 2*pi."""
        np.testing.assert_array_equal(
            set_hue(ORANGE, 7 * math.pi),
            set_hue(ORANGE, math.fmod(7 * math.pi, TAU)),
        )

    def test_set_hue_negative_wraps(self):
        np.testing.assert_array_equal(
            set_hue(ORANGE, -1.0),
            set_hue(ORANGE, TAU - 1.0),
        )

    def test_set_current_hue_is_identity(self, muted_colors):
        for rgb in muted_colors:
            h = rgb2oklch(rgb)[2]
            np.testing.assert_allclose(set_hue(rgb, h), rgb, atol=1e-4)

    def test_set_hue_result(self, muted_colors):
        rgb = set_hue(muted_colors[0], 4.0)
        assert rgb2oklch(rgb)[2] == pytest.approx(4.0 - TAU, abs=1e-3)

    def test_shift_by_zero_and_full_turn(self):
        np.testing.assert_allclose(shift_hue(ORANGE, 0.0), ORANGE, atol=1e-4)
        np.testing.assert_allclose(shift_hue(ORANGE, TAU), ORANGE, atol=1e-4)

    def test_shift_rotates(self, muted_colors):
        for rgb in muted_colors:
            before = rgb2oklch(rgb)
            after = rgb2oklch(shift_hue(rgb, math.pi))
            assert wrap_hue(after[2] - before[2]) == pytest.approx(math.pi, abs=1e-3)
            assert after[0] == pytest.approx(before[0], abs=1e-4)
            assert after[1] == pytest.approx(before[1], abs=1e-4)

    def test_shift_hue_large_factor(self):
        np.testing.assert_allclose(
            shift_hue(ORANGE, 0.3 + 10 * TAU), shift_hue(ORANGE, 0.3), atol=1e-9
        )


class TestChroma:
    """set_chroma / scale_chroma."""

    def test_scale_zero_is_gray(self):
        gray = scale_chroma(ORANGE, 0.0)
        assert gray[0] == pytest.approx(gray[1], abs=1e-9)
        assert gray[1] == pytest.approx(gray[2], abs=1e-9)

    def test_scale_zero_keeps_lightness(self, rgb_grid):
        before = rgb2oklch(rgb_grid)
        after = rgb2oklch(scale_chroma(rgb_grid, 0.0))
        np.testing.assert_allclose(after[:, 0], before[:, 0], atol=1e-6)
        np.testing.assert_allclose(after[:, 1], 0.0, atol=1e-6)

    def test_scale_one_is_identity(self, rgb_grid):
        np.testing.assert_allclose(scale_chroma(rgb_grid, 1.0), rgb_grid, atol=1e-4)

    def test_set_zero_matches_scale_zero(self):
        np.testing.assert_array_equal(set_chroma(ORANGE, 0.0), scale_chroma(ORANGE, 0.0))

    def test_set_chroma_result(self, muted_colors):
        rgb = set_chroma(muted_colors[0], 0.05)
        assert rgb2oklch(rgb)[1] == pytest.approx(0.05, abs=1e-4)

    def test_negative_chroma_not_clamped(self, muted_colors):
        """Negative chroma points the opposite way: a half-turn of hue."""
        rgb = muted_colors[0]
        C = rgb2oklch(rgb)[1]
        np.testing.assert_allclose(set_chroma(rgb, -C), shift_hue(rgb, math.pi), atol=1e-9)

    def test_huge_chroma_clipped_to_rgb_range(self):
        rgb = set_chroma(ORANGE, 5.0)
        assert np.all(rgb >= 0.0)
        assert np.all(rgb <= 1.0)


class TestLightness:
    """set_lightness / shift_lightness."""

    def test_set_clamps_high(self):
        np.testing.assert_array_equal(set_lightness(ORANGE, 5.0), set_lightness(ORANGE, 1.0))

    def test_set_clamps_low(self):
        np.testing.assert_array_equal(set_lightness(ORANGE, -3.0), set_lightness(ORANGE, 0.0))

    def test_set_gray_lightness(self):
        rgb = set_lightness(np.array([0.5, 0.5, 0.5]), 0.7)
        assert rgb2oklch(rgb)[0] == pytest.approx(0.7, abs=1e-6)

    def test_shift_clamps(self):
        np.testing.assert_array_equal(shift_lightness(ORANGE, 10.0), set_lightness(ORANGE, 1.0))
        np.testing.assert_array_equal(shift_lightness(ORANGE, -10.0), set_lightness(ORANGE, 0.0))

    def test_shift_zero_is_identity(self, rgb_grid):
        np.testing.assert_allclose(shift_lightness(rgb_grid, 0.0), rgb_grid, atol=1e-4)

    def test_shift_moves_lightness(self, muted_colors):
        for rgb in muted_colors:
            before = rgb2oklch(rgb)[0]
            after = rgb2oklch(shift_lightness(rgb, 0.1))[0]
            assert after == pytest.approx(before + 0.1, abs=1e-4)


class TestAdjustShapes:
    """Batches, per-row parameters and Vec3."""

    def test_vec3(self):
        out = set_hue(Vec3(0.9, 0.5, 0.2), 1.0)
        assert isinstance(out, Vec3)
        np.testing.assert_allclose(np.asarray(out), set_hue(ORANGE, 1.0), atol=1e-12)

    def test_per_row_parameter(self, muted_colors):
        hues = np.array([0.5, 2.0, 4.0])
        out = set_hue(muted_colors, hues)
        assert out.shape == (3, 3)
        for i in range(3):
            np.testing.assert_allclose(out[i], set_hue(muted_colors[i], hues[i]), atol=1e-12)

    def test_image_shape(self):
        img = np.random.default_rng(5).uniform(0.1, 1.0, size=(2, 4, 3))
        assert scale_chroma(img, 0.5).shape == (2, 4, 3)
        assert shift_lightness(img, np.full((2, 4), 0.05)).shape == (2, 4, 3)

    def test_parameter_shape_mismatch(self, muted_colors):
        with pytest.raises(ValueError, match="does not match"):
            set_hue(muted_colors, np.array([0.1, 0.2]))

    def test_input_not_mutated(self, muted_colors):
        original = muted_colors.copy()
        shift_hue(muted_colors, 1.0)
        np.testing.assert_array_equal(muted_colors, original)
