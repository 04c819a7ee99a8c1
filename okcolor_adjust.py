# -*- coding: utf-8 -*-
"""
OkColor: Perceptual color conversion and manipulation in Oklab / OkLCH
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Hue / Chroma / Lightness Adjustment
===================================
Every adjustment follows the same three steps:

    RGB -> OkLCH  ->  change one channel  ->  OkLCH -> RGB

Channel policies:
    - Hue:        the new hue is wrapped into [0, 2*pi).
    - Chroma:     not clamped.  Values that leave the sRGB gamut are only
                  bounded by the per-channel clip in ``oklab2rgb``.
    - Lightness:  clamped to [0, 1] before converting back.

The conversions always use gamma 2.2.  Parameters may be scalars or one value
per color of a batch.
"""

from typing import Callable, Tuple, Union

import numpy as np

from okcolor_engine import (
    ArrayFloat,
    ColorLike,
    TAU,
    _as_batch,
    _oklch2rgb_raw,
    _restore,
    _rgb2oklch_raw,
    _row_param,
)

__all__ = [
    "wrap_hue",
    "set_hue",
    "shift_hue",
    "set_chroma",
    "scale_chroma",
    "set_lightness",
    "shift_lightness",
]

Param = Union[float, ArrayFloat]


def wrap_hue(value: Param) -> Param:
    """
    Wraps a hue angle (radians) into [0, 2*pi).

    ``fmod`` keeps the sign of its first argument, so negative remainders are
    shifted up by one turn.  A remainder that rounds to exactly 2*pi after the
    shift folds back to 0.  NaN stays NaN, and an infinite angle becomes NaN
    without a floating-point warning.

    Args:
        value: Angle in radians, scalar or array.

    Returns:
        Wrapped angle(s); a float for scalar input.
    """
    with np.errstate(invalid="ignore"):
        h = np.fmod(np.asarray(value, dtype=np.float64), TAU)
    h = np.where(h < 0.0, h + TAU, h)
    h = np.where(h >= TAU, 0.0, h)
    if h.ndim == 0:
        return float(h)
    return h


def _adjust(rgb: ColorLike, edit: Callable[[ArrayFloat, Tuple[int, ...]], None]) -> ColorLike:
    """Runs the RGB -> OkLCH -> edit -> RGB pipeline.  ``edit`` works in place."""
    batch, lead, was_vec = _as_batch(rgb)
    lch = _rgb2oklch_raw(batch)
    edit(lch, lead)
    return _restore(_oklch2rgb_raw(lch), lead, was_vec)


def set_hue(rgb: ColorLike, hue: Param) -> ColorLike:
    """
    Replaces the hue of an RGB color.

    Args:
        rgb: RGB color(s).
        hue: New hue in radians; wrapped into [0, 2*pi).
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 2] = wrap_hue(_row_param(hue, lead))
    return _adjust(rgb, edit)


def shift_hue(rgb: ColorLike, factor: Param) -> ColorLike:
    """
    Rotates the hue of an RGB color.

    Args:
        rgb: RGB color(s).
        factor: Hue offset in radians.  The sum is wrapped into [0, 2*pi).
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 2] = wrap_hue(lch[:, 2] + _row_param(factor, lead))
    return _adjust(rgb, edit)


def set_chroma(rgb: ColorLike, chroma: Param) -> ColorLike:
    """
    Replaces the chroma of an RGB color.

    No clamping: negative chroma flips the hue direction, large chroma goes
    out of gamut and is clipped per channel on the way back to RGB.
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 1] = _row_param(chroma, lead)
    return _adjust(rgb, edit)


def scale_chroma(rgb: ColorLike, factor: Param) -> ColorLike:
    """
    Multiplies the chroma of an RGB color by ``factor``.

    ``factor = 0`` yields the neutral gray of the same lightness.
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 1] = lch[:, 1] * _row_param(factor, lead)
    return _adjust(rgb, edit)


def set_lightness(rgb: ColorLike, lightness: Param) -> ColorLike:
    """
    Replaces the lightness of an RGB color.

    Args:
        rgb: RGB color(s).
        lightness: New Oklab lightness, clamped to [0, 1].
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 0] = np.clip(_row_param(lightness, lead), 0.0, 1.0)
    return _adjust(rgb, edit)


def shift_lightness(rgb: ColorLike, factor: Param) -> ColorLike:
    """
    Offsets the lightness of an RGB color.

    Args:
        rgb: RGB color(s).
        factor: Added to L; the sum is clamped to [0, 1].
    """
    def edit(lch: ArrayFloat, lead: Tuple[int, ...]) -> None:
        lch[:, 0] = np.clip(lch[:, 0] + _row_param(factor, lead), 0.0, 1.0)
    return _adjust(rgb, edit)
