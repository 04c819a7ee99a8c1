# -*- coding: utf-8 -*-
"""
OkColor: Perceptual color conversion and manipulation in Oklab / OkLCH
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual Mixing
=================
Interpolates two RGB colors in cone-response space (cube-rooted LMS).

Oklab is a linear transform of the cone response, so a straight line in
cone-response space is a straight line in Oklab.  Mixing therefore skips the
final Oklab matrix and its inverse and interpolates one step earlier.

The gamma used here is always ``MIX_GAMMA`` (2.2).  Unlike the conversion
functions, ``mix`` does not take a gamma argument.
"""

from typing import Tuple, Union

import numpy as np

from okcolor_engine import (
    ArrayFloat,
    ColorLike,
    MIX_GAMMA,
    _as_batch,
    _cone_to_rgb_raw,
    _restore,
    _rgb_to_cone_raw,
)

__all__ = ["mix"]


def _prepare_inputs(
    rgb1: ColorLike, rgb2: ColorLike
) -> Tuple[ArrayFloat, ArrayFloat, Tuple[int, ...], bool]:
    """
    Broadcasting helper.

    A single color is repeated to match a batch.  Two batches must have the
    same leading shape.  The repeated array is materialized
    into a writable C-ordered copy because the Numba kernels index it flat.

    Returns:
        (batch1, batch2, leading_shape, both_vec3)
    """
    c1, lead1, vec1 = _as_batch(rgb1)
    c2, lead2, vec2 = _as_batch(rgb2)

    if c1.shape[0] == 1 and c2.shape[0] == 1:
        lead = lead1 if len(lead1) >= len(lead2) else lead2
    elif lead1 == lead2:
        lead = lead1
    elif c1.shape[0] == 1:
        c1 = np.require(np.broadcast_to(c1, c2.shape), requirements=["C", "W"])
        lead = lead2
    elif c2.shape[0] == 1:
        c2 = np.require(np.broadcast_to(c2, c1.shape), requirements=["C", "W"])
        lead = lead1
    else:
        raise ValueError(
            f"Shapes {lead1 + (3,)} and {lead2 + (3,)} are not broadcastable."
        )
    return c1, c2, lead, vec1 and vec2


def mix(
    rgb1: ColorLike,
    rgb2: ColorLike,
    t: Union[float, ArrayFloat],
    clip: bool = True,
) -> ColorLike:
    """
    Mixes two normalized RGB colors perceptually.

    Both colors are decoded with gamma 2.2, mapped to cone response and
    interpolated as ``lms1 + (lms2 - lms1) * t``.  The result is cubed, mapped
    back to linear RGB and re-encoded with gamma 2.2.

    Args:
        rgb1: First color (``t = 0``).  Vec3, (3,) or (..., 3).
        rgb2: Second color (``t = 1``).  A single color broadcasts against a
              batch in the other argument.
        t: Interpolation factor.  A scalar, or one value per color in the
           batch.  Values outside [0, 1] extrapolate.
        clip: If True (default), clamps linear RGB to [0, 1] before gamma
              encoding, as ``oklab2rgb`` does.  If False, the raw result is
              encoded; negative linear components then come out as NaN.

    Returns:
        Mixed RGB color(s).  A Vec3 when both inputs are Vec3.

    Raises:
        ValueError: If the inputs are not 3-component colors or their batch
            sizes do not broadcast.
    """
    c1, c2, lead, as_vec = _prepare_inputs(rgb1, rgb2)

    t_arr = np.asarray(t, dtype=np.float64)
    if t_arr.ndim == 0:
        weight: Union[float, ArrayFloat] = float(t_arr)
    else:
        try:
            weight = np.broadcast_to(t_arr, lead).reshape(-1, 1)
        except ValueError:
            raise ValueError(
                f"Mixing factor of shape {t_arr.shape} does not match color batch of shape {lead}"
            ) from None

    lms1 = _rgb_to_cone_raw(c1, MIX_GAMMA)
    lms2 = _rgb_to_cone_raw(c2, MIX_GAMMA)
    lms = np.ascontiguousarray(lms1 + (lms2 - lms1) * weight)

    return _restore(_cone_to_rgb_raw(lms, MIX_GAMMA, clip=clip), lead, as_vec)
