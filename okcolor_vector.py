# -*- coding: utf-8 -*-
"""
OkColor: Perceptual color conversion and manipulation in Oklab / OkLCH
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Vec3 value type
===============
A minimal three-component vector used to pass single colors through the
engine.  A ``Vec3`` carries no color-space tag: whether (x, y, z) means
(R, G, B), (L, a, b) or (L, C, H) depends only on the function that produced
or consumes it.

Only the operations the engine needs are provided: component-wise multiply,
linear interpolation and conversion to/from NumPy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Union

import numpy as np

__all__ = ["Vec3"]


@dataclass(slots=True, frozen=True)
class Vec3:
    """Immutable 3-component float vector."""
    x: float
    y: float
    z: float

    # ------------------------------------------------------------------
    # Construction / conversion
    # ------------------------------------------------------------------
    @classmethod
    def from_array(cls, values: Union[np.ndarray, Sequence[float]]) -> Vec3:
        """Builds a Vec3 from any length-3 sequence or (3,) array."""
        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.shape[0] != 3:
            raise ValueError(f"Vec3 requires exactly 3 components, got {arr.shape[0]}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_array(self) -> np.ndarray:
        """Returns the components as a float64 array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self.to_array()
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def multiply(self, other: Union[Vec3, float]) -> Vec3:
        """
        Component-wise product.

        Args:
            other: Another Vec3, or a scalar applied to every component.
        """
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        s = float(other)
        return Vec3(self.x * s, self.y * s, self.z * s)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if not isinstance(other, (Vec3, int, float, np.floating, np.integer)):
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    # NumPy scalars and arrays defer to the operators above instead of
    # converting the vector through __array__.
    __array_ufunc__ = None

    def mix(self, other: Vec3, t: float) -> Vec3:
        """
        Linear interpolation ``self + (other - self) * t``.

        ``t = 0`` returns ``self``, ``t = 1`` returns ``other``.  Values outside
        [0, 1] extrapolate.
        """
        return Vec3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )
