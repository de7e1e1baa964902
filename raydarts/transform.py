"""Rays and homogeneous coordinate transformations."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

__all__ = ["Ray", "Transform"]


def _vec3(v) -> np.ndarray:
    arr = np.asarray(v, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr


@dataclass
class Ray:
    """A ray with origin ``o``, direction ``d`` and valid parameter interval [mint, maxt]."""

    o: np.ndarray
    d: np.ndarray
    mint: float = 1e-4
    maxt: float = math.inf

    def __post_init__(self) -> None:
        self.o = _vec3(self.o)
        self.d = _vec3(self.d)

    def at(self, t: float) -> np.ndarray:
        """Return the point at parameter ``t`` along the ray."""
        return self.o + t * self.d


class Transform:
    """A homogeneous coordinate transformation together with its inverse."""

    def __init__(self, m=None, m_inv=None) -> None:
        self.m = np.identity(4) if m is None else np.array(m, dtype=float)
        if self.m.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {self.m.shape}")
        if m_inv is None:
            self.m_inv = np.identity(4) if m is None else np.linalg.inv(self.m)
        else:
            self.m_inv = np.array(m_inv, dtype=float)
            if self.m_inv.shape != (4, 4):
                raise ValueError(f"expected a 4x4 inverse, got shape {self.m_inv.shape}")

    def __repr__(self) -> str:
        return f"Transform(m={self.m.tolist()!r})"

    def inverse(self) -> Transform:
        """Return the inverse transformation."""
        return Transform(self.m_inv, self.m)

    def __mul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self.m @ other.m, other.m_inv @ self.m_inv)

    def vector(self, v) -> np.ndarray:
        """Transform a direction vector (no translation)."""
        return (self.m @ np.append(_vec3(v), 0.0))[:3]

    def normal(self, n) -> np.ndarray:
        """Transform a normal by the inverse transpose and normalize it."""
        result = (self.m_inv.T @ np.append(_vec3(n), 0.0))[:3]
        return result / np.linalg.norm(result)

    def point(self, p) -> np.ndarray:
        """Transform a point, applying translation."""
        return (self.m @ np.append(_vec3(p), 1.0))[:3]

    def ray(self, r: Ray) -> Ray:
        """Transform a ray, keeping its parameter interval."""
        return Ray(self.point(r.o), self.vector(r.d), r.mint, r.maxt)

    @staticmethod
    def translate(t) -> Transform:
        """A translation by ``t``."""
        m = np.identity(4)
        m[:3, 3] = _vec3(t)
        return Transform(m)

    @staticmethod
    def axis_offset(x, y, z, o) -> Transform:
        """A transform whose columns are the axes ``x``, ``y``, ``z`` and the origin ``o``."""
        m = np.identity(4)
        m[:3, 0] = _vec3(x)
        m[:3, 1] = _vec3(y)
        m[:3, 2] = _vec3(z)
        m[:3, 3] = _vec3(o)
        return Transform(m)