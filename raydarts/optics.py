"""Scattering records and reflection."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

__all__ = ["ScatterRecord", "reflect"]


@dataclass
class ScatterRecord:
    """Result of sampling a material: attenuation, outgoing direction and specular flag."""

    attenuation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    wo: np.ndarray = field(default_factory=lambda: np.zeros(3))
    is_specular: bool = False

    def __post_init__(self) -> None:
        self.attenuation = np.asarray(self.attenuation, dtype=float)
        self.wo = np.asarray(self.wo, dtype=float)


def reflect(v, n) -> np.ndarray:
    """Reflect the incident direction ``v`` about the normal ``n``."""
    v = np.asarray(v, dtype=float)
    n = np.asarray(n, dtype=float)
    return v - 2.0 * np.dot(v, n) * n