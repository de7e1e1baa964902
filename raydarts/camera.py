"""A pinhole or thin-lens perspective camera that generates primary rays."""

from __future__ import annotations

import math
from collections.abc import Mapping

import numpy as np

from .common import DartsError
from .sampling import random_in_unit_disk
from .transform import Ray, Transform

__all__ = ["Camera"]


def _vec3(value, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise DartsError(f"Transform entry '{name}' must be a 3-vector, got {value!r}.")
    return arr


def _look_at(origin: np.ndarray, target: np.ndarray, up: np.ndarray) -> Transform:
    direction = origin - target
    if not np.linalg.norm(direction):
        raise DartsError("Transform 'from' and 'to' must be different points.")
    direction = direction / np.linalg.norm(direction)
    left = np.cross(up, direction)
    if not np.linalg.norm(left):
        raise DartsError("Transform 'up' must not be parallel to the viewing direction.")
    left = left / np.linalg.norm(left)
    new_up = np.cross(direction, left)
    new_up = new_up / np.linalg.norm(new_up)
    return Transform.axis_offset(left, new_up, direction, origin)


def _transform_from_json(spec) -> Transform:
    """Build a transform from a matrix, a look-at block, an axes block or a translation."""
    if isinstance(spec, Transform):
        return spec
    if not isinstance(spec, Mapping):
        matrix = np.asarray(spec, dtype=float)
        if matrix.shape != (4, 4):
            raise DartsError(f"Cannot interpret {spec!r} as a transform.")
        return Transform(matrix)

    keys = set(spec)
    look_keys = {"from", "to", "at", "up"}
    axis_keys = {"o", "x", "y", "z"}
    unknown = keys - look_keys - axis_keys - {"translate"}
    if unknown:
        raise DartsError(f"Unrecognized transform entries: {', '.join(sorted(unknown))}.")

    result = Transform()
    if keys & axis_keys:
        result = Transform.axis_offset(
            _vec3(spec.get("x", (1, 0, 0)), "x"),
            _vec3(spec.get("y", (0, 1, 0)), "y"),
            _vec3(spec.get("z", (0, 0, 1)), "z"),
            _vec3(spec.get("o", (0, 0, 0)), "o"),
        ) * result
    if keys & look_keys:
        target = spec.get("to", spec.get("at", (0, 0, 0)))
        result = _look_at(
            _vec3(spec.get("from", (0, 0, 1)), "from"),
            _vec3(target, "to"),
            _vec3(spec.get("up", (0, 1, 0)), "up"),
        ) * result
    if "translate" in keys:
        result = Transform.translate(_vec3(spec["translate"], "translate")) * result
    return result


class Camera:
    """A perspective camera looking down the -z axis of its local frame.

    The image plane sits at z = -fdist; a non-zero aperture radius gives depth of field.
    """

    def __init__(self, j: Mapping | None = None) -> None:
        j = {} if j is None else j
        self.xform = _transform_from_json(j.get("transform", Transform()))
        resolution = tuple(int(v) for v in j.get("resolution", (512, 512)))
        if len(resolution) != 2 or min(resolution) <= 0:
            raise ValueError(f"resolution must be two positive integers, got {resolution!r}")
        self.resolution = resolution
        self.focal_distance = float(j.get("fdist", 1.0))
        self.aperture_radius = float(j.get("aperture", 0.0))

        vfov = float(j.get("vfov", 90.0))
        aspect_ratio = resolution[0] / resolution[1]
        viewport_height = 2.0 * math.tan(math.radians(vfov) / 2.0)
        self.size = np.array([viewport_height * aspect_ratio, viewport_height])

    def generate_ray(self, pixel) -> Ray:
        """Generate a world-space ray through image-plane location ``pixel``.

        ``pixel`` ranges from (0, 0) to the resolution along the image x and y axes.
        """
        d = 2.0 * np.asarray(pixel, dtype=float) / np.asarray(self.resolution, dtype=float) - 1.0

        rd = self.aperture_radius * random_in_unit_disk()
        offset = np.array([rd[0], rd[1], 0.0])

        direction = np.array(
            [d[0] * (self.size[0] / 2.0), -d[1] * (self.size[1] / 2.0), -1.0]
        )
        return self.xform.ray(Ray(offset, direction * self.focal_distance - offset))