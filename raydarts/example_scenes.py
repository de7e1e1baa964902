"""Hard-coded example scene descriptions."""

from __future__ import annotations

import math

from .common import DartsError
from .sampling import Pcg32

__all__ = [
    "create_sphere_scene",
    "create_sphere_plane_scene",
    "create_steinbach_scene",
    "create_shirley_scene",
    "create_example_scene",
]


def _lerp(a, b, t: float) -> list[float]:
    return [(1.0 - t) * x + t * y for x, y in zip(a, b)]


def _ground_quad(origin, albedo) -> dict:
    return {
        "type": "quad",
        "size": [100, 100],
        "transform": {"o": origin, "x": [1.0, 0.0, 0.0], "y": [0.0, 0.0, -1.0], "z": [0.0, 1.0, 0.0]},
        "material": {"type": "lambertian", "albedo": albedo},
    }


def create_sphere_scene() -> dict:
    """A single diffuse sphere in front of the camera."""
    return {
        "camera": {"transform": {"o": [0, 0, 4]}, "resolution": [512, 512], "vfov": 45},
        "surfaces": [
            {"type": "sphere", "material": {"type": "lambertian", "albedo": [0.6, 0.4, 0.4]}},
        ],
        "sampler": {"samples": 1},
        "background": [1, 1, 1],
    }


def create_sphere_plane_scene() -> dict:
    """A diffuse sphere resting on a large ground quad."""
    return {
        "camera": {"transform": {"o": [0, 0, 4]}, "resolution": [512, 512], "vfov": 45},
        "surfaces": [
            {
                "type": "sphere",
                "radius": 1,
                "material": {"type": "lambertian", "albedo": [0.6, 0.4, 0.4]},
            },
            {
                "type": "quad",
                "transform": {"o": [0, -1, 0], "x": [1, 0, 0], "y": [0, 0, -1], "z": [0, 1, 0]},
                "size": [100, 100],
                "material": {"type": "lambertian", "albedo": [1, 1, 1]},
            },
        ],
        "sampler": {"samples": 1},
        "background": [1, 1, 1],
    }


def create_steinbach_scene() -> dict:
    """A parametric screw surface made of many small colored spheres."""
    scene: dict = {
        "camera": {
            "transform": {"from": [-10.0, 10.0, 40.0], "to": [0.0, -1.0, 0.0], "up": [0.0, 1.0, 0.0]},
            "vfov": 18,
            "resolution": [512, 512],
        },
        "sampler": {"samples": 1},
        "background": [1, 1, 1],
        "surfaces": [],
    }

    object_center = (0.0, 0.0, 0.0)
    radius = 0.5
    num_s = 40
    num_t = 40
    for i_s in range(num_s):
        for i_t in range(num_t):
            s = (i_s + 0.5) / num_s
            t = (i_t + 0.5) / num_t
            u = s * 8 - 4.0
            v = t * 6.25
            center = (-u * math.cos(v), v * math.cos(u) * 0.75, u * math.sin(v))
            kd = [
                0.35 * c
                for c in _lerp(
                    _lerp((0.9, 0.0, 0.0), (0.0, 0.9, 0.0), t),
                    _lerp((0.0, 0.0, 0.9), (0.0, 0.0, 0.0), t),
                    s,
                )
            ]
            scene["surfaces"].append(
                {
                    "type": "sphere",
                    "radius": radius,
                    "transform": {
                        "o": [oc + c for oc, c in zip(object_center, center)],
                        "x": [1.0, 0.0, 0.0],
                        "y": [0.0, 1.0, 0.0],
                        "z": [0.0, 0.0, 1.0],
                    },
                    "material": {"type": "lambertian", "albedo": kd},
                }
            )

    scene["surfaces"].append(_ground_quad([0.0, -5.0, 0.0], 1.0))
    return scene


def create_shirley_scene() -> dict:
    """The random-spheres cover scene with diffuse, metal and glass spheres."""
    rng = Pcg32()

    scene: dict = {
        "camera": {
            "transform": {"from": [13, 2, 3], "to": [0, 0, 0], "up": [0, 1, 0]},
            "vfov": 20,
            "fdist": 10,
            "aperture": 0.1,
            "resolution": [600, 400],
        },
        "sampler": {"samples": 1},
        "background": [1, 1, 1],
        "surfaces": [_ground_quad([0.0, 0.0, 0.0], [0.5, 0.5, 0.5])],
    }

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.next_float()
            r1 = rng.next_float()
            r2 = rng.next_float()
            center = [a + 0.9 * r1, 0.2, b + 0.9 * r2]
            if math.dist(center, (4.0, 0.2, 0.0)) <= 0.9:
                continue

            sphere: dict = {"type": "sphere", "radius": 0.2, "transform": {"translate": center}}
            if choose_mat < 0.8:
                r = [rng.next_float() for _ in range(6)]
                albedo = [r[0] * r[1], r[2] * r[3], r[4] * r[5]]
                sphere["material"] = {"type": "lambertian", "albedo": albedo}
            elif choose_mat < 0.95:
                r = [rng.next_float() for _ in range(4)]
                albedo = [0.5 * (1.0 + r[0]), 0.5 * (1.0 + r[1]), 0.5 * (1.0 + r[2])]
                sphere["material"] = {"type": "metal", "albedo": albedo, "roughness": 0.5 * r[3]}
            else:
                sphere["material"] = {"type": "dielectric", "ior": 1.5}
            scene["surfaces"].append(sphere)

    scene["surfaces"].extend(
        [
            {
                "type": "sphere",
                "radius": 1.0,
                "transform": {"translate": [0, 1, 0]},
                "material": {"type": "dielectric", "ior": 1.5},
            },
            {
                "type": "sphere",
                "radius": 1.0,
                "transform": {"translate": [-4, 1, 0]},
                "material": {"type": "lambertian", "albedo": [0.4, 0.2, 0.1]},
            },
            {
                "type": "sphere",
                "radius": 1.0,
                "transform": {"translate": [4, 1, 0]},
                "material": {"type": "metal", "albedo": [0.7, 0.6, 0.5], "roughness": 0.0},
            },
        ]
    )
    return scene


_SCENES = (create_sphere_scene, create_sphere_plane_scene, create_steinbach_scene, create_shirley_scene)


def create_example_scene(scene_number: int) -> dict:
    """Return hard-coded example scene ``scene_number`` (0..3)."""
    if not 0 <= scene_number < len(_SCENES):
        raise DartsError(f"Invalid hardcoded scene number {scene_number}. Must be 0..3.")
    return _SCENES[scene_number]()