"""Random number generation and sampling routines for Monte Carlo rendering."""

from __future__ import annotations

import bisect
import math
import threading
from collections.abc import Iterable, Sequence

import numpy as np

__all__ = [
    "Pcg32",
    "seed",
    "randf",
    "rand_range",
    "randi",
    "rand_vec3",
    "rand_unit_vec3",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "hash2d",
    "sample_disk",
    "sample_disk_pdf",
    "sample_sphere",
    "sample_sphere_pdf",
    "sample_hemisphere",
    "sample_hemisphere_pdf",
    "sample_hemisphere_cosine",
    "sample_hemisphere_cosine_pdf",
    "sample_hemisphere_cosine_power",
    "sample_hemisphere_cosine_power_pdf",
    "sample_sphere_cap",
    "sample_sphere_cap_pdf",
    "sample_triangle",
    "sample_triangle_pdf",
    "cmj_randfloat",
    "cmj_permute",
    "cmj_grid",
    "cmj",
    "Distribution1D",
    "Distribution2D",
]

_M32 = 0xFFFFFFFF
_M64 = 0xFFFFFFFFFFFFFFFF
_PCG_MULT = 0x5851F42D4C957F2D
_PCG_DEFAULT_STATE = 0x853C49E6748FEA9B
_PCG_DEFAULT_STREAM = 0xDA3E39CB94B95BDB

INV_PI = 1.0 / math.pi


class Pcg32:
    """A PCG32 pseudo-random number generator (64-bit state, 32-bit output)."""

    def __init__(self, initstate: int | None = None, initseq: int = 1) -> None:
        self.state = _PCG_DEFAULT_STATE
        self.inc = _PCG_DEFAULT_STREAM
        if initstate is not None:
            self.seed(initstate, initseq)

    def seed(self, initstate: int, initseq: int = 1) -> None:
        """Seed the generator with an initial state and a stream selector."""
        self.state = 0
        self.inc = ((initseq << 1) | 1) & _M64
        self.next_uint()
        self.state = (self.state + initstate) & _M64
        self.next_uint()

    def next_uint(self) -> int:
        """Return a uniformly distributed unsigned 32-bit integer."""
        old = self.state
        self.state = (old * _PCG_MULT + self.inc) & _M64
        xorshifted = (((old >> 18) ^ old) >> 27) & _M32
        rot = old >> 59
        return ((xorshifted >> rot) | (xorshifted << ((-rot) & 31))) & _M32

    def next_float(self) -> float:
        """Return a uniformly distributed float in [0, 1)."""
        return (self.next_uint() >> 9) * (2.0**-23)


_local = threading.local()


def _rng() -> Pcg32:
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = Pcg32()
        _local.rng = rng
    return rng


def seed(value: int) -> None:
    """Seed the calling thread's global random number generator."""
    _rng().seed(value)


def randf() -> float:
    """Return a float in [0, 1) from the calling thread's global generator."""
    return _rng().next_float()


def rand_range(lo: float, hi: float) -> float:
    """Return a float uniformly distributed between ``lo`` and ``hi``."""
    return lo + (hi - lo) * randf()


def randi(lo: int, hi: int) -> int:
    """Return a random integer in [lo, hi]."""
    return int(rand_range(lo, hi + 1))


def rand_vec3(lo: float, hi: float) -> np.ndarray:
    """Return a 3-vector with each component uniform in [lo, hi)."""
    x = rand_range(lo, hi)
    y = rand_range(lo, hi)
    z = rand_range(lo, hi)
    return np.array([x, y, z])


def rand_unit_vec3(lo: float, hi: float) -> np.ndarray:
    """Return a normalized random 3-vector drawn from [lo, hi)^3."""
    v = rand_vec3(lo, hi)
    return v / np.linalg.norm(v)


def random_in_unit_sphere() -> np.ndarray:
    """Sample a point uniformly within the unit ball by rejection."""
    while True:
        a = randf()
        b = randf()
        c = randf()
        p = 2.0 * np.array([a, b, c]) - 1.0
        if float(np.dot(p, p)) < 1.0:
            return p


def random_in_unit_disk() -> np.ndarray:
    """Sample a point uniformly within the unit disk by rejection."""
    while True:
        a = randf()
        b = randf()
        p = 2.0 * np.array([a, b]) - 1.0
        if float(np.dot(p, p)) < 1.0:
            return p


def hash2d(x: int, y: int) -> int:
    """Hash two integer coordinates into a pseudo-random unsigned 32-bit integer."""
    px = (1103515245 * (((x >> 1) ^ y) & _M32)) & _M32
    py = (1103515245 * (((y >> 1) ^ x) & _M32)) & _M32
    h32 = (1103515245 * (px ^ (py >> 3))) & _M32
    return h32 ^ (h32 >> 16)


def _direction(phi: float, cos_theta: float) -> np.ndarray:
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    return np.array([math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, cos_theta])


def sample_disk(rv) -> np.ndarray:
    """Uniformly sample a point on the unit disk centered at the origin."""
    r = math.sqrt(rv[1])
    phi = 2.0 * math.pi * rv[0]
    return np.array([math.cos(phi) * r, math.sin(phi) * r])


def sample_disk_pdf(p) -> float:
    """Probability density of :func:`sample_disk`."""
    p = np.asarray(p, dtype=float)
    return INV_PI if float(np.dot(p, p)) <= 1.0 else 0.0


def sample_sphere(rv) -> np.ndarray:
    """Sample a direction on the unit sphere."""
    return _direction(2.0 * math.pi * rv[0], rv[1])


def sample_sphere_pdf() -> float:
    """Probability density of :func:`sample_sphere`."""
    return 1.0 / (4.0 * math.pi)


def sample_hemisphere(rv) -> np.ndarray:
    """Uniformly sample a direction on the hemisphere around +z."""
    return _direction(2.0 * math.pi * rv[0], rv[1])


def sample_hemisphere_pdf(v) -> float:
    """Probability density of :func:`sample_hemisphere`."""
    return 1.0 / (2.0 * math.pi)


def sample_hemisphere_cosine(rv) -> np.ndarray:
    """Sample a direction on the hemisphere around +z with a cosine density."""
    return _direction(2.0 * math.pi * rv[0], math.sqrt(rv[1]))


def sample_hemisphere_cosine_pdf(v) -> float:
    """Probability density of :func:`sample_hemisphere_cosine`."""
    return float(v[2]) / math.pi


def sample_hemisphere_cosine_power(exponent: float, rv) -> np.ndarray:
    """Sample a direction on the hemisphere around +z with a cosine-power density."""
    return _direction(2.0 * math.pi * rv[0], rv[1] ** (1.0 / (exponent + 1.0)))


def sample_hemisphere_cosine_power_pdf(exponent: float, cosine: float) -> float:
    """Probability density of :func:`sample_hemisphere_cosine_power`."""
    return cosine ** (1.0 / (exponent + 1.0)) / math.pi


def sample_sphere_cap(rv, cos_theta_max: float) -> np.ndarray:
    """Uniformly sample a direction within the spherical cap around +z."""
    cos_theta = cos_theta_max + (1.0 - cos_theta_max) * rv[1]
    return _direction(2.0 * math.pi * rv[0], cos_theta)


def sample_sphere_cap_pdf(cos_theta: float, cos_theta_max: float) -> float:
    """Probability density of :func:`sample_sphere_cap`."""
    return 1.0 / (2.0 * math.pi * (1.0 - cos_theta_max))


def sample_triangle(v0, v1, v2, rv) -> np.ndarray:
    """Uniformly sample a point on the triangle (v0, v1, v2)."""
    alpha, beta = float(rv[0]), float(rv[1])
    if alpha + beta > 1.0:
        alpha = 1.0 - alpha
        beta = 1.0 - beta
    gamma = 1.0 - alpha - beta
    return (
        alpha * np.asarray(v0, dtype=float)
        + beta * np.asarray(v1, dtype=float)
        + gamma * np.asarray(v2, dtype=float)
    )


def sample_triangle_pdf(v0, v1, v2) -> float:
    """Probability density (per unit area) of :func:`sample_triangle`."""
    v0 = np.asarray(v0, dtype=float)
    c = np.cross(np.asarray(v1, dtype=float) - v0, np.asarray(v2, dtype=float) - v0)
    return 2.0 / float(np.linalg.norm(c))


def cmj_randfloat(i: int, p: int) -> float:
    """Hash ``i`` with pattern ``p`` into a float in [0, 1)."""
    i &= _M32
    p &= _M32
    i ^= p
    i ^= i >> 17
    i = (i * 0xB36534E5) & _M32
    i ^= i >> 12
    i ^= i >> 21
    i = (i * 0x93FC4795) & _M32
    i ^= 0xDF6E307F
    i ^= i >> 17
    i = (i * (1 | (p >> 18))) & _M32
    return float(np.float32(i) * np.float32(1.0 / 4294967808.0))


def cmj_permute(i: int, l: int, p: int) -> int:
    """Return element ``i`` of a pseudo-random permutation of range(l) selected by ``p``."""
    if l < 1:
        raise ValueError(f"permutation length must be positive, got {l}")
    i &= _M32
    p &= _M32
    w = (l - 1) & _M32
    for shift in (1, 2, 4, 8, 16):
        w |= w >> shift

    while True:
        i ^= p
        i = (i * 0xE170893D) & _M32
        i ^= p >> 16
        i ^= (i & w) >> 4
        i ^= p >> 8
        i = (i * 0x0929EB3F) & _M32
        i ^= p >> 23
        i ^= (i & w) >> 1
        i = (i * (1 | (p >> 27))) & _M32
        i = (i * 0x6935FA69) & _M32
        i ^= (i & w) >> 11
        i = (i * 0x74DCB303) & _M32
        i ^= (i & w) >> 2
        i = (i * 0x9E501CC3) & _M32
        i ^= (i & w) >> 2
        i = (i * 0xC860A3DF) & _M32
        i &= w
        i ^= i >> 5
        if i < l:
            break

    return ((i + p) & _M32) % l


def cmj_grid(s: int, m: int, n: int, p: int) -> np.ndarray:
    """Sample ``s`` of a correlated multi-jittered pattern on an m x n grid."""
    sx = cmj_permute(s % m, m, p * 0xA511E9B3)
    sy = cmj_permute(s // m, n, p * 0x63D83595)
    jx = cmj_randfloat(s, p * 0xA399D265)
    jy = cmj_randfloat(s, p * 0x711AD6A5)
    return np.array([(s % m + (sy + jx) / n) / m, (s // m + (sx + jy) / m) / n])


def cmj(s: int, count: int, p: int, a: float = 1.0) -> np.ndarray:
    """Sample ``s`` of a ``count``-sample correlated multi-jittered pattern with aspect ``a``."""
    m = int(math.sqrt(count * a))
    if m < 1:
        raise ValueError(f"sample count {count} with aspect {a} gives an empty grid")
    n = (count + m - 1) // m
    s = cmj_permute(s, count, p * 0x51633E2D)
    sx = cmj_permute(s % m, m, p * 0x68BC21EB)
    sy = cmj_permute(s // m, n, p * 0x02E5BE93)
    jx = cmj_randfloat(s, p * 0x967A889B)
    jy = cmj_randfloat(s, p * 0x368CC8B7)
    return np.array([(sx + (sy + jx) / n) / m, (s + jy) / count])


class Distribution1D:
    """A tabulated piecewise-constant 1D distribution."""

    def __init__(self, func: Iterable[float]) -> None:
        self.func = [float(f) for f in func]
        n = len(self.func)
        if n == 0:
            raise ValueError("a distribution needs at least one value")

        cdf = [0.0]
        for f in self.func:
            cdf.append(cdf[-1] + f / n)
        self.func_int = cdf[-1]
        if self.func_int == 0:
            self.cdf = [i / n for i in range(n + 1)]
        else:
            self.cdf = [0.0] + [c / self.func_int for c in cdf[1:]]

    def count(self) -> int:
        """Number of elements in the distribution."""
        return len(self.func)

    def _find_interval(self, u: float) -> int:
        index = max(0, bisect.bisect_left(self.cdf, u) - 1)
        return min(index, len(self.cdf) - 2)

    def sample_continuous(self, u: float) -> tuple[float, float, int]:
        """Map ``u`` in [0,1) to ``(x, pdf, offset)`` with ``x`` in [0,1)."""
        offset = self._find_interval(u)
        du = u - self.cdf[offset]
        width = self.cdf[offset + 1] - self.cdf[offset]
        if width > 0:
            du /= width
        pdf = self.func[offset] / self.func_int if self.func_int > 0 else 0.0
        return (offset + du) / self.count(), pdf, offset

    def sample_discrete(self, u: float) -> tuple[int, float, float]:
        """Map ``u`` in [0,1) to ``(index, pmf, u_remapped)``."""
        offset = self._find_interval(u)
        pmf = self.func[offset] / (self.func_int * self.count()) if self.func_int > 0 else 0.0
        width = self.cdf[offset + 1] - self.cdf[offset]
        delta = u - self.cdf[offset]
        if width != 0:
            u_remapped = delta / width
        elif delta == 0:
            u_remapped = math.nan
        else:
            u_remapped = math.copysign(math.inf, delta)
        return offset, pmf, u_remapped

    def discrete_pdf(self, index: int) -> float:
        """Probability mass of element ``index``."""
        return self.func[index] / (self.func_int * self.count())


class Distribution2D:
    """A tabulated piecewise-constant 2D distribution over the unit square."""

    def __init__(self, func: Sequence[Sequence[float]]) -> None:
        rows = [list(row) for row in func]
        if not rows or not rows[0]:
            raise ValueError("a 2D distribution needs at least one value")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("all rows of a 2D distribution must have the same length")
        self.conditional = [Distribution1D(row) for row in rows]
        self.marginal = Distribution1D(d.func_int for d in self.conditional)

    def sample_continuous(self, u) -> tuple[np.ndarray, float]:
        """Map ``u`` in [0,1)^2 to a point in the unit square and its density."""
        d1, pdf1, v = self.marginal.sample_continuous(u[1])
        d0, pdf0, _ = self.conditional[v].sample_continuous(u[0])
        return np.array([d0, d1]), pdf0 * pdf1

    def pdf(self, p) -> float:
        """Density of the distribution at point ``p`` of the unit square."""
        nu = self.conditional[0].count()
        nv = self.marginal.count()
        iu = min(max(int(p[0] * nu), 0), nu - 1)
        iv = min(max(int(p[1] * nv), 0), nv - 1)
        return self.conditional[iv].func[iu] / self.marginal.func_int