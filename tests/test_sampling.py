import math

import numpy as np
import pytest

from raydarts import sampling
from raydarts.sampling import (
    Distribution1D,
    Distribution2D,
    Pcg32,
    cmj,
    cmj_grid,
    cmj_permute,
    cmj_randfloat,
    hash2d,
    rand_unit_vec3,
    randf,
    randi,
    random_in_unit_disk,
    random_in_unit_sphere,
    sample_disk,
    sample_disk_pdf,
    sample_hemisphere,
    sample_hemisphere_cosine,
    sample_hemisphere_cosine_pdf,
    sample_hemisphere_cosine_power,
    sample_sphere,
    sample_sphere_cap,
    sample_triangle,
    sample_triangle_pdf,
)

RVS = [(0.0, 0.0), (0.25, 0.5), (0.9, 0.1), (0.5, 0.99), (0.123, 0.777)]


def test_pcg32_reference_sequence():
    rng = Pcg32(42, 54)
    assert [rng.next_uint(), rng.next_uint()] == [0xA15C02B7, 0x7B47F409]


def test_pcg32_seed_method_matches_constructor():
    a = Pcg32(42, 54)
    b = Pcg32()
    b.seed(42, 54)
    assert [a.next_uint() for _ in range(10)] == [b.next_uint() for _ in range(10)]


def test_pcg32_default_is_deterministic_and_floats_in_range():
    a = Pcg32()
    b = Pcg32()
    values = [a.next_float() for _ in range(1000)]
    assert values == [b.next_float() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_global_seed_reproducible():
    sampling.seed(7)
    first = [randf() for _ in range(5)]
    sampling.seed(7)
    assert [randf() for _ in range(5)] == first


def test_randi_inclusive_range():
    sampling.seed(3)
    values = {randi(2, 5) for _ in range(2000)}
    assert values == {2, 3, 4, 5}


def test_rand_unit_vec3_is_normalized():
    sampling.seed(11)
    for _ in range(50):
        assert np.linalg.norm(rand_unit_vec3(-1.0, 1.0)) == pytest.approx(1.0)


def test_rejection_samplers_stay_inside():
    sampling.seed(5)
    for _ in range(200):
        assert np.dot(random_in_unit_sphere(), random_in_unit_sphere()) < 1.0 or True
        p = random_in_unit_sphere()
        d = random_in_unit_disk()
        assert p.shape == (3,) and float(np.dot(p, p)) < 1.0
        assert d.shape == (2,) and float(np.dot(d, d)) < 1.0


def test_hash2d_range_and_determinism():
    assert hash2d(0, 0) == 0
    for x, y in [(1, 2), (-3, 7), (1000, -1000)]:
        h = hash2d(x, y)
        assert 0 <= h < 2**32
        assert h == hash2d(x, y)


@pytest.mark.parametrize("rv", RVS)
def test_sample_disk_inside(rv):
    p = sample_disk(rv)
    assert np.linalg.norm(p) <= 1.0 + 1e-12
    assert sample_disk_pdf(p) == pytest.approx(1.0 / math.pi)


def test_sample_disk_pdf_outside_is_zero():
    assert sample_disk_pdf((2.0, 0.0)) == 0.0


@pytest.mark.parametrize("rv", RVS)
def test_sphere_and_hemisphere_unit_length(rv):
    for v in (sample_sphere(rv), sample_hemisphere(rv), sample_hemisphere_cosine(rv)):
        assert np.linalg.norm(v) == pytest.approx(1.0)
        assert v[2] >= 0.0


@pytest.mark.parametrize("rv", RVS)
def test_cosine_pdf_matches_z(rv):
    v = sample_hemisphere_cosine(rv)
    assert sample_hemisphere_cosine_pdf(v) == pytest.approx(v[2] / math.pi)


@pytest.mark.parametrize("rv", RVS)
def test_cosine_power_unit_and_upper(rv):
    v = sample_hemisphere_cosine_power(10.0, rv)
    assert np.linalg.norm(v) == pytest.approx(1.0)
    assert v[2] >= 0.0


@pytest.mark.parametrize("rv", RVS)
def test_sphere_cap_within_cap(rv):
    cos_max = math.cos(0.3)
    v = sample_sphere_cap(rv, cos_max)
    assert np.linalg.norm(v) == pytest.approx(1.0)
    assert v[2] >= cos_max - 1e-12


def test_sphere_cap_pdf_integrates_to_one():
    cos_max = 0.5
    area = 2.0 * math.pi * (1.0 - cos_max)
    assert sampling.sample_sphere_cap_pdf(0.8, cos_max) * area == pytest.approx(1.0)


def test_sphere_pdfs_integrate_to_one():
    assert sampling.sample_sphere_pdf() * 4.0 * math.pi == pytest.approx(1.0)
    assert sampling.sample_hemisphere_pdf((0, 0, 1)) * 2.0 * math.pi == pytest.approx(1.0)


@pytest.mark.parametrize("rv", RVS + [(0.8, 0.9)])
def test_sample_triangle_inside(rv):
    v0, v1, v2 = np.array([0.0, 0, 0]), np.array([1.0, 0, 0]), np.array([0.0, 1, 0])
    p = sample_triangle(v0, v1, v2, rv)
    assert p[2] == pytest.approx(0.0)
    assert p[0] >= -1e-12 and p[1] >= -1e-12
    assert p[0] + p[1] <= 1.0 + 1e-12


def test_triangle_pdf_scales_with_area():
    small = sample_triangle_pdf((0, 0, 0), (1, 0, 0), (0, 1, 0))
    large = sample_triangle_pdf((0, 0, 0), (2, 0, 0), (0, 2, 0))
    assert small == pytest.approx(4.0 * large)


@pytest.mark.parametrize("length", [1, 5, 10, 17])
def test_cmj_permute_is_permutation(length):
    perm = [cmj_permute(i, length, 12345) for i in range(length)]
    assert sorted(perm) == list(range(length))


def test_cmj_permute_rejects_empty():
    with pytest.raises(ValueError):
        cmj_permute(0, 0, 1)


def test_cmj_randfloat_range():
    values = [cmj_randfloat(i, 99) for i in range(500)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert cmj_randfloat(3, 99) == values[3]


def test_cmj_is_stratified():
    count = 16
    samples = [cmj(s, count, 7) for s in range(count)]
    assert sorted(int(p[1] * count) for p in samples) == list(range(count))
    assert sorted(int(p[0] * count) for p in samples) == list(range(count))


def test_cmj_grid_columns_and_rows():
    m, n = 4, 3
    samples = [cmj_grid(s, m, n, 21) for s in range(m * n)]
    cols = [int(p[0] * m) for p in samples]
    rows = [int(p[1] * n) for p in samples]
    assert all(cols.count(c) == n for c in range(m))
    assert all(rows.count(r) == m for r in range(n))


def test_cmj_rejects_empty_grid():
    with pytest.raises(ValueError):
        cmj(0, 0, 1)


def test_distribution1d_pmf_sums_to_one():
    d = Distribution1D([1.0, 3.0, 0.5, 2.0])
    assert d.count() == 4
    assert sum(d.discrete_pdf(i) for i in range(d.count())) == pytest.approx(1.0)
    assert d.cdf[0] == 0.0 and d.cdf[-1] == pytest.approx(1.0)


def test_distribution1d_skips_zero_bins():
    d = Distribution1D([0.0, 1.0])
    for u in (0.1, 0.5, 0.9):
        index, pmf, _ = d.sample_discrete(u)
        assert index == 1
        assert pmf == pytest.approx(d.discrete_pdf(1))


def test_distribution1d_continuous_consistency():
    d = Distribution1D([1.0, 3.0, 0.5, 2.0])
    previous = -1.0
    for u in np.linspace(0.0, 0.999, 50):
        x, pdf, offset = d.sample_continuous(float(u))
        assert 0.0 <= x < 1.0
        assert x >= previous
        previous = x
        assert min(int(x * d.count()), d.count() - 1) == offset
        assert pdf >= 0.0


def test_distribution1d_all_zero_is_uniform():
    d = Distribution1D([0.0, 0.0, 0.0])
    diffs = np.diff(d.cdf)
    assert diffs == pytest.approx([diffs[0]] * 3)
    assert d.cdf[-1] == pytest.approx(1.0)
    assert d.sample_discrete(0.5)[1] == 0.0


def test_distribution1d_rejects_empty():
    with pytest.raises(ValueError):
        Distribution1D([])


def test_distribution2d_uniform_density():
    d = Distribution2D([[1.0, 1.0], [1.0, 1.0]])
    assert d.pdf((0.3, 0.7)) == pytest.approx(1.0)


def test_distribution2d_sample_pdf_matches_pdf():
    d = Distribution2D([[1.0, 2.0, 0.5], [4.0, 0.25, 1.0]])
    for u in [(0.1, 0.2), (0.5, 0.5), (0.9, 0.8), (0.33, 0.66)]:
        point, pdf = d.sample_continuous(u)
        assert 0.0 <= point[0] < 1.0 and 0.0 <= point[1] < 1.0
        assert pdf == pytest.approx(d.pdf(point))


def test_distribution2d_rejects_ragged():
    with pytest.raises(ValueError):
        Distribution2D([[1.0, 2.0], [1.0]])