import numpy as np
import pytest

from raydarts.common import DartsError
from raydarts.image import load_image, save_image
from raydarts.img_avg import average_images, main


def _write(path, value, shape=(4, 6, 3)):
    save_image(str(path), np.full(shape, value, dtype=np.float32))
    return str(path)


def test_average_of_identical_images_is_the_image(tmp_path):
    a = _write(tmp_path / "a.exr", 0.5)
    result = average_images([a, a, a])
    np.testing.assert_allclose(result, load_image(a))


def test_average_of_two_images_is_their_mean(tmp_path):
    a = _write(tmp_path / "a.exr", 0.25)
    b = _write(tmp_path / "b.exr", 1.0)
    result = average_images([a, b])
    expected = (load_image(a) + load_image(b)) / 2
    np.testing.assert_allclose(result, expected, rtol=1e-6)
    assert result.shape == (4, 6, 3)


def test_average_lies_between_inputs(tmp_path):
    a = _write(tmp_path / "a.exr", 0.25)
    b = _write(tmp_path / "b.exr", 0.5)
    c = _write(tmp_path / "c.exr", 1.0)
    result = average_images([a, b, c])
    assert result.shape == (4, 6, 3)
    assert float(result.min()) >= 0.25
    assert float(result.max()) <= 1.0
    np.testing.assert_allclose(result, np.full((4, 6, 3), 1.75 / 3), rtol=1e-5)


def test_mismatched_dimensions_raise(tmp_path):
    a = _write(tmp_path / "a.exr", 0.5, (4, 6, 3))
    b = _write(tmp_path / "b.exr", 0.5, (5, 6, 3))
    with pytest.raises(DartsError, match="dimensions"):
        average_images([a, b])


def test_empty_list_raises():
    with pytest.raises(DartsError):
        average_images([])


def test_main_writes_average(tmp_path):
    a = _write(tmp_path / "a.exr", 0.25)
    b = _write(tmp_path / "b.exr", 0.5)
    out = tmp_path / "out.exr"
    status = main(["-v", "6", "-o", str(out), a, b])
    assert status == 0
    np.testing.assert_allclose(load_image(str(out)), average_images([a, b]), rtol=1e-3)


def test_main_reports_mismatch(tmp_path):
    a = _write(tmp_path / "a.exr", 0.5, (4, 6, 3))
    b = _write(tmp_path / "b.exr", 0.5, (2, 6, 3))
    assert main(["-v", "6", a, b]) == 1


def test_main_rejects_missing_file(tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["-v", "6", str(tmp_path / "missing.exr")])
    assert info.value.code == 2


def test_main_rejects_bad_verbosity(tmp_path):
    a = _write(tmp_path / "a.exr", 0.5)
    with pytest.raises(SystemExit) as info:
        main(["-v", "7", a])
    assert info.value.code == 2