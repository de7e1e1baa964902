import logging
import math

import pytest

from raydarts.common import DartsError, darts_init, indent, time_string


def test_time_string_non_finite():
    assert time_string(math.inf) == "inf"
    assert time_string(math.nan) == "inf"
    assert time_string(-math.inf) == "inf"


def test_time_string_milliseconds():
    assert time_string(500) == "500ms"
    assert time_string(999.9).endswith("ms")


def test_time_string_seconds():
    assert time_string(1500) == "1.500s"
    result = time_string(59_000)
    assert result.endswith("s") and not result.endswith("ms")


def test_time_string_minutes_and_hours():
    assert time_string(3_661_000) == "1h:01m:01s"
    minutes = time_string(61_000)
    assert minutes.startswith("1m:")
    assert minutes.endswith("s")


def test_time_string_days():
    result = time_string(2 * 24 * 3600 * 1000 + 5 * 60 * 1000)
    assert result.startswith("2d:")
    assert result.endswith("m")


def test_indent_single_line_unchanged():
    assert indent("hello", 4) == "hello"


def test_indent_subsequent_lines():
    text = "first\nsecond\nthird"
    result = indent(text, 3)
    lines = result.split("\n")
    assert lines[0] == "first"
    assert all(line.startswith("   ") for line in lines[1:])
    assert result.replace("\n   ", "\n") == text


def test_indent_preserves_trailing_newline():
    text = "a\nb\n"
    result = indent(text)
    assert result.endswith("\n")
    assert result.replace("\n  ", "\n") == text


def test_indent_empty():
    assert indent("", 5) == ""


def test_darts_error_is_runtime_error():
    error = DartsError("broken")
    assert isinstance(error, RuntimeError)
    assert str(error) == "broken"


def test_darts_init_sets_level():
    logger = darts_init(3)
    assert logger.level == logging.WARNING
    logger = darts_init(1)
    assert logger.level == logging.DEBUG


def test_darts_init_filters_messages(capsys):
    logger = darts_init(2)
    logger.debug("hidden")
    logger.info("shown")
    out = capsys.readouterr().out
    assert out == "shown\n"


def test_darts_init_off(capsys):
    logger = darts_init(6)
    logger.critical("nothing")
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("verbosity", [-1, 7])
def test_darts_init_rejects_out_of_range(verbosity):
    with pytest.raises(ValueError):
        darts_init(verbosity)