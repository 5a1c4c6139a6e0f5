import pytest

from cnnrt.cformat import (
    format_decimal,
    format_float,
    format_hex,
    format_long,
    printf,
    sprintf,
)


@pytest.mark.parametrize(
    "num, width, zero_pad, spec",
    [
        (42, 5, False, "5d"),
        (-42, 5, False, "5d"),
        (-42, 5, True, "05d"),
        (0, 3, False, "3d"),
        (123456, 2, False, "d"),
        (-7, 0, False, "d"),
    ],
)
def test_format_decimal_matches_plain_padding(num, width, zero_pad, spec):
    assert format_decimal(num, width, zero_pad, False) == format(num, spec)


def test_format_decimal_unsigned_wraps_to_32_bits():
    assert format_decimal(-1, 0, False, True) == str(0xFFFFFFFF)


def test_format_decimal_most_negative_int32():
    assert format_decimal(-(2**31), 0, False, False) == str(-(2**31))


def test_format_decimal_signed_wraps_large_values():
    assert format_decimal(2**32 + 5, 0, False, False) == "5"


@pytest.mark.parametrize(
    "num, width, upper, spec",
    [
        (255, 6, False, "6x"),
        (0xABC, 0, True, "X"),
        (0xDEADBEEF, 0, False, "x"),
    ],
)
def test_format_hex_without_zero_pad(num, width, upper, spec):
    assert format_hex(num, width, False, upper) == format(num, spec)


def test_format_hex_zero_pad_always_emits_eight_digits():
    assert format_hex(0x1F, 4, True, False) == format(0x1F, "08x")
    assert format_hex(0x1F, 10, True, True) == format(0x1F, "010X")


def test_format_hex_zero_without_padding_is_blank():
    assert format_hex(0, 0, False, False) == ""
    assert format_hex(0, 3, False, False) == " " * 3


def test_format_hex_negative_is_twos_complement():
    assert format_hex(-1, 0, False, False) == format(0xFFFFFFFF, "x")


@pytest.mark.parametrize("num", [0, 1, 999, -123456789012, 10**17 - 1, 10**17 + 3])
def test_format_long_matches_str(num):
    assert format_long(num, 0, False, False) == str(num)


def test_format_long_zero_padding():
    assert format_long(5, 3, True, True) == format(5, "03d")
    assert format_long(-12, 6, True, False) == format(-12, "06d")


@pytest.mark.parametrize(
    "value, width, zero_pad, decimals, spec",
    [
        (3.14159, 0, False, 2, ".2f"),
        (-0.25, 0, False, 2, ".2f"),
        (3.5, 8, True, 2, "08.2f"),
        (-3.5, 8, True, 2, "08.2f"),
        (-3.5, 8, False, 2, "8.2f"),
        (0.99999, 0, False, 3, ".3f"),
        (1.5, 0, False, 6, ".6f"),
        (12.0, 10, False, 3, "10.3f"),
    ],
)
def test_format_float_matches_fixed_point(value, width, zero_pad, decimals, spec):
    assert format_float(value, width, zero_pad, decimals) == format(value, spec)


def test_format_float_zero_decimals_keeps_fraction():
    assert format_float(7.0, 0, False, 0) == "7.0"


def test_sprintf_mixed_conversions():
    result = sprintf("%05d|%x|%s", -42, 255, "ok")
    assert result == f"{-42:05d}|{255:x}|ok"


def test_sprintf_plain_text_and_percent():
    assert sprintf("%d items", 3) == "3 items"
    assert sprintf("100%%") == "100%"


def test_sprintf_unsigned_and_long_marker():
    assert sprintf("%u", -1) == str(0xFFFFFFFF)
    assert sprintf("%ld", 7) == "7"


def test_sprintf_default_precision_is_six():
    assert sprintf("%f", 1.5) == f"{1.5:f}"


def test_sprintf_precision_persists_across_conversions():
    assert sprintf("%.2f %f", 1.5, 2.5) == sprintf("%.2f %.2f", 1.5, 2.5)


def test_sprintf_string_stops_at_nul():
    assert sprintf("[%s]", "ab\0cd") == "[ab]"


def test_sprintf_unknown_conversion_is_copied():
    assert sprintf("%q") == "q"


def test_sprintf_trailing_percent_is_dropped():
    assert sprintf("abc%") == "abc"


def test_sprintf_missing_argument_raises():
    with pytest.raises(TypeError):
        sprintf("%d %d", 1)


def test_sprintf_integer_conversion_rejects_float():
    with pytest.raises(TypeError):
        sprintf("%d", 1.5)


def test_printf_writes_to_stdout(capsys):
    assert printf("%s=%d\n", "x", 9) == 0
    assert capsys.readouterr().out == sprintf("%s=%d\n", "x", 9)