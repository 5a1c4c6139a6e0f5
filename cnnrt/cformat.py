"""printf-style formatting limited to the x, X, d, u, f and s conversions.

The rules follow a deliberately small formatter: a leading ``0`` selects zero
padding, digits give the field width, a single ``l`` is ignored and ``.N``
sets the number of decimals for ``f``. The precision then stays in force for
the rest of the format string. No ``-``, ``+`` or ``#`` flags exist; any
unknown conversion character is copied to the output as it is.
"""

import operator
import sys

__all__ = [
    "format_decimal",
    "format_hex",
    "format_long",
    "format_float",
    "sprintf",
    "printf",
]

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_DIGITS = "0123456789"
_LONG_DIVISOR = 10**17
_DEFAULT_DECIMALS = 6


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _to_int64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value & (1 << 63) else value


def _pad(digits: str, width: int, zero_pad: bool, negative: bool) -> str:
    fill = max(0, width - len(digits))
    sign = "-" if negative else ""
    if zero_pad:
        return sign + "0" * fill + digits
    return " " * fill + sign + digits


def format_decimal(num: int, width: int, zero_pad: bool, unsigned: bool) -> str:
    """Format a 32-bit integer in decimal.

    A negative sign takes one column of the width. With zero padding the sign
    comes before the zeros, otherwise after the spaces.
    """
    num = operator.index(num)
    num = num & _MASK32 if unsigned else _to_int32(num)
    negative = False
    if not unsigned and num < 0:
        num = -num
        negative = True
        width -= 1
    return _pad(str(num & _MASK32), width, zero_pad, negative)


def format_hex(num: int, width: int, zero_pad: bool, upper: bool) -> str:
    """Format a 32-bit value in hexadecimal.

    Zero padding always emits all eight nibbles. Without it, zero yields no
    digits at all, only the padding spaces.
    """
    num = operator.index(num) & _MASK32
    if zero_pad:
        digits = f"{num:08x}"
    else:
        digits = f"{num:x}" if num else ""
    if int(upper) % 2:
        digits = digits.upper()
    fill = "0" if zero_pad else " "
    return fill * max(0, width - len(digits)) + digits


def _long_digits(n: int) -> str:
    # The leading group is divided by 10**17, so values of 10**18 and more put
    # a character past '9' in front, exactly as the digit arithmetic does.
    head, tail = divmod(n, _LONG_DIVISOR)
    if head:
        return chr(ord("0") + head) + f"{tail:017d}"
    return str(tail)


def format_long(num: int, width: int, zero_pad: bool, unsigned: bool) -> str:
    """Format a 64-bit integer in decimal, with the same padding rules."""
    num = operator.index(num)
    num = num & _MASK64 if unsigned else _to_int64(num)
    negative = False
    if not unsigned and num < 0:
        num = -num
        negative = True
        width -= 1
    return _pad(_long_digits(num & _MASK64), width, zero_pad, negative)


def format_float(value: float, width: int, zero_pad: bool, decimals: int) -> str:
    """Format a float with a fixed number of decimals.

    The value is rounded by adding half a unit of the last decimal and then
    truncated. The fractional part is always printed, so zero decimals still
    give a trailing ``.0``.
    """
    value = float(value)
    rounding = 0.5
    power = 1.0
    for _ in range(decimals):
        rounding /= 10.0
        power *= 10.0

    negative = value < 0.0
    if negative:
        value = -value
    num = value + rounding
    integer = int(num)
    fractions = int((num - float(integer)) * power) & _MASK64
    if negative:
        integer = -integer

    int_width = max(width - decimals - 1, 0)
    prefix = "-" if integer == 0 and negative else ""
    return (
        prefix
        + format_decimal(integer, int_width, zero_pad, False)
        + "."
        + format_long(fractions, decimals, True, True)
    )


_MISSING = object()


def sprintf(fmt: str, *args) -> str:
    """Return ``fmt`` with its conversions replaced by ``args``."""
    out = []
    arguments = iter(args)

    def take():
        arg = next(arguments, _MISSING)
        if arg is _MISSING:
            raise TypeError("not enough arguments for format string")
        return arg

    decimals = _DEFAULT_DECIMALS
    i, length = 0, len(fmt)
    while i < length:
        ch = fmt[i]
        i += 1
        if ch != "%":
            out.append(ch)
            continue

        zero_pad = i < length and fmt[i] == "0"
        width = 0
        while i < length and fmt[i] in _DIGITS:
            width = width * 10 + int(fmt[i])
            i += 1
        if i < length and fmt[i] == "l":
            i += 1
        if i < length and fmt[i] == ".":
            i += 1
            precision = 0
            while i < length and fmt[i] in _DIGITS:
                precision = precision * 10 + int(fmt[i])
                i += 1
            decimals = precision
        if i >= length:
            break

        conv = fmt[i]
        i += 1
        if conv == "x":
            out.append(format_hex(operator.index(take()), width, zero_pad, False))
        elif conv == "X":
            out.append(format_hex(operator.index(take()), width, zero_pad, True))
        elif conv == "d":
            out.append(format_decimal(operator.index(take()), width, zero_pad, False))
        elif conv == "u":
            out.append(format_decimal(operator.index(take()), width, zero_pad, True))
        elif conv == "f":
            out.append(format_float(take(), width, zero_pad, decimals))
        elif conv == "s":
            out.append(str(take()).split("\0", 1)[0])
        else:
            out.append(conv)
    return "".join(out)


def printf(fmt: str, *args) -> int:
    """Write the formatted text to standard output and return 0."""
    sys.stdout.write(sprintf(fmt, *args))
    return 0