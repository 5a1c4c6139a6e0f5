"""Integer parsing and pseudo-random numbers from the small C runtime."""

__all__ = ["RAND_MAX", "DEFAULT_SEED", "atoi", "LinearCongruential"]

RAND_MAX = 0x7FFF
DEFAULT_SEED = 27182

_MASK32 = 0xFFFFFFFF
_MULTIPLIER = 214013
_INCREMENT = 2531011


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def atoi(text: str) -> int:
    """Parse a decimal integer strictly.

    Leading spaces and tabs are skipped and one ``-`` is accepted. Anything
    else that is not a digit, including a ``+`` sign or trailing whitespace,
    makes the result 0. The value wraps to a signed 32-bit integer.
    """
    rest = text.lstrip(" \t")
    sign = 1
    if rest.startswith("-"):
        sign = -1
        rest = rest[1:]
    if not rest or any(ch not in "0123456789" for ch in rest):
        return 0
    return _to_int32(int(rest) * sign)


class LinearCongruential:
    """The classic 32-bit linear congruential generator yielding 15-bit values."""

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = 0
        self.seed(seed)

    def seed(self, value: int) -> None:
        """Restart the sequence from ``value``."""
        self._state = value & _MASK32

    def rand(self) -> int:
        """Return the next value in the range 0 to RAND_MAX."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK32
        return (self._state >> 16) & RAND_MAX