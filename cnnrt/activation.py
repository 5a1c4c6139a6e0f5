"""Activation functions applied element by element to a layer's output.

Every activation takes the whole pre-activation vector and an index, so that
functions such as softmax can look at the other elements.
"""

from collections.abc import Callable, Sequence

__all__ = [
    "Activation",
    "SOFTMAX_TERMS",
    "identity",
    "relu",
    "bounded_relu",
    "poly_exp",
    "taylor_exp",
    "softmax",
]

Activation = Callable[[Sequence[float], int], float]

SOFTMAX_TERMS = 35
_POLY_LIMIT = 10.0


def identity(values: Sequence[float], index: int) -> float:
    """Return the element unchanged."""
    return values[index]


def relu(values: Sequence[float], index: int) -> float:
    """Clamp the element below at zero."""
    value = values[index]
    return 0.0 if 0.0 > value else value


def bounded_relu(values: Sequence[float], index: int) -> float:
    """Clamp the element into the range 0 to 1."""
    value = values[index]
    upper = 1.0 if 1.0 < value else value
    return 0.0 if 0.0 > upper else upper


def poly_exp(x: float) -> float:
    """Approximate e**x with a fourth-order polynomial.

    Outside the range -10 to 10 the argument itself is returned.
    """
    if x > _POLY_LIMIT or x < -_POLY_LIMIT:
        return x
    return 1.0 + x * (1.0 + x * (0.5 + x * (0.166666667 + x * 0.041666667)))


def taylor_exp(x: float, terms: int) -> float:
    """Sum the first ``terms`` terms of the Taylor series of e**x."""
    result = 1.0
    term = 1.0
    for i in range(1, terms):
        term *= x / i
        result += term
    return result


def softmax(values: Sequence[float], index: int) -> float:
    """Return the softmax weight of one element, using a 35-term series."""
    numer = taylor_exp(values[index], SOFTMAX_TERMS)
    denom = sum(taylor_exp(value, SOFTMAX_TERMS) for value in values)
    return numer / denom