# arenagrad/numeric.py
"""
Scalar element type shared by every graph in the package.

A ``Numeric`` wraps one numpy floating dtype (float32 or float64) and gives the
engine the handful of primitives it needs: identities, ordering and the
transcendental functions used by the operator rules. All values flowing through
a graph are numpy scalars of this dtype, so a float32 store stays float32.
"""

from __future__ import annotations
from typing import Any, Union

import numpy as np

_SUPPORTED = ("float32", "float64")


class Numeric:
    """
    Floating-point element type.

    Attributes
    ----------
    dtype : type
        numpy scalar type (``np.float32`` or ``np.float64``).
    name : str
        Canonical dtype name, e.g. ``"float64"``.
    """

    __slots__ = ("dtype", "name")

    def __init__(self, dtype: Any):
        resolved = np.dtype(dtype)
        if resolved.name not in _SUPPORTED:
            raise ValueError(
                f"Numeric only supports {', '.join(_SUPPORTED)}, but got {resolved.name}"
            )
        self.dtype = resolved.type
        self.name = resolved.name

    def __repr__(self):
        return f"Numeric({self.name})"

    def __eq__(self, other):
        return isinstance(other, Numeric) and other.name == self.name

    def __hash__(self):
        return hash(self.name)

    def cast(self, x):
        return self.dtype(x)

    def zero(self):
        return self.dtype(0.0)

    def one(self):
        return self.dtype(1.0)

    def gt(self, a, b) -> bool:
        return bool(a > b)

    def exp(self, x):
        return np.exp(self.dtype(x))

    def ln(self, x):
        return np.log(self.dtype(x))

    def tanh(self, x):
        return np.tanh(self.dtype(x))

    def pow(self, a, b):
        return np.power(self.dtype(a), self.dtype(b))

    def uniform(self, rng: np.random.Generator, low: float, high: float):
        """Draw one sample from U[low, high) using the caller's generator."""
        return self.dtype(rng.uniform(low, high))


FLOAT32 = Numeric(np.float32)
FLOAT64 = Numeric(np.float64)


def resolve_numeric(dtype_like: Union[str, Numeric, Any]) -> Numeric:
    """Turn a dtype name, numpy dtype or existing Numeric into a Numeric."""
    if isinstance(dtype_like, Numeric):
        return dtype_like
    if isinstance(dtype_like, bool):
        raise ValueError(f"Not a floating dtype: {dtype_like!r}")
    try:
        resolved = np.dtype(dtype_like)
    except TypeError as exc:
        raise ValueError(f"Not a floating dtype: {dtype_like!r}") from exc
    if resolved.name == "float32":
        return FLOAT32
    if resolved.name == "float64":
        return FLOAT64
    raise ValueError(f"Numeric only supports {', '.join(_SUPPORTED)}, but got {resolved.name}")
