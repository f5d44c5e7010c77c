# arenagrad/ops/rules.py
"""
Closed table of differentiation rules.

Every operator the engine knows is an ``Op`` member. Each member maps to a
``Rule`` holding its arity, its forward function and its backward function.
Both graph strategies (arena and shared ownership) evaluate nodes through this
table, so the calculus is written exactly once.

Backward signature
------------------
    backward(num, g, y, a, b) -> tuple of contributions, one per parent
        g : gradient accumulated at the derived node
        y : the derived node's own forward value
        a, b : parent data (b is None for unary ops)
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

import numpy as np

from ..errors import DomainError
from ..numeric import Numeric


class Op(str, Enum):
    ADD = "add"
    MUL = "mul"
    NEG = "neg"
    POW = "pow"
    DIV = "div"
    EXP = "exp"
    LN = "ln"
    TANH = "tanh"
    RELU = "relu"


class Rule(NamedTuple):
    arity: int
    forward: Callable[..., Any]
    backward: Callable[..., Tuple[Any, ...]]


def _relu_forward(n, a, b):
    return a if n.gt(a, 0) else n.zero()


def _relu_backward(n, g, y, a, b):
    return (g if n.gt(a, 0) else n.zero(),)


# pow and div use the result-based formulations (y/a, -y/b) on purpose:
# they reproduce the reference gradients bit for bit.
RULES: Dict[Op, Rule] = {
    Op.ADD:  Rule(2, lambda n, a, b: a + b,       lambda n, g, y, a, b: (g, g)),
    Op.MUL:  Rule(2, lambda n, a, b: a * b,       lambda n, g, y, a, b: (g * b, g * a)),
    Op.NEG:  Rule(1, lambda n, a, b: -a,          lambda n, g, y, a, b: (-g,)),
    Op.POW:  Rule(2, lambda n, a, b: n.pow(a, b), lambda n, g, y, a, b: (g * b * y / a, g * y * n.ln(a))),
    Op.DIV:  Rule(2, lambda n, a, b: a / b,       lambda n, g, y, a, b: (g / b, g * (-y) / b)),
    Op.EXP:  Rule(1, lambda n, a, b: n.exp(a),    lambda n, g, y, a, b: (g * y,)),
    Op.LN:   Rule(1, lambda n, a, b: n.ln(a),     lambda n, g, y, a, b: (g / a,)),
    Op.TANH: Rule(1, lambda n, a, b: n.tanh(a),   lambda n, g, y, a, b: (g * (n.one() - y * y),)),
    Op.RELU: Rule(1, _relu_forward,               _relu_backward),
}


def arity(op: Op) -> int:
    return RULES[op].arity


def forward(num: Numeric, op: Op, a, b=None):
    """Compute the forward value of ``op`` on parent data. nan/inf propagate silently."""
    with np.errstate(all="ignore"):
        return num.cast(RULES[op].forward(num, a, b))


def backward(num: Numeric, op: Op, g, y, a, b=None) -> Tuple[Any, ...]:
    """
    Return the gradient contributions for each parent of a node produced by ``op``.
    Callers wrap whole sweeps in np.errstate(all="ignore") so nan/inf propagate quietly.
    """
    return RULES[op].backward(num, g, y, a, b)


def check_domain(op: Op, a, b=None, *, constant_exponent: bool = False) -> None:
    """
    Strict-mode guard, called before the forward value is computed.

    Raises DomainError for ln of a non-positive value, division by zero and
    pow with a non-positive base. A plain-number exponent is not differentiated,
    so then pow only fails where the forward value itself is undefined: a zero
    base with a negative exponent, or a negative base with a fractional one.
    """
    if op is Op.LN and not a > 0:
        raise DomainError(f"ln is undefined for non-positive input {a!r}")
    if op is Op.POW:
        if not constant_exponent and not a > 0:
            raise DomainError(f"pow with a variable exponent requires a positive base, got {a!r}")
        if constant_exponent and ((a == 0 and b < 0) or (a < 0 and not float(b).is_integer())):
            raise DomainError(f"pow is undefined for base {a!r} and exponent {b!r}")
    if op is Op.DIV and b == 0:
        raise DomainError("division by zero")


def describe(op: Optional[Op]) -> str:
    return "leaf" if op is None else op.value
