# arenagrad/ops/arithmetic.py
from ..core.operand import Operand
from .rules import Op


def _apply(op, *operands):
    """
    Dispatch an operator to the graph strategy of its first node operand.

    Arena handles record a derived node in their store; shared-graph values
    build a new Value linked to its parents. Numbers are promoted to constants.
    """
    for x in operands:
        if isinstance(x, Operand):
            return x._apply(op, operands)
    raise TypeError(f"{op.value} needs at least one Handle or Value operand")


def add(x, y): return _apply(Op.ADD, x, y)
def mul(x, y): return _apply(Op.MUL, x, y)
def div(x, y): return _apply(Op.DIV, x, y)
def neg(x):    return _apply(Op.NEG, x)


def sub(x, y):
    """x - y, recorded as add(x, neg(y)). A constant y is negated before promotion."""
    if isinstance(y, Operand):
        return add(x, neg(y))
    return add(x, -y)


def pow(x, y):
    """
    Power x ** y.

    Local partials:
      ∂out/∂x = y * out / x
      ∂out/∂y = out * ln(x)        (requires x > 0)

    A non-positive base yields nan partials (or DomainError in strict mode).
    Note that a zero base gives a nan partial for x too; use mul for squares.
    """
    return _apply(Op.POW, x, y)
