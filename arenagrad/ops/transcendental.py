# arenagrad/ops/transcendental.py
from .arithmetic import _apply
from .rules import Op


def exp(x):
    return _apply(Op.EXP, x)


def ln(x):
    """Natural log. x <= 0 gives nan/-inf, or DomainError in strict mode."""
    return _apply(Op.LN, x)


log = ln


def tanh(x):
    return _apply(Op.TANH, x)
