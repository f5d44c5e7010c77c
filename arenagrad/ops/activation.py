# arenagrad/ops/activation.py
from .arithmetic import _apply
from .rules import Op


def relu(x):
    """
    Rectified linear unit: x if x > 0 else 0.
    The local partial is 1 for x > 0 and 0 otherwise (0 at x == 0).
    """
    return _apply(Op.RELU, x)
