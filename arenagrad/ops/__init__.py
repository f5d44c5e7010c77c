# arenagrad/ops/__init__.py

# Convenience re-exports so users can do: from arenagrad.ops import mul, exp, ...
from .rules import Op
from .arithmetic import add, sub, mul, div, neg, pow
from .transcendental import exp, ln, log, tanh
from .activation import relu

# Unary operators usable as neuron activations
UNARY_OPS = {
    "neg": neg,
    "exp": exp,
    "ln": ln,
    "tanh": tanh,
    "relu": relu,
}

__all__ = [
    "Op",
    "add", "sub", "mul", "div", "neg", "pow",
    "exp", "ln", "log", "tanh",
    "relu",
    "UNARY_OPS",
]
