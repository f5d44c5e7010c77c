# arenagrad/core/__init__.py

"""
Core public API of the engine.

Exports:
    GraphStore    : Arena strategy; owns permanent and per-iteration nodes.
    Handle, Pool  : Non-owning node reference and the pool it points into.
    Node          : The record stored in an arena slot.
    Value         : Shared-ownership strategy node.
    ValueGraph    : Store-shaped front end for Values.
    BackwardPass  : Reverse sweep state machine.
    reverse       : Run a single backward pass from a handle.
    zero_adjoints : Reset all gradients of a store to zero.
    grad, grads   : Convenience: gradients of a plain Python function.
    value         : Convenience: extract the primal value.
"""

from .node import Node
from .handle import Handle, Pool
from .store import GraphStore
from .engine import BackwardPass, PassState, reverse, zero_adjoints
from .value import Value, ValueGraph
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Node", "Handle", "Pool",
    "GraphStore",
    "BackwardPass", "PassState", "reverse", "zero_adjoints",
    "Value", "ValueGraph",
    "grad", "grads", "grads_list", "value",
]
