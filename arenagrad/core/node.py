# arenagrad/core/node.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple   # typing gives us generic container types for annotations

from ..ops.rules import Op


@dataclass
class Node:
    """
    One vertex of an arena graph.

    Attributes
    ----------
    data    : numpy scalar
        Forward value. Immutable for derived nodes; leaves change only
        through ``descend_step``.
    grad    : numpy scalar
        Accumulated partial derivative of the last backward root w.r.t. this node.
    op      : Optional[Op]
        Operator that produced the node; None for leaves.
    parents : Tuple[Handle, ...]
        Ordered parent handles (order matters for pow and div).
    """
    data: Any
    grad: Any
    op: Optional[Op] = None
    parents: Tuple[Any, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return self.op is None

    def add_gradient(self, delta):
        self.grad = self.grad + delta

    def zero_grad(self):
        self.grad = type(self.data)(0.0)

    def descend_step(self, lr: float):
        """Gradient-descent update; also clears this node's gradient."""
        scalar = type(self.data)
        self.data = self.data - scalar(lr) * self.grad
        self.grad = scalar(0.0)
