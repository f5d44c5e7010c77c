# arenagrad/core/value.py
"""
Shared-ownership graph strategy.

Each ``Value`` holds direct references to its parents, so a sink keeps its
whole ancestry alive and Python's reference counting frees the graph once the
caller drops it. There is no arena to clear; the backward pass computes the
topological order itself with a depth-first post-order walk.
"""

from __future__ import annotations
import logging
import weakref
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import EngineConfig
from ..numeric import FLOAT64, Numeric, resolve_numeric
from ..ops import rules
from ..ops.rules import Op
from .operand import Operand

logger = logging.getLogger(__name__)


class Value(Operand):
    """Scalar node with automatic gradient computation."""

    __slots__ = ("data", "grad", "op", "parents", "numeric", "__weakref__")

    def __init__(self, data, *, numeric: Numeric = FLOAT64,
                 op: Optional[Op] = None, parents: Tuple["Value", ...] = ()):
        if op is not None and len(parents) != rules.arity(op):
            raise ValueError(f"{op.value} expects {rules.arity(op)} parent(s), got {len(parents)}")
        self.numeric = numeric
        self.data = numeric.cast(data)
        self.grad = numeric.zero()
        self.op = op
        self.parents = tuple(parents)

    def __repr__(self):
        return f"Value(data={self.data:.4f}, grad={self.grad:.4f})"

    @property
    def is_leaf(self) -> bool:
        return self.op is None

    def _apply(self, op, operands):
        return Value.from_op(op, operands, numeric=self.numeric)

    @classmethod
    def from_op(cls, op: Op, operands: Sequence, *, numeric: Numeric = FLOAT64) -> "Value":
        parents = tuple(cls._lift(x, numeric) for x in operands)
        datas = [p.data for p in parents]
        return cls(rules.forward(numeric, op, *datas), numeric=numeric, op=op, parents=parents)

    @staticmethod
    def _lift(x, numeric: Numeric) -> "Value":
        if isinstance(x, Value):
            return x
        if isinstance(x, Operand):
            raise TypeError("cannot mix shared-graph values with arena handles")
        if isinstance(x, bool) or not isinstance(x, (int, float, np.number)):
            raise TypeError(f"unsupported operand type: {type(x).__name__}")
        return Value(x, numeric=numeric)

    def add_gradient(self, delta):
        self.grad = self.grad + delta

    def zero_grad(self):
        self.grad = self.numeric.zero()

    def step(self, lr: float):
        self.data = self.data - self.numeric.cast(lr) * self.grad
        self.grad = self.numeric.zero()

    def topological_order(self) -> List["Value"]:
        """
        Ancestors of this node (itself included), parents before children.

        Iterative DFS post-order; the visited set is keyed by object identity so
        a shared ancestor (diamond) is finalized exactly once.
        """
        topo: List[Value] = []
        visited = set()
        stack = [(self, False)]
        while stack:
            v, expanded = stack.pop()
            if expanded:
                topo.append(v)
                continue
            if id(v) in visited:
                continue
            visited.add(id(v))
            stack.append((v, True))
            for p in reversed(v.parents):
                if id(p) not in visited:
                    stack.append((p, False))
        return topo

    def backward(self):
        """Compute gradients of this node w.r.t. every ancestor."""
        topo = self.topological_order()
        self.grad = self.numeric.one()
        with np.errstate(all="ignore"):
            for v in reversed(topo):
                if v.op is None:
                    continue
                contributions = rules.backward(v.numeric, v.op, v.grad, v.data,
                                               *[p.data for p in v.parents])
                for p, delta in zip(v.parents, contributions):
                    p.add_gradient(delta)
        logger.debug(f"[Backward] Visited {len(topo)} values")
        return topo

    @staticmethod
    def zero_grads(roots: Iterable["Value"]):
        """Reset the gradient of every value reachable from ``roots``."""
        for root in roots:
            for v in root.topological_order():
                v.zero_grad()


class ValueGraph:
    """
    Store-shaped front end for shared-ownership values.

    Gives ``Value`` the same allocation / backward / reset contract as
    ``GraphStore`` so the network layer and training harness run on either.
    Persistent leaves and the roots of past backward passes are tracked (for
    ``reset_gradients``); temporary values are owned by whoever references
    them, so roots are held weakly.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.numeric: Numeric = resolve_numeric(self.config.dtype)
        self.rng = np.random.default_rng(self.config.seed)
        self._leaves: List[Value] = []
        self._roots: "weakref.WeakSet[Value]" = weakref.WeakSet()

    def __repr__(self):
        return f"ValueGraph({self.numeric.name}, leaves={len(self._leaves)})"

    @property
    def permanent_count(self) -> int:
        return len(self._leaves)

    def allocate_leaf(self, value, *, temporary: bool = False) -> Value:
        v = Value(value, numeric=self.numeric)
        if not temporary:
            self._leaves.append(v)
        return v

    def allocate_derived(self, value, op: Op, parents: Sequence[Value]) -> Value:
        return Value(value, numeric=self.numeric, op=op, parents=tuple(parents))

    def allocate_uniform(self, low: Optional[float] = None, high: Optional[float] = None,
                         *, temporary: bool = False) -> Value:
        low = self.config.init_low if low is None else low
        high = self.config.init_high if high is None else high
        return self.allocate_leaf(self.numeric.uniform(self.rng, low, high), temporary=temporary)

    def allocate_one_hot(self, index: int, size: int, *, temporary: bool = False) -> List[Value]:
        if not 0 <= index < size:
            raise IndexError(f"one-hot index {index} out of range for size {size}")
        return [self.allocate_leaf(1.0 if i == index else 0.0, temporary=temporary)
                for i in range(size)]

    def resolve(self, value: Value) -> Value:
        if not isinstance(value, Value):
            raise TypeError(f"expected a Value, got {type(value).__name__}")
        return value

    def reset_gradients(self):
        """Zero the persistent leaves and every value reachable from a live root."""
        Value.zero_grads(list(self._roots))
        for v in self._leaves:
            v.zero_grad()

    def clear_iteration_pool(self):
        """Nothing to free: temporary values die with their last reference."""

    def backward(self, root: Optional[Value] = None):
        if root is None:
            raise ValueError("ValueGraph.backward() needs an explicit root")
        self.resolve(root)
        self._roots.add(root)
        return root.backward()
