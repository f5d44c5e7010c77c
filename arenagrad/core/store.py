# arenagrad/core/store.py
"""
Arena graph store.

Nodes live in two flat lists addressed by integer handles:

    permanent : long-lived leaves (inputs, weights, biases)
    temporary : everything built during one training iteration, cleared in bulk

Derived nodes always go to the temporary pool, and a node is always appended
after its parents, so the temporary pool in creation order is already a valid
topological order for the backward sweep.
"""

from __future__ import annotations
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..config import EngineConfig
from ..errors import CrossStoreError, StaleHandleError
from ..numeric import Numeric, resolve_numeric
from ..ops import rules
from ..ops.rules import Op
from .handle import Handle, Pool
from .node import Node
from .operand import Operand

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Owns every node of one computation graph.

    Attributes
    ----------
    config  : EngineConfig
    numeric : Numeric
        Element type of every node in this store.
    rng     : np.random.Generator
        Source for parameter initialization (seeded from ``config.seed``).
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.numeric: Numeric = resolve_numeric(self.config.dtype)
        self.rng = np.random.default_rng(self.config.seed)
        self._permanent: List[Node] = []
        self._temporary: List[Node] = []
        self._generation = 0

    def __repr__(self):
        return (
            f"GraphStore({self.numeric.name}, permanent={len(self._permanent)}, "
            f"temporary={len(self._temporary)}, generation={self._generation})"
        )

    def __len__(self):
        return len(self._permanent) + len(self._temporary)

    @property
    def permanent_count(self) -> int:
        return len(self._permanent)

    @property
    def temporary_count(self) -> int:
        return len(self._temporary)

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------ #
    # Allocation
    # ------------------------------------------------------------------ #
    def allocate_leaf(self, value, *, temporary: bool = False) -> Handle:
        """Create a parentless node; ``temporary=True`` places it in the iteration pool."""
        node = Node(data=self.numeric.cast(value), grad=self.numeric.zero())
        if temporary:
            return self._push_temporary(node)
        self._permanent.append(node)
        return Handle(self, Pool.PERMANENT, len(self._permanent) - 1)

    def allocate_derived(self, value, op: Op, parents: Sequence[Handle]) -> Handle:
        """Create a derived node in the iteration pool, recording its rule and parents."""
        parents = tuple(parents)
        if len(parents) != rules.arity(op):
            raise ValueError(f"{op.value} expects {rules.arity(op)} parent(s), got {len(parents)}")
        for p in parents:
            self._check_owner(p)
        node = Node(data=self.numeric.cast(value), grad=self.numeric.zero(), op=op, parents=parents)
        return self._push_temporary(node)

    def allocate_uniform(self, low: Optional[float] = None, high: Optional[float] = None,
                         *, temporary: bool = False) -> Handle:
        """Leaf drawn from U[low, high); bounds default to the config's init range."""
        low = self.config.init_low if low is None else low
        high = self.config.init_high if high is None else high
        return self.allocate_leaf(self.numeric.uniform(self.rng, low, high), temporary=temporary)

    def allocate_one_hot(self, index: int, size: int, *, temporary: bool = False) -> List[Handle]:
        if not 0 <= index < size:
            raise IndexError(f"one-hot index {index} out of range for size {size}")
        return [
            self.allocate_leaf(1.0 if i == index else 0.0, temporary=temporary)
            for i in range(size)
        ]

    def _push_temporary(self, node: Node) -> Handle:
        self._temporary.append(node)
        return Handle(self, Pool.TEMPORARY, len(self._temporary) - 1, self._generation)

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #
    def resolve(self, handle: Handle) -> Node:
        """O(1) bounds- and generation-checked lookup."""
        self._check_owner(handle)
        if handle.pool is Pool.PERMANENT:
            if not 0 <= handle.index < len(self._permanent):
                raise StaleHandleError(f"no permanent node at index {handle.index}")
            return self._permanent[handle.index]
        if handle.generation != self._generation:
            raise StaleHandleError(
                f"temporary handle from generation {handle.generation} used after the "
                f"iteration pool was cleared (now generation {self._generation})"
            )
        if not 0 <= handle.index < len(self._temporary):
            raise StaleHandleError(f"no temporary node at index {handle.index}")
        return self._temporary[handle.index]

    def _check_owner(self, handle: Handle):
        if not isinstance(handle, Handle):
            raise TypeError(f"expected a Handle, got {type(handle).__name__}")
        if handle.store is not self:
            raise CrossStoreError("handle belongs to a different GraphStore")

    def iter_nodes(self, pool: Optional[Pool] = None) -> Iterator[Tuple[Handle, Node]]:
        """Yield (handle, node) pairs in creation order, permanent pool first."""
        if pool in (None, Pool.PERMANENT):
            for i, node in enumerate(self._permanent):
                yield Handle(self, Pool.PERMANENT, i), node
        if pool in (None, Pool.TEMPORARY):
            for i, node in enumerate(self._temporary):
                yield Handle(self, Pool.TEMPORARY, i, self._generation), node

    def iteration_nodes(self) -> List[Node]:
        return self._temporary

    # ------------------------------------------------------------------ #
    # Operators
    # ------------------------------------------------------------------ #
    def apply(self, op: Op, operands: Sequence) -> Handle:
        """
        Evaluate ``op`` on operands and record the derived node.

        Operands may be handles of this store or plain numbers (promoted to
        temporary constant leaves). Handles of another store raise
        CrossStoreError before anything is allocated.
        """
        for x in operands:
            if isinstance(x, Handle):
                self._check_owner(x)
            elif isinstance(x, Operand):
                raise TypeError("cannot mix arena handles with shared-graph values")
        parents = tuple(x if isinstance(x, Handle) else self._constant(x) for x in operands)
        datas = [self.resolve(p).data for p in parents]
        if self.config.strict_domain:
            rules.check_domain(op, *datas,
                               constant_exponent=op is Op.POW and not isinstance(operands[1], Handle))
        return self.allocate_derived(rules.forward(self.numeric, op, *datas), op, parents)

    def _constant(self, x) -> Handle:
        if isinstance(x, bool) or not isinstance(x, (int, float, np.number)):
            raise TypeError(f"unsupported operand type: {type(x).__name__}")
        return self.allocate_leaf(x, temporary=True)

    # ------------------------------------------------------------------ #
    # Iteration lifecycle
    # ------------------------------------------------------------------ #
    def reset_gradients(self):
        """Zero every gradient in both pools; structure is kept."""
        zero = self.numeric.zero()
        for node in self._permanent:
            node.grad = zero
        for node in self._temporary:
            node.grad = zero

    def clear_iteration_pool(self):
        """Drop all temporary nodes. Outstanding temporary handles become stale."""
        logger.debug(
            f"[GraphStore] Clearing {len(self._temporary)} temporary nodes "
            f"(generation {self._generation})"
        )
        self._temporary.clear()
        self._generation += 1

    def backward(self, root: Optional[Handle] = None):
        """
        Run one backward pass from ``root``.

        Without a root, the most recently created temporary node is used. An
        empty iteration pool with no root is a no-op and returns None.
        """
        from .engine import reverse

        if root is None:
            if not self._temporary:
                logger.debug("[GraphStore] backward() on an empty iteration pool, nothing to do")
                return None
            root = Handle(self, Pool.TEMPORARY, len(self._temporary) - 1, self._generation)
        else:
            self._check_owner(root)
        return reverse(root)
