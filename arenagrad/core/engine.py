# arenagrad/core/engine.py
from __future__ import annotations
import logging
from enum import Enum
from typing import List

import numpy as np

from ..ops import rules
from .handle import Handle, Pool

logger = logging.getLogger(__name__)


class PassState(str, Enum):
    IDLE = "idle"
    SEEDED = "seeded"
    PROPAGATING = "propagating"
    DONE = "done"


class BackwardPass:
    """
    One reverse sweep over an arena, from a single root.

    idle -> seeded      : root.grad := 1 (overrides, does not accumulate)
    seeded -> done      : walk the iteration pool from the root's index down to 0;
                          every node reachable from the root applies its rule once.

    Reverse creation order is a valid reverse topological order because a node
    is always created after its parents. The ``live`` mask restricts the sweep
    to ancestors of the root, so unrelated nodes created earlier in the same
    iteration are skipped even if they carry leftover gradients.
    """

    def __init__(self, root: Handle):
        self.root = root
        self.store = root.store
        self.state = PassState.IDLE
        self.visited = 0

    def seed(self) -> "BackwardPass":
        if self.state is not PassState.IDLE:
            raise RuntimeError(f"cannot seed a backward pass in state {self.state.value}")
        self.store.resolve(self.root).grad = self.store.numeric.one()
        self.state = PassState.SEEDED
        return self

    def propagate(self) -> "BackwardPass":
        if self.state is not PassState.SEEDED:
            raise RuntimeError(f"cannot propagate a backward pass in state {self.state.value}")
        self.state = PassState.PROPAGATING

        if self.root.pool is Pool.PERMANENT:
            # permanent nodes are leaves: nothing upstream
            self.visited = 1
        else:
            self.visited = self._sweep()

        self.state = PassState.DONE
        logger.debug(f"[Backward] Visited {self.visited} nodes from {self.root}")
        return self

    def run(self) -> "BackwardPass":
        return self.seed().propagate()

    def _sweep(self) -> int:
        store = self.store
        num = store.numeric
        nodes = store.iteration_nodes()
        start = self.root.index
        live: List[bool] = [False] * (start + 1)
        live[start] = True
        visited = 0

        with np.errstate(all="ignore"):
            for i in range(start, -1, -1):
                if not live[i]:
                    continue
                visited += 1
                node = nodes[i]
                if node.op is None:
                    continue
                parents = [store.resolve(p) for p in node.parents]
                contributions = rules.backward(num, node.op, node.grad, node.data,
                                               *[p.data for p in parents])
                for handle, parent, delta in zip(node.parents, parents, contributions):
                    parent.add_gradient(delta)
                    if handle.pool is Pool.TEMPORARY:
                        live[handle.index] = True
        return visited


def reverse(root: Handle) -> BackwardPass:
    """
    Run a single backward pass from ``root`` and return the finished pass.

    Notes:
        - Gradients accumulate: two passes without a reset sum their contributions.
        - Data and parent links are never modified.
    """
    if not isinstance(root, Handle):
        raise TypeError(f"reverse() expects a Handle, got {type(root).__name__}")
    return BackwardPass(root).run()


def zero_adjoints(store):
    """Set every gradient in the store back to zero."""
    store.reset_gradients()
