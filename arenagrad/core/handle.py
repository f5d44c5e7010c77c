# arenagrad/core/handle.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .operand import Operand

if TYPE_CHECKING:
    from .node import Node
    from .store import GraphStore


class Pool(str, Enum):
    PERMANENT = "permanent"
    TEMPORARY = "temporary"


@dataclass(frozen=True, eq=True)
class Handle(Operand):
    """
    Non-owning reference to a node inside a GraphStore.

    Attributes
    ----------
    store      : GraphStore
        The arena that owns the node. Operators refuse handles from two stores.
    pool       : Pool
        Which pool the node lives in.
    index      : int
        Position in that pool (creation order).
    generation : int
        Iteration-pool generation at allocation time; a mismatch on lookup means
        the pool was cleared since and the handle is stale.
    """
    store: "GraphStore" = field(repr=False)
    pool: Pool
    index: int
    generation: int = 0

    def _apply(self, op, operands):
        return self.store.apply(op, operands)

    @property
    def node(self) -> "Node":
        return self.store.resolve(self)

    @property
    def data(self):
        return self.node.data

    @property
    def grad(self):
        return self.node.grad

    @property
    def is_leaf(self) -> bool:
        return self.node.is_leaf

    @property
    def is_temporary(self) -> bool:
        return self.pool is Pool.TEMPORARY

    def step(self, lr: float):
        self.node.descend_step(lr)

    def zero_grad(self):
        self.node.zero_grad()

    def backward(self):
        return self.store.backward(self)
