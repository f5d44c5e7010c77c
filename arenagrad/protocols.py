"""
Graph backend protocol.

Both ownership strategies (GraphStore arena, ValueGraph shared ownership)
satisfy it, so the network layer and training harness accept either.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class GraphBackend(Protocol):
    """Allocation, backward and reset contract shared by every graph strategy."""

    def allocate_leaf(self, value: Any, *, temporary: bool = False) -> Any:
        """
        Create a parentless node.

        Args:
            value: Initial data
            temporary: Place the node in the per-iteration pool

        Returns:
            A node reference (Handle or Value).
        """
        ...

    def allocate_uniform(self, low: Optional[float] = None, high: Optional[float] = None,
                         *, temporary: bool = False) -> Any:
        """Leaf drawn uniformly from [low, high); defaults come from the engine config."""
        ...

    def allocate_one_hot(self, index: int, size: int, *, temporary: bool = False) -> List[Any]:
        ...

    def backward(self, root: Any = None) -> Any:
        """Run exactly one backward pass seeded at ``root``."""
        ...

    def reset_gradients(self) -> None:
        ...

    def clear_iteration_pool(self) -> None:
        """Discard per-iteration nodes before the next forward pass."""
        ...
