# arenagrad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the arena. Each helper builds its graph in a private
# GraphStore so nothing leaks into the caller's stores.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import EngineConfig
from .handle import Handle
from .operand import Operand
from .store import GraphStore


def value(x: Any) -> Any:
    """Return the numeric value of a Handle/Value; pass through plain numbers unchanged."""
    return x.data if isinstance(x, Operand) else x


def _run_backward(store: GraphStore, y: Any) -> bool:
    """Seed y and propagate. Returns False when y is a constant (no dependence on inputs)."""
    if not isinstance(y, Operand):
        return False
    if not isinstance(y, Handle):
        raise TypeError(f"expected the function to build on its Handle inputs, got {type(y).__name__}")
    store.backward(y)
    return True


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Handle], Any], x0: float,
         config: Optional[EngineConfig] = None) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one backward pass within a fresh, isolated store.
    """
    store = GraphStore(config)
    x = store.allocate_leaf(x0)
    if not _run_backward(store, f(x)):
        return 0.0
    return float(x.grad)


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Handle]], Any],
          inputs: Dict[str, float],
          config: Optional[EngineConfig] = None) -> Dict[str, float]:
    """
    Gradient of a scalar function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE backward pass to obtain all ∂y/∂var simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: Handle} and returning a scalar Handle
    inputs  : dict {name: number}

    Returns
    -------
    dict {name: float}  # gradients in the same key order as `inputs`
    """
    store = GraphStore(config)
    handles = {k: store.allocate_leaf(v) for k, v in inputs.items()}
    if not _run_backward(store, f(handles)):
        return {k: 0.0 for k in inputs}
    return {k: float(handles[k].grad) for k in inputs}


def grads_list(f: Callable[[List[Handle]], Any],
               x0_list: Iterable[float],
               config: Optional[EngineConfig] = None) -> List[float]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    store = GraphStore(config)
    xs = [store.allocate_leaf(v) for v in x0_list]
    if not _run_backward(store, f(xs)):
        return [0.0 for _ in xs]
    return [float(x.grad) for x in xs]
