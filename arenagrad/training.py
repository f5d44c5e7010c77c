"""
Training harness: forward -> loss -> backward -> step -> clear, repeated.

Works with any GraphBackend. Raw numbers in inputs/targets are allocated as
per-iteration leaves, so each iteration leaves nothing behind once the
iteration pool is cleared.
"""

import logging
import numbers
from typing import Any, Dict, List, Optional, Sequence

from arenagrad.config import TrainingConfig
from arenagrad.core.operand import Operand
from arenagrad.protocols import GraphBackend

logger = logging.getLogger(__name__)


def _as_vector(row: Any) -> List[Any]:
    if isinstance(row, (Operand, numbers.Number)):
        return [row]
    return list(row)


def _lift(store: GraphBackend, x: Any) -> Any:
    return x if isinstance(x, Operand) else store.allocate_leaf(x, temporary=True)


def mse_loss(store: GraphBackend, outputs: Sequence[Any], targets: Sequence[Any]) -> Any:
    """Sum of squared differences, accumulated onto a temporary zero leaf."""
    if len(outputs) != len(targets):
        raise ValueError(f"Got {len(outputs)} outputs but {len(targets)} targets")
    loss = store.allocate_leaf(0.0, temporary=True)
    for output, target in zip(outputs, targets):
        diff = output - _lift(store, target)
        loss = loss + diff * diff
    return loss


def _forward_loss(store: GraphBackend, model, inputs: Sequence[Any], targets: Sequence[Any]) -> Any:
    if len(inputs) != len(targets):
        raise ValueError(f"Got {len(inputs)} samples but {len(targets)} targets")
    outputs: List[Any] = []
    expected: List[Any] = []
    for row, target in zip(inputs, targets):
        x = [_lift(store, v) for v in _as_vector(row)]
        outputs.extend(model.forward(x))
        expected.extend(_as_vector(target))
    return mse_loss(store, outputs, expected)


def train_step(store: GraphBackend, model, inputs: Sequence[Any], targets: Sequence[Any],
               lr: float) -> float:
    """One full iteration over the batch. Returns the loss before the update."""
    loss = _forward_loss(store, model, inputs, targets)
    loss_value = float(loss.data)
    store.backward(loss)
    model.step(lr)
    store.clear_iteration_pool()
    return loss_value


def fit(store: GraphBackend, model, inputs: Sequence[Any], targets: Sequence[Any],
        config: Optional[TrainingConfig] = None) -> Dict[str, Any]:
    """
    Plain gradient descent on the summed squared error.

    Returns:
        Dict with epochs, initial_loss, final_loss and the per-epoch losses.
    """
    config = config or TrainingConfig()
    losses: List[float] = []

    for epoch in range(config.epochs):
        loss = train_step(store, model, inputs, targets, config.learning_rate)
        losses.append(loss)
        if (epoch + 1) % config.log_every == 0:
            logger.info(f"[Train] epoch {epoch + 1}/{config.epochs} loss={loss:.6f}")

    if losses:
        logger.info(
            f"[Train] Done: {len(losses)} epochs, loss {losses[0]:.6f} -> {losses[-1]:.6f}"
        )
    else:
        logger.info("[Train] Zero epochs requested, nothing trained")

    return {
        "epochs": len(losses),
        "initial_loss": losses[0] if losses else None,
        "final_loss": losses[-1] if losses else None,
        "losses": losses,
    }


def predict(store: GraphBackend, model, inputs: Sequence[Any]) -> List[List[float]]:
    """Evaluate the model on every sample and return plain floats."""
    results = []
    for row in inputs:
        x = [_lift(store, v) for v in _as_vector(row)]
        results.append([float(o.data) for o in model.forward(x)])
    store.clear_iteration_pool()
    return results
