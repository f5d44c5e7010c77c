"""
arenagrad configuration.

Engine-wide numeric settings and training-loop hyperparameters live here.
No hardcoded tuning values in the rest of the package.
"""

from dataclasses import dataclass
from typing import Optional

from arenagrad.numeric import resolve_numeric


@dataclass
class EngineConfig:
    """Configuration for a graph store."""

    # Element type: "float32" or "float64"
    dtype: str = "float64"

    # Domain policy: False propagates nan/inf, True raises DomainError in the forward pass.
    # Strict pow rejects a non-positive base only for a handle exponent; a plain-number
    # exponent fails just where the power itself is undefined.
    strict_domain: bool = False

    # Parameter initialization range, U[init_low, init_high)
    init_low: float = -1.0
    init_high: float = 1.0

    # Seed for the store's numpy Generator (None = fresh entropy)
    seed: Optional[int] = None

    def __post_init__(self):
        resolve_numeric(self.dtype)
        if not self.init_low < self.init_high:
            raise ValueError(
                f"init_low must be below init_high, got [{self.init_low}, {self.init_high})"
            )


@dataclass
class TrainingConfig:
    """Hyperparameters for the gradient-descent training harness."""

    learning_rate: float = 0.15
    epochs: int = 2000

    # Log the loss every N epochs (INFO level)
    log_every: int = 100

    def __post_init__(self):
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {self.epochs}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {self.log_every}")
