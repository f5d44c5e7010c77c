# arenagrad/errors.py
"""Exceptions raised by the engine. All of them signal caller contract violations."""


class ArenaGradError(Exception):
    """Base class for engine errors."""


class CrossStoreError(ArenaGradError, ValueError):
    """Handles from two different graph stores were combined in one operation."""


class StaleHandleError(ArenaGradError, LookupError):
    """A handle was resolved after its pool was cleared, or never belonged to it."""


class DomainError(ArenaGradError, ArithmeticError):
    """Raised in strict mode when an operator is applied outside its domain."""
