# arenagrad/__init__.py
# Reverse-mode automatic differentiation over scalar values

from .numeric import Numeric, FLOAT32, FLOAT64, resolve_numeric
from .config import EngineConfig, TrainingConfig
from .errors import ArenaGradError, CrossStoreError, StaleHandleError, DomainError
from .core.store import GraphStore
from .core.handle import Handle, Pool
from .core.value import Value, ValueGraph
from .core.engine import BackwardPass, PassState, reverse, zero_adjoints
from .core.seeds import grad, grads, grads_list, value
from .core.graph_utils import graph_summary, print_graph_summary, print_computation_graph
from .ops import Op, add, sub, mul, div, neg, pow, exp, ln, log, tanh, relu
from .protocols import GraphBackend

__all__ = [
    # Numeric / config / errors
    'Numeric', 'FLOAT32', 'FLOAT64', 'resolve_numeric',
    'EngineConfig', 'TrainingConfig',
    'ArenaGradError', 'CrossStoreError', 'StaleHandleError', 'DomainError',
    # Graph strategies
    'GraphStore', 'Handle', 'Pool',
    'Value', 'ValueGraph',
    'GraphBackend',
    # Engine
    'BackwardPass', 'PassState', 'reverse', 'zero_adjoints',
    'grad', 'grads', 'grads_list', 'value',
    'graph_summary', 'print_graph_summary', 'print_computation_graph',
    # Operators
    'Op', 'add', 'sub', 'mul', 'div', 'neg', 'pow',
    'exp', 'ln', 'log', 'tanh', 'relu',
]
