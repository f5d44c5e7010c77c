"""
Small feed-forward network built on node handles.

Neuron -> Layer -> MLP. Everything here is plain operator calls into the
engine; parameters are persistent leaves of whatever graph backend the model
was created on (GraphStore or ValueGraph).
"""

from typing import Any, Callable, List, Optional, Sequence, Union

from arenagrad.ops import UNARY_OPS
from arenagrad.protocols import GraphBackend

Activation = Optional[Union[str, Callable[[Any], Any]]]


def resolve_activation(activation: Activation) -> Optional[Callable[[Any], Any]]:
    """Accept None, a unary operator, or its name ("tanh", "relu", ...)."""
    if activation is None or callable(activation):
        return activation
    try:
        return UNARY_OPS[activation]
    except KeyError:
        raise ValueError(
            f"Unknown activation {activation!r}; expected one of {sorted(UNARY_OPS)}"
        ) from None


class Neuron:
    """activation(sum_i w_i * x_i + b), or the raw sum without an activation."""

    def __init__(self, store: GraphBackend, n_inputs: int, activation: Activation = None):
        self.store = store
        self.weights = [store.allocate_uniform() for _ in range(n_inputs)]
        self.bias = store.allocate_uniform()
        self.activation = resolve_activation(activation)

    def __repr__(self):
        name = getattr(self.activation, "__name__", "linear")
        return f"Neuron({len(self.weights)}, {name})"

    def forward(self, inputs: Sequence[Any]) -> Any:
        if len(inputs) != len(self.weights):
            raise ValueError(f"Neuron expects {len(self.weights)} inputs, got {len(inputs)}")
        total = self.bias
        for w, x in zip(self.weights, inputs):
            total = total + w * x
        return self.activation(total) if self.activation else total

    __call__ = forward

    def parameters(self) -> List[Any]:
        return self.weights + [self.bias]


class Layer:
    """Neurons sharing the same inputs."""

    def __init__(self, store: GraphBackend, n_inputs: int, n_outputs: int,
                 activation: Activation = None):
        self.neurons = [Neuron(store, n_inputs, activation) for _ in range(n_outputs)]

    def __repr__(self):
        return f"Layer([{', '.join(repr(n) for n in self.neurons)}])"

    def forward(self, inputs: Sequence[Any]) -> List[Any]:
        return [neuron.forward(inputs) for neuron in self.neurons]

    __call__ = forward

    def parameters(self) -> List[Any]:
        return [p for neuron in self.neurons for p in neuron.parameters()]


class MLP:
    """
    Multi-layer perceptron.

    ``sizes`` lists the width of every layer including the input, e.g.
    ``[2, 3, 1]`` is 2 inputs -> 3 hidden -> 1 output. The same activation is
    used on every layer, matching the classic micrograd setup.
    """

    def __init__(self, store: GraphBackend, sizes: Sequence[int], activation: Activation = None):
        if len(sizes) < 2:
            raise ValueError(f"MLP needs at least an input and an output size, got {list(sizes)}")
        self.store = store
        self.sizes = list(sizes)
        self.layers = [
            Layer(store, n_in, n_out, activation)
            for n_in, n_out in zip(self.sizes[:-1], self.sizes[1:])
        ]

    def __repr__(self):
        return f"MLP({self.sizes})"

    def forward(self, inputs: Sequence[Any]) -> List[Any]:
        outputs = list(inputs)
        for layer in self.layers:
            outputs = layer.forward(outputs)
        return outputs

    __call__ = forward

    def parameters(self) -> List[Any]:
        return [p for layer in self.layers for p in layer.parameters()]

    def step(self, lr: float):
        """Gradient-descent step on every weight and bias (also clears their gradients)."""
        for p in self.parameters():
            p.step(lr)

    def zero_grad(self):
        for p in self.parameters():
            p.zero_grad()
