"""Neuron, Layer and MLP built on either graph strategy."""

import math

import pytest

from arenagrad import GraphStore, relu, tanh
from arenagrad.nn import MLP, Layer, Neuron, resolve_activation


def _expected(neuron, inputs):
    total = float(neuron.bias.data)
    for w, x in zip(neuron.weights, inputs):
        total += float(w.data) * float(x.data)
    return total


def test_neuron(backend):
    neuron = Neuron(backend, 2, tanh)
    inputs = [backend.allocate_leaf(1.0), backend.allocate_leaf(2.0)]
    output = neuron.forward(inputs)

    assert len(neuron.weights) == 2
    assert float(output.data) == pytest.approx(math.tanh(_expected(neuron, inputs)))


def test_neuron_without_activation(backend):
    neuron = Neuron(backend, 3)
    inputs = [backend.allocate_leaf(v) for v in (0.5, -1.0, 2.0)]
    assert float(neuron(inputs).data) == pytest.approx(_expected(neuron, inputs))


def test_neuron_init_in_range(store):
    neuron = Neuron(store, 50)
    assert all(-1.0 <= p.data < 1.0 for p in neuron.parameters())


def test_neuron_rejects_wrong_input_count(store):
    neuron = Neuron(store, 2)
    with pytest.raises(ValueError):
        neuron.forward([store.allocate_leaf(1.0)])


def test_layer(backend):
    layer = Layer(backend, 2, 3, "tanh")
    inputs = [backend.allocate_leaf(1.0), backend.allocate_leaf(2.0)]
    outputs = layer.forward(inputs)
    assert len(outputs) == 3

    for neuron, output in zip(layer.neurons, outputs):
        assert float(output.data) == pytest.approx(math.tanh(_expected(neuron, inputs)))


def test_mlp(backend):
    mlp = MLP(backend, [2, 3, 1], tanh)
    inputs = [backend.allocate_leaf(1.0), backend.allocate_leaf(2.0)]
    outputs = mlp.forward(inputs)
    assert len(outputs) == 1

    hidden = mlp.layers[0].forward(inputs)
    expected = math.tanh(_expected(mlp.layers[1].neurons[0], hidden))
    assert float(outputs[0].data) == pytest.approx(expected)


def test_mlp_parameters_and_step(store):
    mlp = MLP(store, [2, 3, 1], tanh)
    params = mlp.parameters()
    assert len(params) == 3 * (2 + 1) + 1 * (3 + 1)
    assert all(not p.is_temporary for p in params)

    before = [float(p.data) for p in params]
    out = mlp([store.allocate_leaf(1.0), store.allocate_leaf(-1.0)])[0]
    store.backward(out)
    grads = [float(p.grad) for p in params]
    mlp.step(0.1)

    for p, b, g in zip(params, before, grads):
        assert float(p.data) == pytest.approx(b - 0.1 * g)
        assert p.grad == 0.0


def test_mlp_zero_grad(store):
    mlp = MLP(store, [1, 1])
    out = mlp([store.allocate_leaf(2.0)])[0]
    store.backward(out)
    assert mlp.parameters()[0].grad == 2.0
    mlp.zero_grad()
    assert all(p.grad == 0.0 for p in mlp.parameters())


def test_mlp_needs_two_sizes(store):
    with pytest.raises(ValueError):
        MLP(store, [3])


def test_resolve_activation():
    assert resolve_activation(None) is None
    assert resolve_activation("relu") is relu
    assert resolve_activation(tanh) is tanh
    with pytest.raises(ValueError):
        resolve_activation("softmax")


def test_repr(store):
    mlp = MLP(store, [2, 1], "tanh")
    assert repr(mlp) == "MLP([2, 1])"
    assert repr(mlp.layers[0].neurons[0]) == "Neuron(2, tanh)"


def test_backends_satisfy_protocol(backend):
    from arenagrad import GraphBackend

    assert isinstance(backend, GraphBackend)
