"""Shared-ownership strategy: Value nodes and the ValueGraph front end."""

import gc
import weakref

import numpy as np
import pytest

from arenagrad import FLOAT32, Value, ValueGraph, exp, pow, relu, tanh
from arenagrad.ops import Op


def test_scenario_matches_arena():
    a = Value(3.0)
    b = Value(2.0)
    c = pow(a, b)
    d = c + c
    e = d * a
    f = e - d
    g = f / c
    h = exp(g)
    assert h.data == 54.598150033144236

    h.backward()
    assert a.grad == 109.1963000662885
    assert b.grad == pytest.approx(0.0, abs=1e-9)
    assert d.grad == 12.13292222958761
    assert g.grad == pytest.approx(54.598150033144236)
    assert h.grad == 1.0


def test_diamond_is_finalized_once():
    x = Value(3.0)
    y = x * x
    z = y + y           # z = 2x^2
    z.backward()
    assert y.grad == 2.0
    assert x.grad == 12.0


def test_topological_order_puts_parents_first():
    a = Value(1.0)
    b = a * 2.0
    c = b + a
    order = c.topological_order()
    position = {id(v): i for i, v in enumerate(order)}
    assert order[-1] is c
    assert position[id(a)] < position[id(b)] < position[id(c)]
    assert len(order) == 4  # a, constant 2, b, c


def test_deep_chain_has_no_recursion_limit():
    x = Value(1.0)
    y = x
    for _ in range(5000):
        y = y + 1.0
    y.backward()
    assert x.grad == 1.0


def test_unary_rules():
    a = Value(0.5)
    t = tanh(a)
    t.backward()
    assert a.grad == pytest.approx(1.0 - np.tanh(0.5) ** 2)

    r = relu(Value(-1.0))
    assert r.data == 0.0


def test_step_and_zero_grad():
    w = Value(1.0)
    loss = (w - 3.0) * (w - 3.0)
    loss.backward()
    assert w.grad == -4.0
    w.step(0.25)
    assert w.data == 2.0
    assert w.grad == 0.0

    loss.backward()
    Value.zero_grads([loss])
    assert w.grad == 0.0
    assert loss.grad == 0.0


def test_sink_keeps_ancestry_alive():
    a = Value(2.0)
    ref = weakref.ref(a)
    out = a * 3.0
    del a
    gc.collect()
    assert ref() is not None
    del out
    gc.collect()
    assert ref() is None


def test_value_checks_arity():
    with pytest.raises(ValueError):
        Value(1.0, op=Op.ADD, parents=(Value(1.0),))


def test_value_numeric_follows_first_operand():
    a = Value(2.0, numeric=FLOAT32)
    b = a * 3.0
    assert isinstance(b.data, np.float32)


def test_repr():
    assert repr(Value(1.5)) == "Value(data=1.5000, grad=0.0000)"


# ============================================================================
# VALUE GRAPH
# ============================================================================

def test_value_graph_tracks_permanent_leaves(value_graph):
    w = value_graph.allocate_leaf(1.0)
    t = value_graph.allocate_leaf(2.0, temporary=True)
    assert value_graph.permanent_count == 1

    out = w * t
    value_graph.backward(out)
    assert w.grad == 2.0

    value_graph.reset_gradients()
    assert w.grad == 0.0
    # reachable from a live root, so reset too
    assert t.grad == 0.0
    assert out.grad == 0.0


def test_value_graph_reset_zeroes_derived_values(value_graph):
    a = value_graph.allocate_leaf(3.0)
    b = value_graph.allocate_leaf(4.0)
    c = a * b
    d = c + c
    value_graph.backward(d)
    assert c.grad == 2.0

    value_graph.reset_gradients()
    assert (a.grad, b.grad, c.grad, d.grad) == (0.0, 0.0, 0.0, 0.0)

    value_graph.backward(d)
    assert a.grad == 8.0
    assert b.grad == 6.0
    assert c.grad == 2.0


def test_value_graph_holds_roots_weakly(value_graph):
    a = value_graph.allocate_leaf(2.0)
    out = a * a
    ref = weakref.ref(out)
    value_graph.backward(out)
    del out
    gc.collect()
    assert ref() is None
    value_graph.reset_gradients()
    assert a.grad == 0.0


def test_value_graph_requires_root(value_graph):
    with pytest.raises(ValueError):
        value_graph.backward()


def test_value_graph_allocation_helpers(value_graph):
    hot = value_graph.allocate_one_hot(1, 3)
    assert [float(v.data) for v in hot] == [0.0, 1.0, 0.0]
    with pytest.raises(IndexError):
        value_graph.allocate_one_hot(-1, 3)

    u = value_graph.allocate_uniform(0.0, 0.5)
    assert 0.0 <= u.data < 0.5

    derived = value_graph.allocate_derived(3.0, Op.NEG, [hot[1]])
    assert derived.parents == (hot[1],)
    assert value_graph.resolve(derived) is derived
    with pytest.raises(TypeError):
        value_graph.resolve(3.0)


def test_value_graph_clear_is_noop(value_graph):
    w = value_graph.allocate_leaf(4.0)
    value_graph.clear_iteration_pool()
    assert w.data == 4.0
