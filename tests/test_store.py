"""Tests for the arena store: pools, lookup, lifecycle and misuse detection."""

import numpy as np
import pytest

from arenagrad import (
    CrossStoreError,
    EngineConfig,
    GraphStore,
    Pool,
    StaleHandleError,
    Value,
    tanh,
)


def test_value_creation(store):
    a = store.allocate_leaf(3.0)
    assert a.data == 3.0
    assert a.grad == 0.0
    assert a.is_leaf
    assert a.pool is Pool.PERMANENT


def test_temporary_leaf_goes_to_iteration_pool(store):
    t = store.allocate_leaf(1.5, temporary=True)
    assert t.is_temporary
    assert store.temporary_count == 1
    assert store.permanent_count == 0


def test_derived_nodes_are_temporary(store):
    a = store.allocate_leaf(3.0)
    b = store.allocate_leaf(4.0)
    c = a + b
    assert c.pool is Pool.TEMPORARY
    assert not c.is_leaf
    assert c.node.parents == (a, b)
    assert len(store) == 3


def test_allocate_derived_checks_arity(store):
    from arenagrad.ops import Op

    a = store.allocate_leaf(1.0)
    with pytest.raises(ValueError):
        store.allocate_derived(1.0, Op.ADD, [a])
    with pytest.raises(ValueError):
        store.allocate_derived(1.0, Op.EXP, [a, a])


def test_handles_are_hashable(store):
    a = store.allocate_leaf(1.0)
    b = store.allocate_leaf(2.0)
    seen = {a: "a", b: "b"}
    assert seen[a] == "a"
    assert a == a and a != b


def test_allocate_uniform_uses_config_range():
    store = GraphStore(EngineConfig(seed=7, init_low=0.25, init_high=0.5))
    values = [store.allocate_uniform().data for _ in range(100)]
    assert all(0.25 <= v < 0.5 for v in values)


def test_allocate_uniform_is_seeded():
    first = [GraphStore(EngineConfig(seed=3)).allocate_uniform().data for _ in range(2)]
    assert first[0] == first[1]


def test_allocate_one_hot(store):
    hot = store.allocate_one_hot(2, 4)
    assert [h.data for h in hot] == [0.0, 0.0, 1.0, 0.0]
    assert all(h.pool is Pool.PERMANENT for h in hot)

    temp = store.allocate_one_hot(0, 2, temporary=True)
    assert all(h.is_temporary for h in temp)

    with pytest.raises(IndexError):
        store.allocate_one_hot(4, 4)


def test_float32_store_keeps_dtype():
    store = GraphStore(EngineConfig(dtype="float32"))
    a = store.allocate_leaf(3.0)
    b = store.allocate_leaf(2.0)
    c = tanh(a * b)
    assert isinstance(c.data, np.float32)
    store.backward(c)
    assert isinstance(a.grad, np.float32)


# ============================================================================
# RESET / CLEAR
# ============================================================================

def test_reset_gradients_zeroes_both_pools(store):
    a = store.allocate_leaf(3.0)
    b = store.allocate_leaf(2.0)
    c = a * b
    store.backward(c)
    assert a.grad == 2.0

    store.reset_gradients()
    assert a.grad == 0.0
    assert b.grad == 0.0
    assert c.grad == 0.0
    # structure survives
    assert c.data == 6.0
    assert store.temporary_count == 1


def test_clear_iteration_pool_keeps_permanent_leaves(store):
    a = store.allocate_leaf(3.0)
    b = store.allocate_leaf(2.0)
    c = a * b
    store.backward(c)

    store.clear_iteration_pool()
    assert store.temporary_count == 0
    assert store.permanent_count == 2
    assert a.data == 3.0
    # gradients are not reset by clearing
    assert a.grad == 2.0
    assert b.grad == 3.0


def test_stale_handle_after_clear(store):
    a = store.allocate_leaf(3.0)
    c = a * a
    store.clear_iteration_pool()
    with pytest.raises(StaleHandleError):
        c.data


def test_stale_handle_is_not_aliased_by_new_nodes(store):
    a = store.allocate_leaf(3.0)
    old = a + a
    store.clear_iteration_pool()
    new = a * a
    assert new.index == old.index
    assert new.data == 9.0
    with pytest.raises(StaleHandleError):
        store.resolve(old)


def test_generation_increments(store):
    assert store.generation == 0
    store.clear_iteration_pool()
    store.clear_iteration_pool()
    assert store.generation == 2


# ============================================================================
# MISUSE
# ============================================================================

def test_cross_store_operator_fails_fast():
    s1, s2 = GraphStore(), GraphStore()
    a = s1.allocate_leaf(1.0)
    b = s2.allocate_leaf(2.0)
    with pytest.raises(CrossStoreError):
        a + b
    with pytest.raises(CrossStoreError):
        b * a
    # nothing was allocated by the failed calls
    assert s1.temporary_count == 0
    assert s2.temporary_count == 0


def test_cross_store_resolve_and_backward():
    s1, s2 = GraphStore(), GraphStore()
    a = s1.allocate_leaf(1.0)
    with pytest.raises(CrossStoreError):
        s2.resolve(a)
    with pytest.raises(CrossStoreError):
        s2.backward(a)


def test_mixing_handle_and_value_is_rejected(store):
    a = store.allocate_leaf(1.0)
    with pytest.raises(TypeError):
        a + Value(2.0)
    with pytest.raises(TypeError):
        Value(2.0) * a


def test_unsupported_operand_type(store):
    a = store.allocate_leaf(1.0)
    with pytest.raises(TypeError):
        a + "one"
    with pytest.raises(TypeError):
        a * True


def test_iter_nodes_order(store):
    a = store.allocate_leaf(1.0)
    b = store.allocate_leaf(2.0)
    c = a + b
    handles = [h for h, _ in store.iter_nodes()]
    assert handles == [a, b, c]
    assert [h for h, _ in store.iter_nodes(Pool.TEMPORARY)] == [c]
