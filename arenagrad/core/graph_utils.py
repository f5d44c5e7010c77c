"""
Computation graph utilities
Printing and analysis of an arena's graph structure
"""

from collections import Counter
from typing import Dict

import numpy as np

from ..ops.rules import describe
from .handle import Pool


def graph_summary(store) -> Dict:
    """
    Collect structural statistics over both pools of a GraphStore

    Args:
        store: GraphStore to analyse

    Returns:
        Dict with node/edge counts, fan-in/fan-out statistics and the
        operation breakdown (leaves counted under "leaf")
    """
    entries = list(store.iter_nodes())
    n_nodes = len(entries)
    if n_nodes == 0:
        return {
            'nodes': 0, 'edges': 0,
            'max_fan_in': 0, 'avg_fan_in': 0.0,
            'max_fan_out': 0, 'avg_fan_out': 0.0,
            'operations': {},
        }

    # fan-in: number of parents per node
    fan_ins = [len(node.parents) for _, node in entries]

    # fan-out: how many derived nodes use each node as a parent
    fan_outs = Counter()
    for _, node in entries:
        for parent in node.parents:
            fan_outs[(parent.pool, parent.index)] += 1
    fan_out_list = [fan_outs[(h.pool, h.index)] for h, _ in entries]

    op_counter = Counter(describe(node.op) for _, node in entries)

    return {
        'nodes': n_nodes,
        'edges': sum(fan_ins),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_out_list),
        'avg_fan_out': float(np.mean(fan_out_list)),
        'operations': dict(op_counter),
    }


def print_graph_summary(store, detailed: bool = False) -> Dict:
    """
    Print the graph summary

    Args:
        store: GraphStore to analyse
        detailed: also print the node list (only for graphs up to 100 nodes)

    Returns:
        The dict from graph_summary()
    """
    stats = graph_summary(store)
    if stats['nodes'] == 0:
        print("Empty computation graph")
        return stats

    print("\n" + "=" * 70)
    print("COMPUTATION GRAPH SUMMARY")
    print("=" * 70)
    print(f"Permanent nodes:    {store.permanent_count:,}")
    print(f"Temporary nodes:    {store.temporary_count:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed and stats['nodes'] <= 100:
        print()
        print_computation_graph(store, max_nodes=100)

    print("=" * 70 + "\n")
    return stats


def _label(handle) -> str:
    prefix = "P" if handle.pool is Pool.PERMANENT else "T"
    return f"{prefix}{handle.index}"


def print_computation_graph(store, max_nodes: int = 20) -> None:
    """
    Print the iteration pool, one line per node with its parents

    Args:
        store: GraphStore to print
        max_nodes: print at most this many nodes
    """
    print("=" * 70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("=" * 70)

    entries = list(store.iter_nodes(Pool.TEMPORARY))
    if not entries:
        print("Empty graph")
        return

    for handle, node in entries[:max_nodes]:
        if node.parents:
            parent_info = ", ".join(_label(p) for p in node.parents)
        else:
            parent_info = "leaf"
        print(f"{_label(handle):>6s} = {describe(node.op):6s} [{parent_info}]  "
              f"data={float(node.data):.6g} grad={float(node.grad):.6g}")

    if len(entries) > max_nodes:
        print(f"... ({len(entries) - max_nodes} more nodes)")
