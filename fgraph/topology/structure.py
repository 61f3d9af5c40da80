"""
fgraph/topology/structure.py

Graph views of a factor graph's variable topology.

The interaction graph G = (V, E) has:
- Nodes: variable indices, with their cardinality as `card`
- Edges: anchor edges (scope[0], scope[i]) of every factor, labelled with
  the indices of the factors that induced them

These views are what connect_components() reasons about, exported for
plotting, debugging, and cross-checking the union-find result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Sequence, Tuple

import networkx as nx
import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components

from fgraph.errors import IndexOutOfRange

if TYPE_CHECKING:
    from fgraph.graph import FactorGraph


def anchor_edges(scopes: Iterable[Sequence[int]]) -> Iterator[Tuple[int, int, int]]:
    """
    Yield (factor index, anchor, other) for every anchor edge.

    Scopes with fewer than two variables yield nothing.
    """
    for fi, scope in enumerate(scopes):
        if len(scope) < 2:
            continue
        v0 = int(scope[0])
        for v in scope[1:]:
            yield fi, v0, int(v)


def _scopes(graph: "FactorGraph"):
    n = graph.num_variables
    out = []
    for fi, factor in enumerate(graph.get_factors()):
        scope = factor.get_scope()
        for v in scope:
            if v < 0 or v >= n:
                raise IndexOutOfRange(f"factor {fi}: variable {v} out of range [0, {n})")
        out.append(scope)
    return out


def interaction_graph(graph: "FactorGraph") -> nx.MultiGraph:
    """
    Build the variable interaction graph.

    A multigraph, so that two factors over the same pair remain two parallel
    edges (the second one closes a cycle in connect_components()).

    Returns:
        NetworkX MultiGraph with nodes 0..n-1 (attr `card`) and one edge per
        anchor edge (attr `factor`)
    """
    g = nx.MultiGraph()
    for v, card in enumerate(graph.get_cardinalities()):
        g.add_node(v, card=int(card))

    for fi, a, b in anchor_edges(_scopes(graph)):
        g.add_edge(a, b, factor=fi)

    return g


def adjacency_matrix(graph: "FactorGraph") -> sp.csr_matrix:
    """Symmetric boolean adjacency matrix over variables."""
    n = graph.num_variables
    rows = []
    cols = []
    for _, a, b in anchor_edges(_scopes(graph)):
        rows.extend((a, b))
        cols.extend((b, a))

    data = np.ones(len(rows), dtype=np.int8)
    A = sp.coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()
    if A.nnz:
        A.data = np.ones_like(A.data, dtype=np.int8)
    return A


def component_labels(graph: "FactorGraph") -> Tuple[int, np.ndarray]:
    """
    Connected components of the variable graph via scipy.

    Returns:
        (k, labels) with labels in [0, k), one per variable
    """
    n = graph.num_variables
    if n == 0:
        return 0, np.zeros(0, dtype=np.int64)
    k, labels = connected_components(adjacency_matrix(graph), directed=False)
    return int(k), labels.astype(np.int64)
