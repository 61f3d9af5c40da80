"""
Topology module: union-find substrate and graph views of factor graphs.
"""

from fgraph.topology.disjoint_set import DisjointSet
from fgraph.topology.structure import (
    anchor_edges,
    interaction_graph,
    adjacency_matrix,
    component_labels,
)

__all__ = [
    "DisjointSet",
    "anchor_edges",
    "interaction_graph",
    "adjacency_matrix",
    "component_labels",
]
