"""
fgraph: Factor Graphs for structured prediction

Discrete factor graphs with union-find topology analysis and structured
energy evaluation, the input side of structured-prediction inference and
learning.

Key components:
- topology: Disjoint-set substrate and graph views (networkx, scipy)
- factors: Factor types, factors, and shared data sources
- graph: FactorGraph orchestration (topology, energies, duplication)
- observation: Observed full assignments
- features: Generic feature-container adapter
- io: Versioned JSON encoding
"""

__version__ = "1.0.0"
__author__ = "fgraph Team"

from fgraph.errors import (
    FactorGraphError,
    IndexOutOfRange,
    DimensionMismatch,
    InvalidSize,
    StaleTopology,
    CodecError,
)
from fgraph.topology.disjoint_set import DisjointSet
from fgraph.factors.factor_type import TableFactorType
from fgraph.factors.factor import Factor, FactorDataSource
from fgraph.observation import FactorGraphObservation, FactorGraphLabels
from fgraph.features import FeatureType, FeatureClass, FactorGraphFeatures
from fgraph.graph import FactorGraph

__all__ = [
    # Errors
    "FactorGraphError",
    "IndexOutOfRange",
    "DimensionMismatch",
    "InvalidSize",
    "StaleTopology",
    "CodecError",
    # Topology
    "DisjointSet",
    # Factors
    "TableFactorType",
    "Factor",
    "FactorDataSource",
    # Observations
    "FactorGraphObservation",
    "FactorGraphLabels",
    # Containers
    "FeatureType",
    "FeatureClass",
    "FactorGraphFeatures",
    "FactorGraph",
]
