"""
fgraph/graph.py

Factor graph: variables, factors, shared data sources, and topology.

A factor graph consists of:
- Variable cardinalities (one per variable index 0..n-1)
- Factors over ordered scopes, evaluated in insertion order
- Data sources shared between factors

Topology (edge count, cycle flag, connectivity) is derived by
connect_components() with a union-find pass over factor scopes. Each factor
links its first scope variable (the anchor) to every other scope variable; a
union that finds both ends already joined marks a cycle.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from fgraph.errors import DimensionMismatch, IndexOutOfRange, StaleTopology
from fgraph.factors.factor import Factor, FactorDataSource, as_state_array
from fgraph.features import FeatureClass, FeatureType
from fgraph.observation import FactorGraphObservation
from fgraph.topology.disjoint_set import DisjointSet

logger = logging.getLogger(__name__)


class FactorGraph:
    """
    A structured input over discrete variables.

    Attributes:
        cardinalities: Number of states of each variable
        factors: Factors in insertion order
        data_sources: Data sources kept alive by this graph
    """

    def __init__(self, cardinalities: Sequence[int] = ()):
        self.cardinalities = np.zeros(0, dtype=np.int64)
        self.factors: List[Factor] = []
        self.data_sources: List[FactorDataSource] = []
        self._dset: Optional[DisjointSet] = None
        self._num_edges = 0
        self._has_cycle = False
        self.set_cardinalities(cardinalities)

    def add_factor(self, factor: Factor) -> None:
        self.factors.append(factor)

    def add_data_source(self, datasource: FactorDataSource) -> None:
        self.data_sources.append(datasource)

    def get_factors(self) -> List[Factor]:
        return self.factors

    def get_factor_data_sources(self) -> List[FactorDataSource]:
        return self.data_sources

    def get_cardinalities(self) -> np.ndarray:
        return self.cardinalities

    def set_cardinalities(self, cards: Sequence[int]) -> None:
        """Replace the variable domains. Drops any derived topology."""
        c = np.asarray(cards, dtype=np.int64).reshape(-1)
        if np.any(c < 1):
            raise ValueError(f"cardinalities must be >= 1, got {c.tolist()}")
        self.cardinalities = c.copy()

        if self._dset is not None:
            logger.warning("cardinalities changed; topology must be rebuilt with connect_components()")
        self._dset = None
        self._num_edges = 0
        self._has_cycle = False

    @property
    def num_variables(self) -> int:
        return int(self.cardinalities.size)

    def _check_scope(self, fi: int, factor: Factor) -> None:
        n = self.num_variables
        for v in factor.get_scope():
            if v < 0 or v >= n:
                raise IndexOutOfRange(
                    f"factor {fi}: variable {v} out of range [0, {n})"
                )

    def connect_components(self) -> None:
        """
        Rebuild the disjoint set, edge count and cycle flag from scratch.

        Raises:
            IndexOutOfRange: If a factor references a variable >= n
        """
        dset = DisjointSet(self.num_variables)
        num_edges = 0
        has_cycle = False

        for fi, factor in enumerate(self.factors):
            self._check_scope(fi, factor)
            scope = factor.get_scope()
            if len(scope) < 2:
                continue
            anchor = scope[0]
            for v in scope[1:]:
                if dset.union_set(anchor, v):
                    has_cycle = True
                else:
                    num_edges += 1

        dset.set_connected(dset.get_num_sets() <= 1)

        self._dset = dset
        self._num_edges = num_edges
        self._has_cycle = has_cycle
        logger.debug(
            "connected %d variables over %d factors: edges=%d cycle=%s connected=%s",
            self.num_variables, len(self.factors), num_edges, has_cycle, dset.get_connected(),
        )

    def _require_topology(self) -> DisjointSet:
        if self._dset is None:
            raise StaleTopology("topology not built; call connect_components() first")
        return self._dset

    def get_disjoint_set(self) -> Optional[DisjointSet]:
        return self._dset

    def get_num_edges(self) -> int:
        self._require_topology()
        return self._num_edges

    def is_acyclic_graph(self) -> bool:
        self._require_topology()
        return not self._has_cycle

    def is_connected_graph(self) -> bool:
        return self._require_topology().get_connected()

    def is_tree_graph(self) -> bool:
        return self.is_acyclic_graph() and self.is_connected_graph()

    def compute_energies(self) -> None:
        """Let every factor materialize its energy table from its data."""
        for factor in self.factors:
            factor.compute_energies()
        logger.debug("computed energies for %d factors", len(self.factors))

    def _check_state(self, state: np.ndarray) -> None:
        if state.size != self.num_variables:
            raise DimensionMismatch(
                f"assignment has {state.size} values, graph has {self.num_variables} variables"
            )
        bad = np.flatnonzero((state < 0) | (state >= self.cardinalities))
        if bad.size:
            i = int(bad[0])
            raise IndexOutOfRange(
                f"assignment[{i}] = {int(state[i])} out of range [0, {int(self.cardinalities[i])})"
            )

    def _check_factor_table(self, fi: int, factor: Factor) -> None:
        self._check_scope(fi, factor)
        expected = self.cardinalities[list(factor.get_scope())]
        if not np.array_equal(factor.get_cardinalities(), expected):
            raise DimensionMismatch(
                f"factor {fi}: cardinalities {factor.get_cardinalities().tolist()} "
                f"disagree with graph cardinalities {expected.tolist()} on scope {factor.get_scope()}"
            )
        size = int(np.prod(expected, dtype=np.int64))
        if factor.get_energies().size != size:
            raise DimensionMismatch(
                f"factor {fi}: energy table has {factor.get_energies().size} entries, expected {size}"
            )

    def evaluate_energy(self, state: Union[Sequence[int], FactorGraphObservation]) -> float:
        """
        Total energy of a full assignment.

        Args:
            state: One state per variable, or an observation carrying one

        Returns:
            Sum of factor energies, accumulated in factor insertion order
        """
        if isinstance(state, FactorGraphObservation):
            state = state.get_assignment()
        s = as_state_array(state)
        self._check_state(s)

        energy = 0.0
        for fi, factor in enumerate(self.factors):
            self._check_factor_table(fi, factor)
            energy += factor.evaluate_energy(s[list(factor.get_scope())])
        return energy

    def duplicate(self) -> "FactorGraph":
        """
        Copy with cloned factors and shared data sources.

        Topology is not copied; call connect_components() on the result.
        """
        fg = FactorGraph(self.cardinalities)
        for factor in self.factors:
            fg.add_factor(factor.clone())
        for ds in self.data_sources:
            fg.add_data_source(ds)
        return fg

    def get_num_vectors(self) -> int:
        """Number of factors."""
        return len(self.factors)

    def get_feature_type(self) -> FeatureType:
        return FeatureType.ANY

    def get_feature_class(self) -> FeatureClass:
        return FeatureClass.ANY

    def __repr__(self) -> str:
        return f"FactorGraph(vars={self.num_variables}, factors={len(self.factors)})"
