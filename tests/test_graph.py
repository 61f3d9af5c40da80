"""
Tests for FactorGraph topology, energies and duplication.
"""

import numpy as np
import pytest

from fgraph import (
    DimensionMismatch,
    Factor,
    FactorDataSource,
    FactorGraph,
    FactorGraphObservation,
    FeatureClass,
    FeatureType,
    IndexOutOfRange,
    StaleTopology,
    TableFactorType,
)


def pair_factor(scope, cards=(2, 2), energies=None):
    return Factor(TableFactorType("pair", cards), scope, energies=energies)


class TestTopology:
    @pytest.mark.parametrize("n", [0, 1, 3])
    def test_empty_graph(self, n):
        fg = FactorGraph([2] * n)
        fg.connect_components()

        assert fg.get_num_edges() == 0
        assert fg.is_acyclic_graph()
        assert fg.is_connected_graph() == (n <= 1)

    def test_chain_is_tree(self):
        fg = FactorGraph([2, 2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.add_factor(pair_factor([1, 2]))
        fg.connect_components()

        assert fg.get_num_edges() == 2
        assert fg.is_acyclic_graph()
        assert fg.is_connected_graph()
        assert fg.is_tree_graph()

    def test_cycle_detection(self):
        fg = FactorGraph([2, 2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.add_factor(pair_factor([1, 2]))
        fg.add_factor(pair_factor([0, 2]))
        fg.connect_components()

        assert fg.get_num_edges() == 2
        assert not fg.is_acyclic_graph()
        assert fg.is_connected_graph()
        assert not fg.is_tree_graph()

    def test_parallel_factors_close_a_cycle(self):
        fg = FactorGraph([2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.add_factor(pair_factor([1, 0]))
        fg.connect_components()

        assert fg.get_num_edges() == 1
        assert not fg.is_acyclic_graph()

    def test_higher_order_scope_uses_anchor_edges(self):
        fg = FactorGraph([2, 2, 2])
        fg.add_factor(Factor(TableFactorType("triple", [2, 2, 2]), [0, 1, 2]))
        fg.connect_components()

        assert fg.get_num_edges() == 2
        assert fg.is_tree_graph()

        fg.add_factor(pair_factor([1, 2]))
        fg.connect_components()
        assert fg.get_num_edges() == 2
        assert not fg.is_acyclic_graph()

    def test_unary_factors_add_no_edges(self):
        fg = FactorGraph([2, 3])
        fg.add_factor(Factor(TableFactorType("u2", [2]), [0]))
        fg.add_factor(Factor(TableFactorType("u3", [3]), [1]))
        fg.connect_components()

        assert fg.get_num_edges() == 0
        assert fg.is_acyclic_graph()
        assert not fg.is_connected_graph()

    def test_forest(self):
        fg = FactorGraph([2] * 5)
        fg.add_factor(pair_factor([0, 1]))
        fg.add_factor(pair_factor([3, 4]))
        fg.connect_components()

        labels = np.empty(5, dtype=np.int64)
        assert fg.get_disjoint_set().get_unique_labeling(labels) == 3
        assert labels.tolist() == [0, 0, 1, 2, 2]
        assert fg.is_acyclic_graph()
        assert not fg.is_tree_graph()

    def test_stale_before_connect(self):
        fg = FactorGraph([2, 2])

        assert fg.get_disjoint_set() is None
        with pytest.raises(StaleTopology):
            fg.get_num_edges()
        with pytest.raises(StaleTopology):
            fg.is_acyclic_graph()
        with pytest.raises(StaleTopology):
            fg.is_connected_graph()
        with pytest.raises(StaleTopology):
            fg.is_tree_graph()

    def test_set_cardinalities_invalidates(self):
        fg = FactorGraph([2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.connect_components()
        assert fg.is_tree_graph()

        fg.set_cardinalities([2, 2, 2])
        assert fg.get_disjoint_set() is None
        with pytest.raises(StaleTopology):
            fg.is_tree_graph()

        fg.connect_components()
        assert len(fg.get_disjoint_set()) == 3
        assert not fg.is_connected_graph()

    def test_add_factor_does_not_invalidate(self):
        fg = FactorGraph([2, 2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.connect_components()

        fg.add_factor(pair_factor([1, 2]))
        assert fg.get_num_edges() == 1

        fg.connect_components()
        assert fg.get_num_edges() == 2

    def test_scope_out_of_range(self):
        fg = FactorGraph([2, 2])
        fg.add_factor(pair_factor([0, 2]))

        with pytest.raises(IndexOutOfRange):
            fg.connect_components()

    def test_invalid_cardinalities(self):
        with pytest.raises(ValueError):
            FactorGraph([2, 0])


class TestEnergy:
    @pytest.fixture
    def xor_graph(self):
        fg = FactorGraph([2, 2])
        fg.add_factor(pair_factor([0, 1], energies=[0, 1, 1, 0]))
        return fg

    def test_single_factor(self, xor_graph):
        assert xor_graph.evaluate_energy([0, 1]) == 1.0
        assert xor_graph.evaluate_energy([1, 1]) == 0.0

    def test_sum_over_factors(self, xor_graph):
        xor_graph.add_factor(Factor(TableFactorType("unary", [2]), [0], energies=[0.5, 2.0]))

        assert xor_graph.evaluate_energy([1, 1]) == 2.0
        assert xor_graph.evaluate_energy([0, 1]) == 1.5

    def test_scope_order_is_table_order(self):
        fg = FactorGraph([2, 3])
        fg.add_factor(Factor(TableFactorType("rev", [3, 2]), [1, 0], energies=np.arange(6.0)))

        # partial state (x1, x0) = (2, 1) -> index 2 * 2 + 1
        assert fg.evaluate_energy([1, 2]) == 5.0

    def test_observation_overload(self, xor_graph):
        obs = FactorGraphObservation([1, 0])

        assert xor_graph.evaluate_energy(obs) == xor_graph.evaluate_energy([1, 0]) == 1.0

    def test_assignment_length(self, xor_graph):
        with pytest.raises(DimensionMismatch):
            xor_graph.evaluate_energy([0])
        with pytest.raises(DimensionMismatch):
            xor_graph.evaluate_energy(FactorGraphObservation([0, 1, 1]))

    def test_assignment_bounds(self, xor_graph):
        with pytest.raises(IndexOutOfRange):
            xor_graph.evaluate_energy([0, 2])
        with pytest.raises(IndexOutOfRange):
            xor_graph.evaluate_energy([-1, 0])

    def test_non_integral_assignment(self, xor_graph):
        with pytest.raises(IndexOutOfRange):
            xor_graph.evaluate_energy([0.9, 1])
        with pytest.raises(IndexOutOfRange):
            xor_graph.evaluate_energy(np.array([0.0, 1.5]))

        assert xor_graph.evaluate_energy(np.array([0.0, 1.0])) == 1.0

    def test_factor_cardinalities_must_match_graph(self):
        fg = FactorGraph([2, 3])
        fg.add_factor(pair_factor([0, 1]))

        with pytest.raises(DimensionMismatch):
            fg.evaluate_energy([0, 0])

    def test_factor_scope_checked_lazily(self):
        fg = FactorGraph([2, 2])
        fg.add_factor(pair_factor([1, 5]))

        with pytest.raises(IndexOutOfRange):
            fg.evaluate_energy([0, 0])

    def test_compute_energies(self):
        fg = FactorGraph([2, 2, 2])
        ft = TableFactorType("pair", [2, 2], weights=np.arange(8.0))
        ds = FactorDataSource([1.0, 0.0])
        fg.add_data_source(ds)
        fg.add_factor(Factor(ft, [0, 1], data_source=ds))
        fg.add_factor(Factor(ft, [1, 2], data_source=ds))
        fg.add_factor(Factor(TableFactorType("fixed", [2]), [2], energies=[1.0, -1.0]))

        fg.compute_energies()

        assert fg.get_factors()[0].get_energies().tolist() == [0, 2, 4, 6]
        assert fg.get_factors()[2].get_energies().tolist() == [1.0, -1.0]
        # (0,1) -> 2, (1,1) -> 6, x2=1 -> -1
        assert fg.evaluate_energy([0, 1, 1]) == 7.0


class TestDuplicate:
    @pytest.fixture
    def graph(self):
        fg = FactorGraph([2, 2])
        ds = FactorDataSource([1.0])
        fg.add_data_source(ds)
        fg.add_factor(Factor(TableFactorType("pair", [2, 2]), [0, 1], data_source=ds, energies=[0, 1, 1, 0]))
        fg.connect_components()
        return fg

    def test_independent_tables(self, graph):
        copy = graph.duplicate()
        graph.get_factors()[0].set_energy(0, 10.0)

        assert copy.get_factors()[0].get_energy(0) == 0.0
        assert copy.get_factors()[0] is not graph.get_factors()[0]

    def test_shared_data_sources(self, graph):
        copy = graph.duplicate()

        assert copy.get_factor_data_sources()[0] is graph.get_factor_data_sources()[0]
        assert copy.get_factors()[0].get_data_source() is graph.get_factors()[0].get_data_source()

    def test_topology_not_copied(self, graph):
        copy = graph.duplicate()

        assert copy.get_disjoint_set() is None
        with pytest.raises(StaleTopology):
            copy.is_tree_graph()
        copy.connect_components()
        assert copy.is_tree_graph()

    def test_cardinalities_copied(self, graph):
        copy = graph.duplicate()
        graph.get_cardinalities()[0] = 5

        assert copy.get_cardinalities().tolist() == [2, 2]


class TestContainerContract:
    def test_num_vectors_counts_factors(self):
        fg = FactorGraph([2, 2, 2])
        fg.add_factor(pair_factor([0, 1]))
        fg.add_factor(pair_factor([1, 2]))

        assert fg.get_num_vectors() == 2

    def test_feature_tags(self):
        fg = FactorGraph()

        assert fg.get_feature_type() is FeatureType.ANY
        assert fg.get_feature_class() is FeatureClass.ANY
