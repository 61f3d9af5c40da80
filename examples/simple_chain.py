"""
Example: Simple chain factor graph.

0--1--2 with Potts pairwise factors and a unary bias on 0.
"""

import itertools

import numpy as np
from fgraph import Factor, FactorGraph, TableFactorType


def main():
    # Define variable domains
    graph = FactorGraph([2, 2, 2])

    # Unary on 0
    bias = TableFactorType("bias", [2], weights=[0.0, 0.7])

    # Pairwise: penalize disagreement
    potts = TableFactorType("potts", [2, 2], weights=[0.0, 1.0, 1.0, 0.0])

    graph.add_factor(Factor(bias, [0]))
    graph.add_factor(Factor(potts, [0, 1]))
    graph.add_factor(Factor(potts, [1, 2]))

    graph.connect_components()
    print(f"Edges: {graph.get_num_edges()}, tree: {graph.is_tree_graph()}")

    # Enumerate all assignments
    print("\nEnergies:")
    for state in itertools.product(range(2), repeat=3):
        print(f"  E{state} = {graph.evaluate_energy(state):.2f}")

    best = min(itertools.product(range(2), repeat=3), key=graph.evaluate_energy)
    print(f"\nMinimum energy assignment: {best}")
    print(f"Match: {np.isclose(graph.evaluate_energy(best), 0.0)}")


if __name__ == "__main__":
    main()
