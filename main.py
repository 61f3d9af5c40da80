#!/usr/bin/env python3
"""
fgraph: Factor Graphs for structured prediction

Topology analysis and energy evaluation of discrete factor graphs.

Usage:
    # Analyze the topology of a graph stored as JSON
    python main.py analyze --input graph.json

    # Total energy of a full assignment
    python main.py energy --input graph.json --state 0,1,1

    # Run demos
    python main.py demo --example cycle

    # Run tests
    python main.py test

License: GPL-3.0
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Handle imports whether running as package or directly
try:
    from fgraph import (
        Factor,
        FactorDataSource,
        FactorGraph,
        FactorGraphError,
        TableFactorType,
        __version__,
    )
    from fgraph.io import load_graph
    from fgraph.topology import component_labels
except ImportError:
    sys.path.insert(0, str(Path(__file__).parent))
    from fgraph import (
        Factor,
        FactorDataSource,
        FactorGraph,
        FactorGraphError,
        TableFactorType,
        __version__,
    )
    from fgraph.io import load_graph
    from fgraph.topology import component_labels


def parse_state_string(state_str: str) -> np.ndarray:
    """Parse an assignment: '0,1,1'"""
    return np.array([int(s.strip()) for s in state_str.split(',') if s.strip()], dtype=np.int64)


def print_topology(graph: FactorGraph) -> None:
    graph.connect_components()
    labels = np.empty(graph.num_variables, dtype=np.int64)
    k = graph.get_disjoint_set().get_unique_labeling(labels)

    print(f"\nTopology:")
    print(f"  Edges: {graph.get_num_edges()}")
    print(f"  Components: {k}")
    print(f"  Acyclic: {graph.is_acyclic_graph()}")
    print(f"  Connected: {graph.is_connected_graph()}")
    print(f"  Tree: {graph.is_tree_graph()}")
    if k > 1:
        for c in range(k):
            members = np.flatnonzero(labels == c).tolist()
            print(f"    component {c}: {members}")


def cmd_analyze(args):
    """Execute the analyze command."""
    print(f"Loading graph from: {args.input}")
    try:
        graph = load_graph(args.input)
    except (OSError, FactorGraphError) as e:
        print(f"Error: {e}")
        return 1

    print(f"\nGraph specification:")
    print(f"  Variables: {graph.num_variables}")
    print(f"    cardinalities {graph.get_cardinalities().tolist()}")
    print(f"  Factors: {graph.get_num_vectors()}")
    for fi, factor in enumerate(graph.get_factors()):
        print(f"    {fi}: type {factor.factor_type.type_id}, scope {factor.get_scope()}")
    print(f"  Data sources: {len(graph.get_factor_data_sources())}")

    try:
        print_topology(graph)
        k_check, _ = component_labels(graph)
    except FactorGraphError as e:
        print(f"Error: {e}")
        return 1

    if k_check != graph.get_disjoint_set().get_num_sets():
        print("  Warning: component count disagrees with sparse graph check")
        return 1
    return 0


def cmd_energy(args):
    """Execute the energy command."""
    try:
        graph = load_graph(args.input)
        if args.compute:
            graph.compute_energies()
        state = parse_state_string(args.state)
        energy = graph.evaluate_energy(state)
    except (OSError, ValueError, FactorGraphError) as e:
        print(f"Error: {e}")
        return 1

    print(f"E({state.tolist()}) = {energy:.10g}")
    return 0


def demo_chain():
    """Demo: Chain 0 -- 1 -- 2 (a tree)"""
    print("=" * 60)
    print("Demo: Chain 0 -- 1 -- 2")
    print("=" * 60)

    graph = FactorGraph([2, 2, 2])
    potts = TableFactorType("potts", [2, 2], weights=[0.0, 1.0, 1.0, 0.0])
    graph.add_factor(Factor(potts, [0, 1]))
    graph.add_factor(Factor(potts, [1, 2]))

    print_topology(graph)

    energies = {}
    for a in range(2):
        for b in range(2):
            for c in range(2):
                energies[(a, b, c)] = graph.evaluate_energy([a, b, c])
    best = min(energies, key=energies.get)
    print(f"\nMinimum energy assignment (brute force): {list(best)}, E = {energies[best]:.4f}")

    return graph.is_tree_graph() and energies[best] == 0.0


def demo_cycle():
    """Demo: Triangle with a shared data source"""
    print("=" * 60)
    print("Demo: Triangle 0 -- 1 -- 2 -- 0")
    print("=" * 60)

    graph = FactorGraph([2, 2, 2])

    # Energies = W @ x, one row per joint state
    pair = TableFactorType("pair", [2, 2], weights=np.arange(8, dtype=np.float64) / 8.0)
    shared = FactorDataSource([1.0, -1.0])
    graph.add_data_source(shared)
    for scope in ([0, 1], [1, 2], [0, 2]):
        graph.add_factor(Factor(pair, scope, data_source=shared))

    graph.compute_energies()
    print_topology(graph)

    print("\nEnergies per factor:")
    for fi, factor in enumerate(graph.get_factors()):
        print(f"  {fi} {factor.get_scope()}: {factor.get_energies().tolist()}")

    E = graph.evaluate_energy([0, 1, 0])
    print(f"\nE([0, 1, 0]) = {E:.4f}")

    return (not graph.is_acyclic_graph()) and graph.get_num_edges() == 2


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_chain,
        "cycle": demo_cycle,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
                results.append((name, passed))
            except FactorGraphError as e:
                print(f"Error in {name}: {e}")
                results.append((name, False))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        all_passed = True
        for name, passed in results:
            status = "PASS" if passed else "FAIL"
            print(f"  {name}: {status}")
            if not passed:
                all_passed = False

        return 0 if all_passed else 1

    elif args.example in demos:
        try:
            passed = demos[args.example]()
            return 0 if passed else 1
        except FactorGraphError as e:
            print(f"Error: {e}")
            return 1
    else:
        print(f"Unknown example: {args.example}")
        print(f"Available: {', '.join(demos.keys())}, all")
        return 1


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=fgraph", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    import networkx
    import scipy

    print(f"fgraph v{__version__}")
    print(f"Factor graphs with union-find topology analysis")
    print()
    print("License: GPL-3.0")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)
    print("SciPy:", scipy.__version__)
    print("NetworkX:", networkx.__version__)

    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="fgraph",
        description="fgraph: Factor Graphs for structured prediction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Topology report
  fgraph analyze --input graph.json

  # Energy of an assignment, recomputing tables from data sources first
  fgraph energy --input graph.json --state 0,1,1 --compute

  # Run demos
  fgraph demo --example cycle
  fgraph demo --example all

  # Run tests
  fgraph test -v
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"fgraph {__version__}"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Report the topology of a factor graph")
    analyze_parser.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")

    # Energy command
    energy_parser = subparsers.add_parser("energy", help="Evaluate the energy of an assignment")
    energy_parser.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")
    energy_parser.add_argument("--state", type=str, required=True, help="Assignment: '0,1,1'")
    energy_parser.add_argument(
        "--compute",
        action="store_true",
        help="Recompute energy tables from data before evaluating"
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["chain", "cycle", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "analyze":
        return cmd_analyze(args)
    elif args.command == "energy":
        return cmd_energy(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
