"""
fgraph/topology/disjoint_set.py

Union-find over a fixed number of integer elements.

One element per variable of a factor graph. Supports:
- find_set with full path compression
- link_set / union_set with union by rank
- contiguous relabeling of the resulting partition

The "connected" flag is a memo written by the owner after it has performed
every union it cares about. It is never derived here.
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from fgraph.errors import DimensionMismatch, IndexOutOfRange, InvalidSize


class DisjointSet:
    """
    Disjoint-set forest over elements 0..n-1.

    Attributes:
        parent: Parent pointer per element (roots point at themselves)
        rank: Upper bound on the height of the tree under each root
    """

    def __init__(self, num_elements: int = 0):
        self._num_elements = 0
        self.parent = np.zeros(0, dtype=np.int64)
        self.rank = np.zeros(0, dtype=np.int64)
        self._is_connected = False
        self.make_sets(num_elements)

    @property
    def num_elements(self) -> int:
        return self._num_elements

    def __len__(self) -> int:
        return self._num_elements

    def make_sets(self, num_elements: Optional[int] = None) -> None:
        """
        Reset to n singleton sets.

        Args:
            num_elements: New element count; keeps the current count if None

        Raises:
            InvalidSize: If num_elements is negative
        """
        if num_elements is None:
            num_elements = self._num_elements
        num_elements = int(num_elements)
        if num_elements < 0:
            raise InvalidSize(f"disjoint set size must be >= 0, got {num_elements}")

        self._num_elements = num_elements
        self.parent = np.arange(num_elements, dtype=np.int64)
        self.rank = np.zeros(num_elements, dtype=np.int64)
        self._is_connected = False

    def _check(self, x: int) -> int:
        xi = int(x)
        if xi != x:
            raise IndexOutOfRange(f"element {x!r} is not an integer")
        x = xi
        if x < 0 or x >= self._num_elements:
            raise IndexOutOfRange(
                f"element {x} out of range [0, {self._num_elements})"
            )
        return x

    def find_set(self, x: int) -> int:
        """
        Find the root of x's set, re-pointing every visited node at the root.

        Raises:
            IndexOutOfRange: If x is outside [0, n)
        """
        x = self._check(x)
        parent = self.parent

        root = x
        while parent[root] != root:
            root = parent[root]

        # Second pass: path compression
        while parent[x] != root:
            nxt = parent[x]
            parent[x] = root
            x = nxt

        return int(root)

    def link_set(self, xroot: int, yroot: int) -> int:
        """
        Link two roots by rank and return the new root.

        Both arguments must already be roots; this is not checked.
        On equal rank xroot wins and its rank grows by one.
        """
        if self.rank[xroot] < self.rank[yroot]:
            self.parent[xroot] = yroot
            return int(yroot)

        self.parent[yroot] = xroot
        if self.rank[xroot] == self.rank[yroot]:
            self.rank[xroot] += 1
        return int(xroot)

    def union_set(self, x: int, y: int) -> bool:
        """
        Merge the sets containing x and y.

        Returns:
            True if x and y were already in the same set (nothing changed),
            False if two sets were linked
        """
        xroot = self.find_set(x)
        yroot = self.find_set(y)

        if xroot == yroot:
            return True

        self.link_set(xroot, yroot)
        return False

    def is_same_set(self, x: int, y: int) -> bool:
        return self.find_set(x) == self.find_set(y)

    def get_unique_labeling(self, out_labels: np.ndarray) -> int:
        """
        Label every element with its set index.

        Labels lie in [0, k) and are handed out in order of the first element
        whose root has not been seen yet.

        Args:
            out_labels: Integer array of length n, written in place

        Returns:
            k, the number of distinct sets

        Raises:
            DimensionMismatch: If out_labels does not have length n
        """
        if len(out_labels) != self._num_elements:
            raise DimensionMismatch(
                f"label buffer has length {len(out_labels)}, expected {self._num_elements}"
            )

        root_label: Dict[int, int] = {}
        for i in range(self._num_elements):
            r = self.find_set(i)
            if r not in root_label:
                root_label[r] = len(root_label)
            out_labels[i] = root_label[r]

        return len(root_label)

    def get_num_sets(self) -> int:
        """Number of disjoint sets."""
        labels = np.empty(self._num_elements, dtype=np.int64)
        return self.get_unique_labeling(labels)

    def get_connected(self) -> bool:
        return self._is_connected

    def set_connected(self, is_connected: bool) -> None:
        self._is_connected = bool(is_connected)

    def __repr__(self) -> str:
        return f"DisjointSet(elements={self._num_elements}, connected={self._is_connected})"
