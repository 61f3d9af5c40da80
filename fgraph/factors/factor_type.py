"""
fgraph/factors/factor_type.py

Factor types: the parameterization shared by all factors of one kind.

A table factor type maps the data of a factor to a dense energy table over the
joint states of its scope:
- without data, the weights are the table itself
- with a data vector x of dimension d, the weights form a
  (num_assignments, d) matrix W and energies = W @ x
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from fgraph.errors import DimensionMismatch


class TableFactorType:
    """
    Dense table parameterization.

    Attributes:
        type_id: Identifier shared by factors of this kind
        cardinalities: Cardinality of each scope position
        weights: Flat parameter vector (may be empty until set)
    """

    def __init__(
        self,
        type_id: str,
        cardinalities: Sequence[int],
        weights: Optional[Sequence[float]] = None,
    ):
        cards = np.asarray(cardinalities, dtype=np.int64).reshape(-1)
        if np.any(cards < 1):
            raise ValueError(f"factor type {type_id}: cardinalities must be >= 1, got {cards.tolist()}")
        self.type_id = type_id
        self.cardinalities = cards
        self.weights = np.zeros(0, dtype=np.float64)
        if weights is not None:
            self.set_weights(weights)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(int(c) for c in self.cardinalities)

    @property
    def num_assignments(self) -> int:
        return int(np.prod(self.cardinalities, dtype=np.int64))

    def get_num_params(self) -> int:
        return int(self.weights.size)

    def set_weights(self, weights: Sequence[float]) -> None:
        w = np.asarray(weights, dtype=np.float64).reshape(-1)
        if w.size % self.num_assignments != 0:
            raise DimensionMismatch(
                f"factor type {self.type_id}: {w.size} weights is not a multiple "
                f"of {self.num_assignments} assignments"
            )
        self.weights = w.copy()

    def compute_energies(self, data: Optional[np.ndarray]) -> np.ndarray:
        """
        Materialize a fresh energy table.

        Args:
            data: Dense data vector, or None for a data-independent table

        Returns:
            Flat float64 array of length num_assignments
        """
        if data is None:
            if self.weights.size != self.num_assignments:
                raise DimensionMismatch(
                    f"factor type {self.type_id}: data-independent table needs "
                    f"{self.num_assignments} weights, has {self.weights.size}"
                )
            return self.weights.copy()

        x = np.asarray(data, dtype=np.float64).reshape(-1)
        if self.weights.size != self.num_assignments * x.size:
            raise DimensionMismatch(
                f"factor type {self.type_id}: {self.weights.size} weights cannot "
                f"score {x.size}-dimensional data over {self.num_assignments} assignments"
            )
        W = self.weights.reshape(self.num_assignments, x.size)
        return W @ x

    def __repr__(self) -> str:
        return f"TableFactorType(id={self.type_id!r}, cards={self.cardinalities.tolist()})"
