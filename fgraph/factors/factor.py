"""
fgraph/factors/factor.py

Factors and the data sources they share.

A Factor is a local energy function over an ordered scope of variable
indices. Its energy table is flat and row-major over the scope: the last
scope variable changes fastest.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from fgraph.errors import DimensionMismatch, IndexOutOfRange
from fgraph.factors.factor_type import TableFactorType


def as_state_array(values: Sequence[int]) -> np.ndarray:
    """
    Flat int64 copy of an assignment.

    Raises:
        IndexOutOfRange: If any value is not integral (e.g. 0.9)
    """
    raw = np.asarray(values).reshape(-1)
    if raw.dtype.kind in "iub":
        return raw.astype(np.int64)
    try:
        state = raw.astype(np.int64)
    except (TypeError, ValueError, OverflowError) as e:
        raise IndexOutOfRange(f"assignment {raw.tolist()} is not integral") from e
    if not np.array_equal(state, raw):
        raise IndexOutOfRange(f"assignment {raw.tolist()} is not integral")
    return state


class FactorDataSource:
    """
    Data shared by many factors (e.g. one feature vector per image region).

    Identity-bearing: two sources are equal only if they are the same object.
    """

    def __init__(self, data: Optional[Sequence[float]] = None):
        self.data = None if data is None else np.asarray(data, dtype=np.float64).reshape(-1)

    def get_data(self) -> Optional[np.ndarray]:
        return self.data

    def set_data(self, data: Optional[Sequence[float]]) -> None:
        self.data = None if data is None else np.asarray(data, dtype=np.float64).reshape(-1)

    def __repr__(self) -> str:
        dim = None if self.data is None else self.data.size
        return f"FactorDataSource(dim={dim})"


class Factor:
    """
    A factor over an ordered, duplicate-free scope.

    Attributes:
        factor_type: Shared parameterization (cardinalities, weights)
        scope: Variable indices in table order
        data: Factor-owned data vector, used when no data source is set
        data_source: Shared data source, or None
        energies: Flat energy table of length prod(cardinalities)
    """

    def __init__(
        self,
        factor_type: TableFactorType,
        scope: Sequence[int],
        data: Optional[Sequence[float]] = None,
        data_source: Optional[FactorDataSource] = None,
        energies: Optional[Sequence[float]] = None,
    ):
        scope_t = tuple(int(v) for v in scope)
        if len(scope_t) != len(factor_type.cardinalities):
            raise DimensionMismatch(
                f"scope {scope_t} has {len(scope_t)} variables but factor type "
                f"{factor_type.type_id} expects {len(factor_type.cardinalities)}"
            )
        if len(set(scope_t)) != len(scope_t):
            raise ValueError(f"factor scope has duplicates: {scope_t}")
        if any(v < 0 for v in scope_t):
            raise IndexOutOfRange(f"factor scope has negative variable index: {scope_t}")

        self.factor_type = factor_type
        self.scope: Tuple[int, ...] = scope_t
        self.data = None if data is None else np.asarray(data, dtype=np.float64).reshape(-1)
        self.data_source = data_source

        if energies is not None:
            self.set_energies(energies)
        elif not self.is_data_dependent() and factor_type.get_num_params() == factor_type.num_assignments:
            self.energies = factor_type.compute_energies(None)
        else:
            self.energies = np.zeros(factor_type.num_assignments, dtype=np.float64)

    def get_scope(self) -> Tuple[int, ...]:
        return self.scope

    def get_cardinalities(self) -> np.ndarray:
        return self.factor_type.cardinalities

    def get_data_source(self) -> Optional[FactorDataSource]:
        return self.data_source

    def is_data_dependent(self) -> bool:
        return self.data is not None or self.data_source is not None

    def _resolve_data(self) -> Optional[np.ndarray]:
        if self.data_source is not None:
            return self.data_source.get_data()
        return self.data

    def get_energies(self) -> np.ndarray:
        return self.energies

    def set_energies(self, energies: Sequence[float]) -> None:
        e = np.asarray(energies, dtype=np.float64).reshape(-1)
        if e.size != self.factor_type.num_assignments:
            raise DimensionMismatch(
                f"energy table has {e.size} entries, scope {self.scope} needs "
                f"{self.factor_type.num_assignments}"
            )
        self.energies = e.copy()

    def get_energy(self, index: int) -> float:
        if index < 0 or index >= self.energies.size:
            raise IndexOutOfRange(f"joint state {index} out of range [0, {self.energies.size})")
        return float(self.energies[index])

    def set_energy(self, index: int, value: float) -> None:
        if index < 0 or index >= self.energies.size:
            raise IndexOutOfRange(f"joint state {index} out of range [0, {self.energies.size})")
        self.energies[index] = value

    def index_of(self, partial_state: Sequence[int]) -> int:
        """
        Joint state index of an assignment given in scope order.

        Raises:
            DimensionMismatch: If the assignment length differs from the scope
            IndexOutOfRange: If a component exceeds its cardinality
        """
        s = as_state_array(partial_state)
        cards = self.factor_type.cardinalities
        if s.size != cards.size:
            raise DimensionMismatch(
                f"partial assignment has {s.size} values, scope {self.scope} has {cards.size}"
            )
        if np.any(s < 0) or np.any(s >= cards):
            raise IndexOutOfRange(
                f"partial assignment {s.tolist()} out of range for cardinalities {cards.tolist()}"
            )
        if s.size == 0:
            return 0
        return int(np.ravel_multi_index(tuple(s), self.factor_type.shape))

    def evaluate_energy(self, partial_state: Sequence[int]) -> float:
        """Energy of an assignment restricted to this factor's scope, in scope order."""
        return float(self.energies[self.index_of(partial_state)])

    def compute_energies(self) -> None:
        """
        Rebuild the energy table from the referenced data.

        Factors without a data source or own data keep their current table.
        """
        if not self.is_data_dependent():
            return
        data = self._resolve_data()
        if data is None:
            return
        self.energies = self.factor_type.compute_energies(data)

    def clone(self) -> "Factor":
        """Deep copy of the table and own data; type and data source are shared."""
        return Factor(
            self.factor_type,
            self.scope,
            data=None if self.data is None else self.data.copy(),
            data_source=self.data_source,
            energies=self.energies,
        )

    def __repr__(self) -> str:
        return f"Factor(type={self.factor_type.type_id!r}, scope={self.scope})"
