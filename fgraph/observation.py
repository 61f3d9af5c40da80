"""
fgraph/observation.py

Observed full assignments of a factor graph.

An observation is the label-side counterpart of a FactorGraph: one state per
variable, plus optional per-variable loss weights used by learners.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from fgraph.errors import DimensionMismatch, IndexOutOfRange
from fgraph.factors.factor import as_state_array


class FactorGraphObservation:
    """
    A fully observed assignment.

    Attributes:
        assignment: One state per variable
        loss_weights: Per-variable weights, ones by default
    """

    def __init__(self, assignment: Sequence[int], loss_weights: Optional[Sequence[float]] = None):
        self.assignment = as_state_array(assignment)
        if loss_weights is None:
            self.loss_weights = np.ones(self.assignment.size, dtype=np.float64)
        else:
            self.set_loss_weights(loss_weights)

    def get_assignment(self) -> np.ndarray:
        return self.assignment

    def get_loss_weights(self) -> np.ndarray:
        return self.loss_weights

    def set_loss_weights(self, loss_weights: Sequence[float]) -> None:
        w = np.asarray(loss_weights, dtype=np.float64).reshape(-1)
        if w.size != self.assignment.size:
            raise DimensionMismatch(
                f"{w.size} loss weights for an assignment of {self.assignment.size} variables"
            )
        self.loss_weights = w

    def __len__(self) -> int:
        return int(self.assignment.size)

    def __repr__(self) -> str:
        return f"FactorGraphObservation({self.assignment.tolist()})"


class FactorGraphLabels:
    """Ordered collection of observations, one per factor graph sample."""

    def __init__(self, observations: Sequence[FactorGraphObservation] = ()):
        self.observations: List[FactorGraphObservation] = list(observations)

    def add_label(self, obs: FactorGraphObservation) -> None:
        self.observations.append(obs)

    def get_label(self, idx: int) -> FactorGraphObservation:
        if idx < 0 or idx >= len(self.observations):
            raise IndexOutOfRange(f"label {idx} out of range [0, {len(self.observations)})")
        return self.observations[idx]

    def get_num_labels(self) -> int:
        return len(self.observations)

    def __len__(self) -> int:
        return len(self.observations)
