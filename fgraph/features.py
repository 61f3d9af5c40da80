"""
fgraph/features.py

Generic feature-container adapter.

Dataset machinery that enumerates samples uniformly (dense vectors, strings,
factor graphs, ...) only needs a sample count and a type/class tag. Factor
graphs are not fixed-shape vectors, so both tags are the ANY wildcard.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from fgraph.errors import IndexOutOfRange

if TYPE_CHECKING:
    from fgraph.graph import FactorGraph


class FeatureType(Enum):
    """Element type of a feature container."""
    ANY = 0


class FeatureClass(Enum):
    """Storage class of a feature container."""
    ANY = 0


class FactorGraphFeatures:
    """A dataset of factor graphs, one per sample."""

    def __init__(self, graphs: Sequence["FactorGraph"] = ()):
        self.samples: List["FactorGraph"] = list(graphs)

    def add_sample(self, graph: "FactorGraph") -> None:
        self.samples.append(graph)

    def get_sample(self, idx: int) -> "FactorGraph":
        if idx < 0 or idx >= len(self.samples):
            raise IndexOutOfRange(f"sample {idx} out of range [0, {len(self.samples)})")
        return self.samples[idx]

    def get_num_vectors(self) -> int:
        return len(self.samples)

    def get_feature_type(self) -> FeatureType:
        return FeatureType.ANY

    def get_feature_class(self) -> FeatureClass:
        return FeatureClass.ANY

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)
