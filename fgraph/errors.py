"""
fgraph/errors.py

Error kinds raised by the factor graph core.

All errors are deterministic and data-dependent; nothing here is retried.
"""

from __future__ import annotations


class FactorGraphError(Exception):
    """Base class for all factor graph errors."""


class IndexOutOfRange(FactorGraphError, IndexError):
    """A variable, element or assignment component is outside its valid bounds."""


class DimensionMismatch(FactorGraphError, ValueError):
    """A vector or table length disagrees with the graph it is used against."""


class InvalidSize(FactorGraphError, ValueError):
    """A negative element count was requested."""


class StaleTopology(FactorGraphError, RuntimeError):
    """Topology was queried before connect_components ran on the current graph."""


class CodecError(FactorGraphError, ValueError):
    """A serialized factor graph could not be encoded or decoded."""
