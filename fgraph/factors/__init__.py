"""
Factors module: factor types, factors, and shared factor data sources.
"""

from fgraph.factors.factor_type import TableFactorType
from fgraph.factors.factor import Factor, FactorDataSource

__all__ = [
    "TableFactorType",
    "Factor",
    "FactorDataSource",
]
