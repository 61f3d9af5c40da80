"""
fgraph/io/codec.py

Explicit, versioned JSON encoding of factor graphs.

Format (version 1):
{
    "format": "fgraph",
    "version": 1,
    "cardinalities": [2, 2, 3],
    "data_sources": [{"data": [0.5, 1.0]}],
    "factor_types": [{"id": "pair", "cardinalities": [2, 2], "weights": [...]}],
    "factors": [
        {"type": 0, "scope": [0, 1], "energies": [...], "data": null, "data_source": 0}
    ]
}

Factor types and data sources are stored once and referenced by index, so
sharing between factors survives a round trip. Topology is not stored.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import numpy as np

from fgraph.errors import CodecError, FactorGraphError
from fgraph.factors.factor import Factor, FactorDataSource
from fgraph.factors.factor_type import TableFactorType
from fgraph.graph import FactorGraph

FORMAT_NAME = "fgraph"
FORMAT_VERSION = 1


def _array_or_none(a: Optional[np.ndarray]) -> Optional[List[float]]:
    return None if a is None else np.asarray(a).tolist()


def encode_graph(graph: FactorGraph) -> Dict[str, Any]:
    """
    Encode a factor graph as a JSON-compatible dict.

    Raises:
        CodecError: If a factor references a data source the graph does not hold
    """
    ds_index = {id(ds): i for i, ds in enumerate(graph.get_factor_data_sources())}

    types: List[TableFactorType] = []
    type_index: Dict[int, int] = {}
    factors = []
    for fi, factor in enumerate(graph.get_factors()):
        ft = factor.factor_type
        if id(ft) not in type_index:
            type_index[id(ft)] = len(types)
            types.append(ft)

        ds = factor.get_data_source()
        if ds is not None and id(ds) not in ds_index:
            raise CodecError(f"factor {fi}: data source is not registered with the graph")

        factors.append({
            "type": type_index[id(ft)],
            "scope": list(factor.get_scope()),
            "energies": factor.get_energies().tolist(),
            "data": _array_or_none(factor.data),
            "data_source": None if ds is None else ds_index[id(ds)],
        })

    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "cardinalities": graph.get_cardinalities().tolist(),
        "data_sources": [
            {"data": _array_or_none(ds.get_data())} for ds in graph.get_factor_data_sources()
        ],
        "factor_types": [
            {
                "id": ft.type_id,
                "cardinalities": ft.cardinalities.tolist(),
                "weights": ft.weights.tolist(),
            }
            for ft in types
        ],
        "factors": factors,
    }


def _handle(items: List[Any], idx: Any, what: str, fi: int) -> Any:
    if not isinstance(idx, int) or idx < 0 or idx >= len(items):
        raise CodecError(f"factor {fi}: dangling {what} handle {idx!r}")
    return items[idx]


def decode_graph(payload: Dict[str, Any]) -> FactorGraph:
    """
    Decode a dict produced by encode_graph.

    Raises:
        CodecError: On unknown format/version, missing or malformed fields,
            or dangling handles
    """
    if not isinstance(payload, dict):
        raise CodecError(f"payload must be a JSON object, got {type(payload).__name__}")
    if payload.get("format") != FORMAT_NAME:
        raise CodecError(f"not an {FORMAT_NAME} payload: format={payload.get('format')!r}")
    if payload.get("version") != FORMAT_VERSION:
        raise CodecError(f"unsupported {FORMAT_NAME} version {payload.get('version')!r}")

    try:
        graph = FactorGraph(payload["cardinalities"])

        sources = [FactorDataSource(d.get("data")) for d in payload.get("data_sources", [])]
        for ds in sources:
            graph.add_data_source(ds)

        types = [
            TableFactorType(t["id"], t["cardinalities"], t.get("weights") or None)
            for t in payload.get("factor_types", [])
        ]

        for fi, f in enumerate(payload.get("factors", [])):
            ft = _handle(types, f["type"], "factor type", fi)
            ds = None
            if f.get("data_source") is not None:
                ds = _handle(sources, f["data_source"], "data source", fi)
            graph.add_factor(Factor(
                ft,
                f["scope"],
                data=f.get("data"),
                data_source=ds,
                energies=f.get("energies"),
            ))
    except FactorGraphError:
        raise
    except KeyError as e:
        raise CodecError(f"missing field {e.args[0]!r}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise CodecError(f"malformed payload: {e}") from e

    return graph


def save_graph(graph: FactorGraph, filepath: str) -> None:
    """Write a factor graph to a JSON file."""
    with open(filepath, "w") as f:
        json.dump(encode_graph(graph), f, indent=2)


def load_graph(filepath: str) -> FactorGraph:
    """Read a factor graph from a JSON file."""
    with open(filepath, "r") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise CodecError(f"{filepath}: invalid JSON: {e}") from e
    return decode_graph(payload)
