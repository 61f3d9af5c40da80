"""
IO module: versioned JSON encoding of factor graphs.
"""

from fgraph.io.codec import (
    FORMAT_NAME,
    FORMAT_VERSION,
    encode_graph,
    decode_graph,
    save_graph,
    load_graph,
)

__all__ = [
    "FORMAT_NAME",
    "FORMAT_VERSION",
    "encode_graph",
    "decode_graph",
    "save_graph",
    "load_graph",
]
