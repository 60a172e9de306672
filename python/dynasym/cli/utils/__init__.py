"""CLI utility functions."""

from .formatting import (
    human_bytes,
    format_hex,
    parse_address,
    parse_module_spec,
)

__all__ = [
    "human_bytes",
    "format_hex",
    "parse_address",
    "parse_module_spec",
]
