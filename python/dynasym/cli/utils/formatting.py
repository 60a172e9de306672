"""Formatting and parsing utilities for CLI input and output."""

from typing import Optional, Union

from ...models import Module, parse_hex


def human_bytes(n: int) -> str:
    """Format bytes as human-readable string."""
    units = ["B", "KiB", "MiB", "GiB", "TiB"]
    f = float(n)
    i = 0
    while f >= 1024.0 and i < len(units) - 1:
        f /= 1024.0
        i += 1
    if i == 0:
        return f"{int(f)} {units[i]}"
    return f"{f:.1f} {units[i]}"


def format_hex(value: Optional[Union[int, str]], prefix: bool = True) -> str:
    """Format a value as hexadecimal."""
    if value is None:
        return "-"
    if isinstance(value, str):
        if value.startswith("0x"):
            return value
        parsed = parse_hex(value)
        if parsed is None:
            return value
        value = parsed

    if prefix:
        return f"0x{value:x}"
    return f"{value:x}"


def parse_address(text: str) -> int:
    """Parse a hex address argument (``0x`` prefix optional)."""
    value = parse_hex(text)
    if value is None:
        raise ValueError(f"not a hex address: {text!r}")
    return value


def parse_module_spec(text: str) -> Module:
    """Parse ``NAME:BASE:SIZE`` (hex base and size) into a Module.

    The name may itself contain ``:`` (Windows paths); base and size are
    taken from the last two fields.
    """
    parts = text.rsplit(":", 2)
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"module spec must be NAME:BASE:SIZE, got {text!r}")
    name, base, size = parts
    return Module(modulename=name, base=parse_address(base), size=parse_address(size))
