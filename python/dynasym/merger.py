"""Merge live-agent and static-analysis symbols for one module."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .models import LiveSymbol, Module, StaticFunction, Symbol, parse_hex

# Symbol kinds that name code and can be resolved from an instruction address.
# Mach-O function symbols show up as SECT entries with a size.
FUNCTION_KINDS = frozenset({"Function", "FUNC", "Public", "Thunk"})


def is_function_like(sym: LiveSymbol) -> bool:
    if sym.type in FUNCTION_KINDS:
        return True
    return sym.type == "SECT" and sym.size > 0


def _make_symbol(address: int, size: int, name: str, module: Module) -> Symbol:
    return Symbol(
        address=address,
        end_address=address + (size if size > 0 else 1),
        name=name,
        module_name=module.short_name,
        module_base=module.base,
    )


def convert_live(symbols: Iterable[LiveSymbol], module: Module) -> List[Symbol]:
    out: List[Symbol] = []
    for s in symbols:
        if not is_function_like(s):
            continue
        address = parse_hex(s.address)
        if address is None:
            continue
        out.append(_make_symbol(address, s.size, s.name, module))
    return out


def convert_static(
    functions: Iterable[StaticFunction], module: Module
) -> List[Symbol]:
    out: List[Symbol] = []
    for f in functions:
        offset = parse_hex(f.address)
        if offset is None:
            continue
        out.append(_make_symbol(module.base + offset, f.size, f.name, module))
    return out


def merge(
    live_symbols: Iterable[LiveSymbol],
    static_symbols: Optional[Iterable[StaticFunction]],
    module: Module,
) -> List[Symbol]:
    """Combine both sources into one list for ``module``.

    Live symbols come first. A static symbol at the same absolute address as
    a live one is discarded.
    """
    live = convert_live(live_symbols, module)
    static = convert_static(static_symbols or (), module)
    taken = {s.address for s in live}
    return live + [s for s in static if s.address not in taken]
