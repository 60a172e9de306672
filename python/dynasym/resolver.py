"""Forward (address to symbol) and reverse (name to symbol) lookups."""

from __future__ import annotations

from typing import Iterable, Optional

from .coordinator import LoadCoordinator
from .models import Module, Resolution, Symbol
from .store import SymbolStore


def module_for_address(address: int, modules: Iterable[Module]) -> Optional[Module]:
    for m in modules:
        if m.contains(address):
            return m
    return None


def module_for_name(module_name: str, modules: Iterable[Module]) -> Optional[Module]:
    """Match on short name equality or full name containment, ignoring case."""
    wanted = module_name.lower()
    for m in modules:
        full = (m.modulename or m.name or "").lower()
        if m.short_name.lower() == wanted or wanted in full:
            return m
    return None


def _module_relative(address: int, module: Module) -> Resolution:
    return Resolution(
        address=address,
        module_name=module.short_name,
        module_base=module.base,
        module_offset=address - module.base,
    )


class AddressResolver:
    def __init__(self, store: SymbolStore, coordinator: LoadCoordinator) -> None:
        self._store = store
        self._coordinator = coordinator

    def resolve_address(
        self, address: int, modules: Iterable[Module]
    ) -> Optional[Resolution]:
        """Resolve ``address`` against the module list without blocking.

        An unloaded module gets a background load and a module-relative
        result; callers re-query once the load has finished.
        """
        module = module_for_address(address, modules)
        if module is None:
            return None
        if not self._store.is_loaded(module.base):
            self._coordinator.start_load(module)
            return _module_relative(address, module)
        sym = self._store.find_in_module(module.base, address)
        if sym is None:
            return _module_relative(address, module)
        return Resolution(
            address=address,
            module_name=module.short_name,
            module_base=module.base,
            module_offset=address - module.base,
            symbol=sym,
            offset=address - sym.address,
        )

    def resolve_cached(self, address: int) -> Optional[Resolution]:
        """Resolve against whatever is already cached, across all modules."""
        sym = self._store.find(address)
        if sym is None:
            return None
        return Resolution(
            address=address,
            module_name=sym.module_name,
            module_base=sym.module_base,
            module_offset=address - sym.module_base,
            symbol=sym,
            offset=address - sym.address,
        )


class NameResolver:
    def __init__(self, store: SymbolStore, coordinator: LoadCoordinator) -> None:
        self._store = store
        self._coordinator = coordinator

    async def resolve_name(
        self, symbol_name: str, module_name: str, modules: Iterable[Module]
    ) -> Optional[Symbol]:
        """Find the first symbol in ``module_name`` whose name contains
        ``symbol_name`` or is contained in it (case-insensitive).

        An empty query is contained in every name and so matches the
        module's first symbol.
        """
        module = module_for_name(module_name, modules)
        if module is None:
            return None
        if not self._store.is_loaded(module.base):
            await self._coordinator.ensure_loaded(module)

        wanted = symbol_name.lower()
        for sym in self._store.symbols_for(module.base):
            have = sym.name.lower()
            if wanted in have or have in wanted:
                return sym
        return None
