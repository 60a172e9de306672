from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import LoadState, Symbol


class SymbolStore:
    """In-memory symbol table with per-module load state.

    - Symbols are kept per module base in insertion order; ``insert`` never
      deduplicates (the merger does that before insertion).
    - Load state is tracked per module base; unknown modules are NOT_LOADED.
    - The demangled-name cache lives here too so that ``clear`` resets
      everything in one step.
    """

    def __init__(self) -> None:
        self._by_module: Dict[int, List[Symbol]] = {}
        self._states: Dict[int, LoadState] = {}
        self.demangled: Dict[str, str] = {}

    # ----------------------------- add/update -----------------------------
    def insert(self, symbols: Iterable[Symbol]) -> int:
        count = 0
        for sym in symbols:
            self._by_module.setdefault(sym.module_base, []).append(sym)
            count += 1
        return count

    def mark_loading(self, module_base: int) -> None:
        self._states[module_base] = LoadState.LOADING

    def mark_loaded(self, module_base: int) -> None:
        self._states[module_base] = LoadState.LOADED

    def clear(self) -> None:
        self._by_module = {}
        self._states = {}
        self.demangled = {}

    # ------------------------------- access -------------------------------
    def state(self, module_base: int) -> LoadState:
        return self._states.get(module_base, LoadState.NOT_LOADED)

    def is_loaded(self, module_base: int) -> bool:
        return self.state(module_base) is LoadState.LOADED

    def is_loading(self, module_base: int) -> bool:
        return self.state(module_base) is LoadState.LOADING

    def symbols_for(self, module_base: int) -> List[Symbol]:
        return list(self._by_module.get(module_base, ()))

    def symbols(self) -> List[Symbol]:
        out: List[Symbol] = []
        for syms in self._by_module.values():
            out.extend(syms)
        return out

    def loaded_modules(self) -> List[int]:
        return [b for b, s in self._states.items() if s is LoadState.LOADED]

    def loading_modules(self) -> List[int]:
        return [b for b, s in self._states.items() if s is LoadState.LOADING]

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_module.values())

    # ------------------------------- search ------------------------------
    def find_in_module(self, module_base: int, address: int) -> Optional[Symbol]:
        """First symbol of the module, in store order, covering ``address``."""
        for sym in self._by_module.get(module_base, ()):
            if sym.contains(address):
                return sym
        return None

    def find(self, address: int) -> Optional[Symbol]:
        """First symbol of any module, in store order, covering ``address``."""
        for syms in self._by_module.values():
            for sym in syms:
                if sym.contains(address):
                    return sym
        return None
