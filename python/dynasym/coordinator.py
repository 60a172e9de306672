"""Single-flight loading of per-module symbol tables."""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Set

from .logging import get_logger, log_module_load
from .merger import merge
from .models import LiveSymbol, Module, StaticFunction, Symbol
from .sources import LiveSymbolSource, StaticSymbolSource
from .store import SymbolStore

logger = get_logger(__name__)

UNKNOWN_OS = "unknown"


class LoadCoordinator:
    """Loads module symbols into a ``SymbolStore``, one fetch per module.

    Each in-flight load is represented by a future keyed by module base.
    Callers asking for a module that is already loading await that future
    instead of fetching again; the wait is capped by ``wait_timeout`` and a
    caller that gives up gets an empty list while the load carries on.

    The coordinator is the only component that writes symbols or load state
    into the store.
    """

    def __init__(
        self,
        store: SymbolStore,
        live_source: LiveSymbolSource,
        static_source: Optional[StaticSymbolSource] = None,
        target_os: str = UNKNOWN_OS,
        wait_timeout: float = 5.0,
        on_loaded: Optional[Callable[[Module, List[Symbol]], None]] = None,
    ) -> None:
        self._store = store
        self._live = live_source
        self._static = static_source
        self.target_os = target_os
        self.wait_timeout = wait_timeout
        self._inflight: Dict[int, asyncio.Future] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._on_loaded = on_loaded
        self._epoch = 0

    def is_loading(self, module_base: int) -> bool:
        return module_base in self._inflight

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    async def ensure_loaded(self, module: Module) -> List[Symbol]:
        """Return the symbols of ``module``, loading them on first use."""
        base = module.base
        if self._store.is_loaded(base):
            return self._store.symbols_for(base)
        pending = self._inflight.get(base)
        if pending is not None:
            return await self._join(module, pending)
        fut = self._begin(module)
        return await self._run_load(module, fut)

    def start_load(self, module: Module) -> Optional[asyncio.Task]:
        """Start loading ``module`` in the background without waiting.

        Returns None when the module is loaded, already loading, or there is
        no running event loop to schedule on.
        """
        base = module.base
        if self._store.is_loaded(base) or base in self._inflight:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("background_load_skipped", module=module.short_name)
            return None
        fut = self._begin(module)
        task = loop.create_task(self._run_load(module, fut))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def clear(self) -> None:
        """Forget in-flight loads. Loads already running finish but do not
        write into the store."""
        self._epoch += 1
        self._inflight = {}

    # ------------------------------ internal -----------------------------
    def _begin(self, module: Module) -> asyncio.Future:
        fut = asyncio.get_running_loop().create_future()
        self._inflight[module.base] = fut
        self._store.mark_loading(module.base)
        return fut

    async def _join(self, module: Module, fut: asyncio.Future) -> List[Symbol]:
        try:
            symbols = await asyncio.wait_for(
                asyncio.shield(fut), timeout=self.wait_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "load_wait_timeout",
                module=module.short_name,
                timeout=self.wait_timeout,
            )
            return []
        return list(symbols)

    async def _run_load(self, module: Module, fut: asyncio.Future) -> List[Symbol]:
        epoch = self._epoch
        symbols: List[Symbol] = []
        try:
            with log_module_load(module.short_name, module.base):
                symbols = await self._fetch(module)
        finally:
            if epoch == self._epoch:
                if symbols:
                    self._store.insert(symbols)
                self._store.mark_loaded(module.base)
                if self._inflight.get(module.base) is fut:
                    del self._inflight[module.base]
            if not fut.done():
                fut.set_result(symbols)
            if epoch == self._epoch and symbols and self._on_loaded is not None:
                try:
                    self._on_loaded(module, symbols)
                except Exception:
                    logger.warning(
                        "on_loaded_failed", module=module.short_name, exc_info=True
                    )
        return symbols

    async def _fetch(self, module: Module) -> List[Symbol]:
        live: List[LiveSymbol] = []
        try:
            live = await self._live.enumerate(module)
        except Exception as e:
            logger.warning("live_enumeration_failed", error=str(e))

        static: Optional[List[StaticFunction]] = None
        if self._static is not None:
            static = await self._lookup_static(module.short_name)

        merged = merge(live, static, module)
        logger.info(
            "symbols_loaded",
            live=len(live),
            static=len(static or ()),
            merged=len(merged),
        )
        return merged

    async def _lookup_static(self, module_name: str) -> Optional[List[StaticFunction]]:
        target_os = (self.target_os or UNKNOWN_OS).lower()
        try:
            functions = await self._static.lookup(target_os, module_name)
            if functions is None and target_os != UNKNOWN_OS:
                functions = await self._static.lookup(UNKNOWN_OS, module_name)
        except Exception as e:
            logger.warning("static_lookup_failed", error=str(e))
            return None
        if functions is None:
            logger.debug("no_static_functions", target_os=target_os)
        return functions
