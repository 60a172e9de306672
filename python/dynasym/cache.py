"""The symbol cache service exposed to debugger front ends."""

from __future__ import annotations

from typing import Dict, Iterable, List, Literal, Optional, Union

from .config import CacheConfig, get_config
from .coordinator import LoadCoordinator
from .demangle import CxxFiltDemangler, Demangler, IdentityDemangler
from .display import DisplayNameFormatter
from .logging import get_logger
from .models import CacheStats, Module, Resolution, ServerInfo, Symbol
from .registers import Arm64Registers, X86_64Registers
from .resolver import AddressResolver, NameResolver, module_for_address
from .sources import AgentClient, LiveSymbolSource, StaticAnalysisStore, StaticSymbolSource
from .store import SymbolStore

logger = get_logger(__name__)

FormatMode = Literal["library", "function"]


class SymbolCache:
    """Owns the symbol store and every component that reads or writes it.

    One instance is shared by all views attached to the same target process
    and handed to them explicitly.
    """

    def __init__(
        self,
        live_source: LiveSymbolSource,
        static_source: Optional[StaticSymbolSource] = None,
        demangler: Optional[Demangler] = None,
        config: Optional[CacheConfig] = None,
    ) -> None:
        self.config = config or get_config()
        self.server_info: Optional[ServerInfo] = None
        self.live_source = live_source
        self.store = SymbolStore()
        self.formatter = DisplayNameFormatter(
            self.store,
            demangler or IdentityDemangler(),
            enabled=self.config.demangle_enabled,
            batch_size=self.config.demangle_batch_size,
        )
        self.coordinator = LoadCoordinator(
            self.store,
            live_source,
            static_source,
            target_os=self.config.target_os,
            wait_timeout=self.config.load_wait_timeout,
            on_loaded=self._symbols_loaded,
        )
        self.addresses = AddressResolver(self.store, self.coordinator)
        self.names = NameResolver(self.store, self.coordinator)

    @classmethod
    def from_config(cls, config: Optional[CacheConfig] = None) -> "SymbolCache":
        """Build a cache wired to the debug agent, the static-analysis
        database and ``c++filt`` as described by ``config``."""
        config = config or get_config()
        agent = AgentClient(
            config.agent_base_url, token=config.agent_token, timeout=config.agent_timeout
        )
        return cls(
            agent,
            StaticAnalysisStore(config.static_db_path),
            CxxFiltDemangler(config.cxxfilt_path),
            config,
        )

    # ----------------------------- connection -----------------------------
    def update_server_info(self, info: Optional[ServerInfo]) -> None:
        self.server_info = info
        if info is None:
            return
        if info.target_os:
            self.coordinator.target_os = info.target_os
        if isinstance(self.live_source, AgentClient):
            self.live_source.update_connection(info.ip, info.port)
            if info.auth_token:
                self.live_source.set_token(info.auth_token)

    # ------------------------------- lookups ------------------------------
    def find_symbol_for_address(self, address: int) -> Optional[Resolution]:
        return self.addresses.resolve_cached(address)

    def resolve_address(
        self, address: int, modules: Iterable[Module]
    ) -> Optional[Resolution]:
        return self.addresses.resolve_address(address, modules)

    async def find_address_for_symbol(
        self, symbol_name: str, module_name: str, modules: Iterable[Module]
    ) -> Optional[Symbol]:
        return await self.names.resolve_name(symbol_name, module_name, modules)

    def format_address_with_symbol(
        self, address: int, modules: Iterable[Module], mode: FormatMode = "function"
    ) -> Optional[str]:
        """Render ``address`` as ``module + 0xOFF`` or ``module@symbol + 0xOFF``.

        ``library`` mode never loads symbols. ``function`` mode starts a
        background load for an unloaded module and answers with the library
        form until the load is done.
        """
        if mode not in ("library", "function"):
            raise ValueError(f"unknown format mode: {mode!r}")
        modules = list(modules)
        module = module_for_address(address, modules)
        if module is None:
            return None
        fallback = f"{module.short_name} + 0x{address - module.base:x}"
        if mode == "library":
            return fallback

        res = self.addresses.resolve_address(address, modules)
        if res is None or res.symbol is None:
            return fallback
        shown = self.get_display_name(res.symbol.name)
        if res.offset == 0:
            return f"{module.short_name}@{shown}"
        return f"{module.short_name}@{shown} + 0x{res.offset:x}"

    async def ensure_module_symbols_loaded(
        self,
        address: int,
        modules: Iterable[Module],
        server_info: Optional[ServerInfo],
    ) -> bool:
        """Preload the module owning ``address``. Returns True when a load ran."""
        if server_info is None:
            logger.debug("preload_skipped_no_server", address=f"0x{address:x}")
            return False
        module = module_for_address(address, modules)
        if module is None:
            logger.debug("preload_no_module", address=f"0x{address:x}")
            return False
        if self.store.is_loaded(module.base):
            return False
        self.update_server_info(server_info)
        await self.coordinator.ensure_loaded(module)
        return True

    async def load_module(self, module: Module) -> List[Symbol]:
        return await self.coordinator.ensure_loaded(module)

    def symbolize_registers(
        self,
        registers: Union[Arm64Registers, X86_64Registers],
        modules: Iterable[Module],
        mode: FormatMode = "function",
    ) -> Dict[str, Optional[str]]:
        """Format the code-pointer registers of a register dump."""
        modules = list(modules)
        return {
            reg: self.format_address_with_symbol(value, modules, mode)
            for reg, value in registers.code_pointers().items()
        }

    # ------------------------------- display ------------------------------
    def get_display_name(self, name: str) -> str:
        return self.formatter.display_name(name)

    @property
    def demangle_enabled(self) -> bool:
        return self.formatter.enabled

    @demangle_enabled.setter
    def demangle_enabled(self, value: bool) -> None:
        self.formatter.enabled = value

    # ------------------------------ lifecycle -----------------------------
    def clear_cache(self) -> None:
        self.store.clear()
        self.coordinator.clear()
        self.formatter.clear()
        logger.info("symbol_cache_cleared")

    def stats(self) -> CacheStats:
        return CacheStats(
            symbol_count=len(self.store),
            loaded_module_count=len(self.store.loaded_modules()),
            loading_module_count=self.coordinator.inflight_count,
            demangled_count=self.formatter.demangled_count,
            pending_demangle_count=self.formatter.pending_count,
            demangle_enabled=self.formatter.enabled,
        )

    async def aclose(self) -> None:
        if isinstance(self.live_source, AgentClient):
            await self.live_source.aclose()

    def _symbols_loaded(self, module: Module, symbols: List[Symbol]) -> None:
        if self.formatter.queue(s.name for s in symbols):
            self.formatter.schedule_drain()
