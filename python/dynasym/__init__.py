"""
dynasym: symbol-resolution cache for a live-process debugger.

Maps addresses inside a target's loaded modules to function symbols. Symbol
tables are loaded lazily per module from the debug agent and merged with
function boundaries from an offline static-analysis database.
"""

from .cache import FormatMode, SymbolCache
from .config import CacheConfig, get_config, set_config
from .coordinator import LoadCoordinator
from .demangle import CxxFiltDemangler, Demangler, IdentityDemangler
from .display import DisplayNameFormatter, simplify_template_name
from .errors import AgentError, ConfigError, DemangleError, DynasymError, StaticStoreError
from .merger import merge
from .models import (
    CacheStats,
    LiveSymbol,
    LoadState,
    Module,
    Resolution,
    ServerInfo,
    StaticFunction,
    Symbol,
    parse_hex,
)
from .registers import Arm64Registers, RegisterContext, X86_64Registers, parse_registers
from .resolver import AddressResolver, NameResolver
from .sources import AgentClient, StaticAnalysisStore
from .store import SymbolStore

__version__ = "0.1.0"

__all__ = [
    "AddressResolver",
    "AgentClient",
    "AgentError",
    "Arm64Registers",
    "CacheConfig",
    "CacheStats",
    "ConfigError",
    "CxxFiltDemangler",
    "DemangleError",
    "Demangler",
    "DisplayNameFormatter",
    "DynasymError",
    "FormatMode",
    "IdentityDemangler",
    "LiveSymbol",
    "LoadCoordinator",
    "LoadState",
    "Module",
    "NameResolver",
    "RegisterContext",
    "Resolution",
    "ServerInfo",
    "StaticAnalysisStore",
    "StaticFunction",
    "StaticStoreError",
    "Symbol",
    "SymbolCache",
    "SymbolStore",
    "X86_64Registers",
    "get_config",
    "merge",
    "parse_hex",
    "parse_registers",
    "set_config",
    "simplify_template_name",
]
