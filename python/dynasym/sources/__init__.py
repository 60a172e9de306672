"""Symbol sources consumed by the load coordinator."""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import LiveSymbol, Module, StaticFunction
from .agent import AgentClient
from .static import StaticAnalysisStore


class LiveSymbolSource(Protocol):
    async def enumerate(self, module: Module) -> List[LiveSymbol]: ...


class StaticSymbolSource(Protocol):
    async def lookup(
        self, target_os: str, module_name: str
    ) -> Optional[List[StaticFunction]]: ...


__all__ = [
    "AgentClient",
    "LiveSymbolSource",
    "StaticAnalysisStore",
    "StaticSymbolSource",
]
