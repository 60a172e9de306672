"""Shared test utilities and fixtures for Python tests."""

import asyncio
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from dynasym.config import CacheConfig
from dynasym.errors import AgentError, DemangleError
from dynasym.models import LiveSymbol, Module, StaticFunction


class FakeLiveSource:
    """Live symbol source serving canned symbols per module base.

    Set ``gate`` to an ``asyncio.Event`` to hold every enumeration until the
    test releases it.
    """

    def __init__(
        self,
        symbols: Optional[Dict[int, List[LiveSymbol]]] = None,
        fail: bool = False,
        gate: Optional[asyncio.Event] = None,
    ):
        self.symbols = symbols or {}
        self.fail = fail
        self.gate = gate
        self.calls: List[int] = []

    async def enumerate(self, module: Module) -> List[LiveSymbol]:
        self.calls.append(module.base)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise AgentError("agent unreachable")
        return list(self.symbols.get(module.base, []))


class FakeStaticSource:
    """Static source keyed by ``(target_os, module_name)``."""

    def __init__(
        self,
        functions: Optional[Dict[Tuple[str, str], List[StaticFunction]]] = None,
        fail: bool = False,
    ):
        self.functions = functions or {}
        self.fail = fail
        self.calls: List[Tuple[str, str]] = []

    async def lookup(
        self, target_os: str, module_name: str
    ) -> Optional[List[StaticFunction]]:
        self.calls.append((target_os, module_name))
        if self.fail:
            raise RuntimeError("database locked")
        found = self.functions.get((target_os, module_name))
        return list(found) if found is not None else None


class FakeDemangler:
    """Demangler that maps names through a dict and records each batch."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None, fail: bool = False):
        self.mapping = mapping or {}
        self.fail = fail
        self.batches: List[List[str]] = []

    async def demangle(self, names: Sequence[str]) -> List[str]:
        self.batches.append(list(names))
        if self.fail:
            raise DemangleError("c++filt exploded")
        return [self.mapping.get(n, n) for n in names]


def live(name: str, address: int, size: int = 0, kind: str = "Function") -> LiveSymbol:
    return LiveSymbol(name=name, address=f"0x{address:x}", size=size, type=kind)


def static(name: str, offset: int, size: int = 0) -> StaticFunction:
    return StaticFunction(name=name, address=f"{offset:x}", size=size)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "DYNASYM_AGENT_HOST",
        "DYNASYM_AGENT_PORT",
        "DYNASYM_AGENT_TOKEN",
        "DYNASYM_TARGET_OS",
        "DYNASYM_CXXFILT",
        "DYNASYM_LOG_LEVEL",
        "DYNASYM_STATIC_DB",
        "DYNASYM_DEMANGLE",
        "DYNASYM_LOAD_WAIT_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config(tmp_path) -> CacheConfig:
    return CacheConfig(static_db_path=tmp_path / "static.db")


@pytest.fixture
def libfoo() -> Module:
    return Module(modulename="/usr/lib/libfoo.so", base=0x1000, size=0x1000)


@pytest.fixture
def libbar() -> Module:
    return Module(modulename="/usr/lib/libbar.so", base=0x7000, size=0x2000)
