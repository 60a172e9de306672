"""Data models shared by the symbol cache components."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_HEX_RE = re.compile(r"^(?:0[xX])?([0-9a-fA-F]+)$")
_PATH_SPLIT_RE = re.compile(r"[/\\]")


def parse_hex(text: Any) -> Optional[int]:
    """Parse hexadecimal address text, with or without a ``0x`` prefix.

    Returns None for anything that is not a plain hex number.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text if text >= 0 else None
    if not isinstance(text, str):
        return None
    m = _HEX_RE.match(text.strip())
    if not m:
        return None
    return int(m.group(1), 16)


def short_module_name(full_name: str) -> str:
    """Last path component of a module name (``/`` or ``\\`` separated)."""
    return _PATH_SPLIT_RE.split(full_name)[-1] or full_name


class LoadState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"


class Module(BaseModel):
    """A loaded module as reported by the debug agent.

    ``name`` is the agent's deprecated spelling of ``modulename``; either is
    accepted and ``full_name`` prefers ``modulename``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    base: int
    size: int
    modulename: str = ""
    name: Optional[str] = None
    path: Optional[str] = None
    is_64bit: Optional[bool] = None

    @field_validator("base", "size", mode="before")
    @classmethod
    def _hex_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            parsed = parse_hex(v) if v.lower().startswith("0x") else None
            if parsed is None:
                try:
                    return int(v, 10)
                except ValueError:
                    raise ValueError(f"not an address: {v!r}") from None
            return parsed
        return v

    @property
    def full_name(self) -> str:
        return self.modulename or self.name or "unknown"

    @property
    def short_name(self) -> str:
        return short_module_name(self.full_name)

    @property
    def end(self) -> int:
        return self.base + self.size

    def contains(self, address: int) -> bool:
        return self.base <= address < self.end


class Symbol(BaseModel):
    """A resolved symbol covering ``[address, end_address)``."""

    model_config = ConfigDict(frozen=True)

    address: int
    end_address: int
    name: str
    module_name: str
    module_base: int

    @model_validator(mode="after")
    def _check_range(self) -> "Symbol":
        if self.address >= self.end_address:
            raise ValueError(
                f"symbol {self.name!r} has empty range "
                f"0x{self.address:x}..0x{self.end_address:x}"
            )
        return self

    @property
    def size(self) -> int:
        return self.end_address - self.address

    def contains(self, address: int) -> bool:
        return self.address <= address < self.end_address


class LiveSymbol(BaseModel):
    """A symbol entry enumerated by the debug agent."""

    model_config = ConfigDict(extra="ignore")

    name: str
    address: str
    size: int = 0
    type: str = ""
    scope: Optional[str] = None
    module_base: Optional[str] = None

    @field_validator("address", mode="before")
    @classmethod
    def _address_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return f"0x{v:x}"
        return v

    @field_validator("size", mode="before")
    @classmethod
    def _size_default(cls, v: Any) -> Any:
        return 0 if v is None else v


class StaticFunction(BaseModel):
    """A function boundary from the static-analysis database.

    ``address`` is an offset from the module base, as hex text.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    address: str
    size: int = 0

    @field_validator("address", mode="before")
    @classmethod
    def _address_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return f"0x{v:x}"
        return v

    @field_validator("size", mode="before")
    @classmethod
    def _size_default(cls, v: Any) -> Any:
        return 0 if v is None else v


class Resolution(BaseModel):
    """Result of resolving an address.

    ``symbol`` is None when only the owning module is known.
    """

    address: int
    module_name: str
    module_base: int
    module_offset: int
    symbol: Optional[Symbol] = None
    offset: Optional[int] = None

    @property
    def resolved(self) -> bool:
        return self.symbol is not None


class ServerInfo(BaseModel):
    ip: str
    port: int
    target_os: Optional[str] = None
    auth_token: Optional[str] = None


class CacheStats(BaseModel):
    symbol_count: int = 0
    loaded_module_count: int = 0
    loading_module_count: int = 0
    demangled_count: int = 0
    pending_demangle_count: int = 0
    demangle_enabled: bool = True
