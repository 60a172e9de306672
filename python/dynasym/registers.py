"""Typed register contexts reported by the debug agent.

Exception and breakpoint events carry a register dump whose shape depends on
the target architecture. Each architecture gets its own model; the ``arch``
field selects the variant.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .models import parse_hex


def _coerce_register(v: Any) -> Any:
    if isinstance(v, str):
        parsed = parse_hex(v)
        if parsed is None:
            raise ValueError(f"not a register value: {v!r}")
        return parsed
    return v


class Arm64Registers(BaseModel):
    model_config = ConfigDict(extra="ignore")

    arch: Literal["arm64"] = "arm64"
    x: List[int] = Field(default_factory=list, max_length=29)
    fp: int = 0
    lr: int = 0
    sp: int = 0
    pc: int = 0
    cpsr: int = 0

    @field_validator("fp", "lr", "sp", "pc", "cpsr", mode="before")
    @classmethod
    def _hex(cls, v: Any) -> Any:
        return _coerce_register(v)

    @field_validator("x", mode="before")
    @classmethod
    def _hex_list(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_coerce_register(item) for item in v]
        return v

    def code_pointers(self) -> Dict[str, int]:
        return {"pc": self.pc, "lr": self.lr}


class X86_64Registers(BaseModel):
    model_config = ConfigDict(extra="ignore")

    arch: Literal["x86_64"] = "x86_64"
    rax: int = 0
    rbx: int = 0
    rcx: int = 0
    rdx: int = 0
    rsi: int = 0
    rdi: int = 0
    rbp: int = 0
    rsp: int = 0
    r8: int = 0
    r9: int = 0
    r10: int = 0
    r11: int = 0
    r12: int = 0
    r13: int = 0
    r14: int = 0
    r15: int = 0
    rip: int = 0
    rflags: int = 0

    @field_validator(
        "rax", "rbx", "rcx", "rdx", "rsi", "rdi", "rbp", "rsp",
        "r8", "r9", "r10", "r11", "r12", "r13", "r14", "r15",
        "rip", "rflags",
        mode="before",
    )
    @classmethod
    def _hex(cls, v: Any) -> Any:
        return _coerce_register(v)

    def code_pointers(self) -> Dict[str, int]:
        return {"rip": self.rip}


RegisterContext = Annotated[
    Union[Arm64Registers, X86_64Registers], Field(discriminator="arch")
]

_adapter: TypeAdapter[RegisterContext] = TypeAdapter(RegisterContext)

# Architecture names the agent reports, mapped onto the variant tags.
_ARCH_ALIASES = {
    "arm64": "arm64",
    "aarch64": "arm64",
    "x86_64": "x86_64",
    "x64": "x86_64",
    "amd64": "x86_64",
}


def parse_registers(payload: Dict[str, Any]) -> Union[Arm64Registers, X86_64Registers]:
    """Validate a raw register dump into the matching architecture model.

    Raises ``pydantic.ValidationError`` for unknown architectures or
    malformed register values.
    """
    data = dict(payload)
    arch = str(data.get("arch", "")).lower()
    data["arch"] = _ARCH_ALIASES.get(arch, arch)
    return _adapter.validate_python(data)
