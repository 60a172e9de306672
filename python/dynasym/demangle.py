"""Batch demanglers for symbol display names."""

from __future__ import annotations

import asyncio
import shutil
from typing import List, Protocol, Sequence

from .errors import DemangleError
from .logging import get_logger

logger = get_logger(__name__)


class Demangler(Protocol):
    async def demangle(self, names: Sequence[str]) -> List[str]:
        """Return display names in the same order and count as ``names``."""
        ...


class IdentityDemangler:
    """Demangler that returns names unchanged."""

    async def demangle(self, names: Sequence[str]) -> List[str]:
        return list(names)


class CxxFiltDemangler:
    """Demangle C++ (Itanium) and Rust names through binutils ``c++filt``.

    Names are written one per line to the tool's stdin; output lines map back
    by position. Names c++filt does not recognise are echoed unchanged.
    """

    def __init__(self, cxxfilt_path: str = "c++filt", timeout: float = 30.0):
        self.cxxfilt_path = cxxfilt_path
        self.timeout = timeout

    def available(self) -> bool:
        return shutil.which(self.cxxfilt_path) is not None

    async def demangle(self, names: Sequence[str]) -> List[str]:
        if not names:
            return []
        # One name per line: embedded newlines would shift every later result.
        clean = [n.replace("\n", " ").replace("\r", " ") for n in names]
        payload = ("\n".join(clean) + "\n").encode("utf-8", errors="replace")
        try:
            proc = await asyncio.create_subprocess_exec(
                self.cxxfilt_path,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DemangleError(f"cannot run {self.cxxfilt_path}: {e}") from e
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(payload), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise DemangleError(
                f"{self.cxxfilt_path} timed out after {self.timeout}s"
            ) from e
        if proc.returncode != 0:
            raise DemangleError(
                f"{self.cxxfilt_path} exited with {proc.returncode}: "
                f"{stderr.decode('utf-8', errors='replace').strip()}"
            )
        # Only "\n" delimits records; names may carry other line-break characters.
        lines = stdout.decode("utf-8", errors="replace").split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        if len(lines) != len(names):
            raise DemangleError(
                f"{self.cxxfilt_path} returned {len(lines)} lines for {len(names)} names"
            )
        return lines
