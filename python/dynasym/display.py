"""Display names for symbols: demangling cache and template simplification."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Optional

from .demangle import Demangler
from .logging import get_logger
from .store import SymbolStore

logger = get_logger(__name__)

# Bracketed template content up to this length is shown as-is.
MAX_TEMPLATE_CONTENT = 30
# A first template argument up to this length survives abbreviation.
MAX_FIRST_ARG = 20


def simplify_template_name(name: str) -> str:
    """Shorten long C++ template argument lists.

    ``std::map<std::basic_string<char>, int, ...>`` style names keep their
    first argument when it is short and collapse to ``Base<...>`` otherwise.
    The text before the first ``<`` and after the last ``>`` is kept.
    """
    first = name.find("<")
    if first == -1:
        return name
    last = name.rfind(">")
    if last <= first:
        return name

    base = name[:first]
    content = name[first + 1 : last]
    suffix = name[last + 1 :]
    if len(content) <= MAX_TEMPLATE_CONTENT:
        return name

    depth = 0
    first_arg_end = -1
    for i, ch in enumerate(content):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            first_arg_end = i
            break

    if first_arg_end == -1:
        return f"{base}<...>{suffix}"
    first_arg = content[:first_arg_end].strip()
    if len(first_arg) <= MAX_FIRST_ARG:
        return f"{base}<{first_arg}, ...>{suffix}"
    return f"{base}<...>{suffix}"


class DisplayNameFormatter:
    """Turns raw symbol names into readable display names.

    Lookups never wait on the demangler: a name missing from the cache is
    queued and the raw name is shown until a batch has been demangled.
    Batches hold at most ``batch_size`` unique names.
    """

    def __init__(
        self,
        store: SymbolStore,
        demangler: Demangler,
        enabled: bool = True,
        batch_size: int = 1000,
    ) -> None:
        self._store = store
        self._demangler = demangler
        self.enabled = enabled
        self.batch_size = batch_size
        self._pending: Dict[str, None] = {}
        self._epoch = 0
        self._failure_logged = False
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def demangled_count(self) -> int:
        return len(self._store.demangled)

    def display_name(self, raw_name: str) -> str:
        if not self.enabled:
            return raw_name
        demangled = self._store.demangled.get(raw_name)
        if demangled is None:
            if self.queue([raw_name]):
                self.schedule_drain()
            demangled = raw_name
        return simplify_template_name(demangled)

    def queue(self, names: Iterable[str]) -> int:
        """Queue names for demangling; returns how many were newly queued."""
        if not self.enabled:
            return 0
        added = 0
        for name in names:
            if name in self._store.demangled or name in self._pending:
                continue
            self._pending[name] = None
            added += 1
        return added

    async def flush(self) -> int:
        """Demangle one batch of pending names. Returns the batch size."""
        batch: List[str] = []
        for name in self._pending:
            batch.append(name)
            if len(batch) >= self.batch_size:
                break
        if not batch:
            return 0
        for name in batch:
            del self._pending[name]

        epoch = self._epoch
        try:
            result = await self._demangler.demangle(batch)
            if len(result) != len(batch):
                raise ValueError(
                    f"demangler returned {len(result)} names for {len(batch)}"
                )
        except Exception:
            if not self._failure_logged:
                logger.warning("demangle_batch_failed", count=len(batch), exc_info=True)
                self._failure_logged = True
            result = batch

        if epoch != self._epoch:
            # Cache was cleared while the batch was out.
            return len(batch)
        for raw, shown in zip(batch, result):
            self._store.demangled[raw] = shown or raw
        logger.debug("demangle_batch_done", count=len(batch))
        return len(batch)

    async def drain(self) -> int:
        """Flush until nothing is pending and the background drain is done.

        Returns the number of names flushed by this call.
        """
        total = 0
        while self._pending:
            total += await self.flush()
        task = self._drain_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            await task
        return total

    def clear(self) -> None:
        self._pending = {}
        self._epoch += 1
        self._failure_logged = False

    def schedule_drain(self) -> None:
        if self._drain_task is not None and not self._drain_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: names stay queued until drain() is awaited.
            return
        self._drain_task = loop.create_task(self.drain())
