"""SQLite-backed store of statically analysed function boundaries."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from ..errors import StaticStoreError
from ..logging import get_logger
from ..models import StaticFunction

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ghidra_functions_cache (
    target_os TEXT NOT NULL,
    module_name TEXT NOT NULL,
    functions_json TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (target_os, module_name)
)
"""


class StaticAnalysisStore:
    """Function lists keyed by ``(target_os, module_name)``.

    Each row stores a JSON array of ``{name, address, size}`` objects where
    ``address`` is hex text relative to the module base. The blocking sqlite
    calls run in a worker thread from the async methods.
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = Path(db_path)

    def _connect(self, create: bool) -> Optional[sqlite3.Connection]:
        if not self.db_path.exists():
            if not create:
                return None
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.execute(_SCHEMA)
        return conn

    def lookup_sync(
        self, target_os: str, module_name: str
    ) -> Optional[List[StaticFunction]]:
        try:
            conn = self._connect(create=False)
            if conn is None:
                return None
            with closing(conn):
                row = conn.execute(
                    "SELECT functions_json FROM ghidra_functions_cache "
                    "WHERE target_os = ? AND module_name = ?",
                    (target_os, module_name),
                ).fetchone()
        except sqlite3.Error as e:
            raise StaticStoreError(f"lookup {target_os}/{module_name}: {e}") from e
        if row is None:
            return None

        try:
            entries = json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StaticStoreError(
                f"corrupt function list for {target_os}/{module_name}"
            ) from e
        if not isinstance(entries, list):
            raise StaticStoreError(
                f"function list for {target_os}/{module_name} is not an array"
            )

        functions: List[StaticFunction] = []
        for entry in entries:
            try:
                functions.append(StaticFunction.model_validate(entry))
            except ValidationError:
                continue
        return functions

    def save_sync(
        self, target_os: str, module_name: str, functions: Iterable[StaticFunction]
    ) -> int:
        payload = [f.model_dump() for f in functions]
        try:
            conn = self._connect(create=True)
            with closing(conn):
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO ghidra_functions_cache "
                        "(target_os, module_name, functions_json, updated_at) "
                        "VALUES (?, ?, ?, datetime('now'))",
                        (target_os, module_name, json.dumps(payload)),
                    )
        except (sqlite3.Error, OSError) as e:
            raise StaticStoreError(f"save {target_os}/{module_name}: {e}") from e
        logger.info(
            "static_functions_saved",
            target_os=target_os,
            module=module_name,
            count=len(payload),
        )
        return len(payload)

    def has(self, target_os: str, module_name: str) -> bool:
        try:
            conn = self._connect(create=False)
            if conn is None:
                return False
            with closing(conn):
                row = conn.execute(
                    "SELECT COUNT(*) FROM ghidra_functions_cache "
                    "WHERE target_os = ? AND module_name = ?",
                    (target_os, module_name),
                ).fetchone()
        except sqlite3.Error as e:
            raise StaticStoreError(f"check {target_os}/{module_name}: {e}") from e
        return bool(row and row[0])

    async def lookup(
        self, target_os: str, module_name: str
    ) -> Optional[List[StaticFunction]]:
        return await asyncio.to_thread(self.lookup_sync, target_os, module_name)

    async def save(
        self, target_os: str, module_name: str, functions: Iterable[StaticFunction]
    ) -> int:
        return await asyncio.to_thread(
            self.save_sync, target_os, module_name, list(functions)
        )
