"""Symbols command implementation."""

import argparse
import asyncio
from typing import Any, Dict, Optional

from .base import BaseCommand
from ..formatters.symbols import SymbolsFormatter
from ...errors import DynasymError
from ...resolver import module_for_name


class SymbolsCommand(BaseCommand):
    """Command for listing the merged symbol table of one module."""

    def get_name(self) -> str:
        return "symbols"

    def get_help(self) -> str:
        return "Load and list the function symbols of a module"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("module_name", help="Module name (e.g. libc.so.6)")
        self.add_connection_arguments(parser)
        parser.add_argument(
            "--search", type=str, help="Search for symbols containing this string"
        )
        parser.add_argument(
            "--limit", type=int, help="Limit number of symbols displayed"
        )

    def execute(self, args: argparse.Namespace, formatter: SymbolsFormatter) -> int:
        try:
            cache = self.build_cache(args)
        except (DynasymError, ValueError) as e:
            formatter.output_error(str(e))
            return 2
        try:
            data = asyncio.run(self._load(args, cache))
        except ValueError as e:
            formatter.output_error(str(e))
            return 2
        except DynasymError as e:
            formatter.output_error(f"Error loading symbols: {e}")
            return 3
        if data is None:
            formatter.output_error(f"module not found: {args.module_name}")
            return 2

        formatter.format_output(data)
        return 0

    async def _load(self, args, cache) -> Optional[Dict[str, Any]]:
        try:
            modules = await self.get_modules(args, cache)
            module = module_for_name(args.module_name, modules)
            if module is None:
                return None
            symbols = await cache.load_module(module)
            await cache.formatter.drain()

            rows = []
            for sym in symbols:
                display = cache.get_display_name(sym.name)
                if args.search:
                    needle = args.search.lower()
                    if needle not in sym.name.lower() and needle not in display.lower():
                        continue
                rows.append(
                    {
                        "address": sym.address,
                        "size": sym.size,
                        "name": sym.name,
                        "display": display,
                    }
                )
            total = len(rows)
            if args.limit is not None and args.limit >= 0:
                rows = rows[: args.limit]
            return {
                "module": module.short_name,
                "base": module.base,
                "total": total,
                "symbols": rows,
            }
        finally:
            await cache.aclose()
