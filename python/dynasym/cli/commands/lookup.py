"""Lookup command implementation."""

import argparse
import asyncio

from .base import BaseCommand
from ..formatters.resolve import LookupFormatter
from ...errors import DynasymError


class LookupCommand(BaseCommand):
    """Command for finding a symbol's address by name."""

    def get_name(self) -> str:
        return "lookup"

    def get_help(self) -> str:
        return "Find the address of a symbol in a module"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("symbol_name", help="Symbol name or fragment")
        parser.add_argument(
            "--in", dest="in_module", required=True, help="Module to search"
        )
        self.add_connection_arguments(parser)

    def execute(self, args: argparse.Namespace, formatter: LookupFormatter) -> int:
        try:
            cache = self.build_cache(args)
        except (DynasymError, ValueError) as e:
            formatter.output_error(str(e))
            return 2
        try:
            symbol = asyncio.run(self._lookup(args, cache))
        except ValueError as e:
            formatter.output_error(str(e))
            return 2
        except DynasymError as e:
            formatter.output_error(f"Error looking up symbol: {e}")
            return 3

        formatter.format_output(
            {
                "query": args.symbol_name,
                "module": args.in_module,
                "symbol": symbol.model_dump() if symbol else None,
            }
        )
        return 0 if symbol else 1

    async def _lookup(self, args, cache):
        try:
            modules = await self.get_modules(args, cache)
            return await cache.find_address_for_symbol(
                args.symbol_name, args.in_module, modules
            )
        finally:
            await cache.aclose()
