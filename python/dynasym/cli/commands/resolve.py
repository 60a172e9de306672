"""Resolve command implementation."""

import argparse
import asyncio
from typing import Any, Dict, List

from .base import BaseCommand
from ..formatters.resolve import ResolveFormatter
from ..utils.formatting import parse_address
from ...errors import DynasymError
from ...resolver import module_for_address


class ResolveCommand(BaseCommand):
    """Command for turning code addresses into ``module@symbol + 0xOFF``."""

    def get_name(self) -> str:
        return "resolve"

    def get_help(self) -> str:
        return "Resolve addresses to module and symbol names"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("addresses", nargs="+", help="Hex addresses to resolve")
        self.add_connection_arguments(parser)
        parser.add_argument(
            "--mode",
            choices=["library", "function"],
            default="function",
            help="library: module + offset only; function: include the symbol",
        )

    def execute(self, args: argparse.Namespace, formatter: ResolveFormatter) -> int:
        try:
            addresses = [parse_address(a) for a in args.addresses]
            cache = self.build_cache(args)
        except (DynasymError, ValueError) as e:
            formatter.output_error(str(e))
            return 2
        try:
            data = asyncio.run(self._resolve(args, cache, addresses))
        except ValueError as e:
            formatter.output_error(str(e))
            return 2
        except DynasymError as e:
            formatter.output_error(f"Error resolving addresses: {e}")
            return 3

        formatter.format_output(data)
        return 0

    async def _resolve(self, args, cache, addresses: List[int]) -> List[Dict[str, Any]]:
        try:
            modules = await self.get_modules(args, cache)
            if args.mode == "function":
                # Load up front; there is no later re-render.
                for address in addresses:
                    module = module_for_address(address, modules)
                    if module is not None:
                        await cache.load_module(module)
                await cache.formatter.drain()

            rows = []
            for address in addresses:
                res = None
                if args.mode == "function":
                    res = cache.resolve_address(address, modules)
                rows.append(
                    {
                        "address": address,
                        "text": cache.format_address_with_symbol(
                            address, modules, args.mode
                        ),
                        "module": res.module_name if res else None,
                        "symbol": res.symbol.name if res and res.symbol else None,
                        "offset": res.offset if res else None,
                    }
                )
            return rows
        finally:
            await cache.aclose()
