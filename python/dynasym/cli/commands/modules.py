"""Modules command implementation."""

import argparse
import asyncio

from .base import BaseCommand
from ..formatters.modules import ModulesFormatter
from ...errors import DynasymError


class ModulesCommand(BaseCommand):
    """Command for listing the modules loaded in the target process."""

    def get_name(self) -> str:
        return "modules"

    def get_help(self) -> str:
        return "List modules loaded in the target process"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        self.add_connection_arguments(parser)
        parser.add_argument(
            "--search", type=str, help="Only show modules whose name contains this"
        )

    def execute(self, args: argparse.Namespace, formatter: ModulesFormatter) -> int:
        try:
            cache = self.build_cache(args)
        except (DynasymError, ValueError) as e:
            formatter.output_error(str(e))
            return 2
        try:
            modules = asyncio.run(self._collect(args, cache))
        except ValueError as e:
            formatter.output_error(str(e))
            return 2
        except DynasymError as e:
            formatter.output_error(f"Error listing modules: {e}")
            return 3

        if args.search:
            needle = args.search.lower()
            modules = [m for m in modules if needle in m.full_name.lower()]
        data = [
            {
                "name": m.full_name,
                "base": m.base,
                "size": m.size,
                "path": m.path,
            }
            for m in modules
        ]
        formatter.format_output(data)
        return 0

    async def _collect(self, args, cache):
        try:
            return await self.get_modules(args, cache)
        finally:
            await cache.aclose()
