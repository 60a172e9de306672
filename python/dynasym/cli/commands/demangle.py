"""Demangle command implementation."""

import argparse
import asyncio
import sys
from typing import Dict, List

from .base import BaseCommand
from ..formatters.demangle import DemangleFormatter
from ...demangle import CxxFiltDemangler, IdentityDemangler
from ...display import DisplayNameFormatter
from ...errors import DynasymError
from ...store import SymbolStore


class DemangleCommand(BaseCommand):
    """Command for showing the display form of raw symbol names."""

    def get_name(self) -> str:
        return "demangle"

    def get_help(self) -> str:
        return "Demangle and simplify symbol names (reads stdin when none given)"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("names", nargs="*", help="Raw symbol names")
        parser.add_argument(
            "--simplify-only",
            action="store_true",
            help="Skip c++filt and only shorten template arguments",
        )
        parser.add_argument("--cxxfilt", help="Path to the c++filt binary")

    def execute(self, args: argparse.Namespace, formatter: DemangleFormatter) -> int:
        names = list(args.names)
        if not names:
            names = [line.strip() for line in sys.stdin if line.strip()]
        if not names:
            formatter.output_error("no names given")
            return 2
        try:
            config = self.build_config(args)
        except (DynasymError, ValueError) as e:
            formatter.output_error(str(e))
            return 2

        if args.simplify_only:
            demangler = IdentityDemangler()
        else:
            demangler = CxxFiltDemangler(args.cxxfilt or config.cxxfilt_path)
        store = SymbolStore()
        display = DisplayNameFormatter(
            store, demangler, batch_size=config.demangle_batch_size
        )
        formatter.format_output(asyncio.run(self._demangle(display, store, names)))
        return 0

    async def _demangle(
        self, display: DisplayNameFormatter, store: SymbolStore, names: List[str]
    ) -> List[Dict[str, str]]:
        display.queue(names)
        await display.drain()
        return [
            {
                "raw": name,
                "demangled": store.demangled.get(name, name),
                "display": display.display_name(name),
            }
            for name in names
        ]
