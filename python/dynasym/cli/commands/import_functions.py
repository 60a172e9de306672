"""Import-functions command implementation."""

import argparse
import asyncio
from typing import List

from pydantic import ValidationError

from .base import BaseCommand
from ..formatters.demangle import ImportFormatter
from ...errors import DynasymError
from ...models import StaticFunction
from ...sources import StaticAnalysisStore


class ImportFunctionsCommand(BaseCommand):
    """Command for storing a static-analysis function list for a module."""

    def get_name(self) -> str:
        return "import-functions"

    def get_help(self) -> str:
        return "Store exported static-analysis functions for a module"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("module_name", help="Module name the functions belong to")
        parser.add_argument(
            "functions_file",
            help='JSON array of {"name", "address", "size"} (addresses are module offsets)',
        )
        parser.add_argument(
            "--target-os", default="unknown", help="Target OS key (default: unknown)"
        )
        parser.add_argument("--db", help="Path to the static-analysis database")

    def execute(self, args: argparse.Namespace, formatter: ImportFormatter) -> int:
        try:
            raw = self.load_json_file(args.functions_file)
            functions = self._parse(raw)
            config = self.build_config(args)
        except (FileNotFoundError, ValueError, DynasymError) as e:
            formatter.output_error(str(e))
            return 2

        store = StaticAnalysisStore(config.static_db_path)
        target_os = args.target_os.lower()
        try:
            count = asyncio.run(store.save(target_os, args.module_name, functions))
        except DynasymError as e:
            formatter.output_error(f"Error storing functions: {e}")
            return 3

        formatter.format_output(
            {
                "count": count,
                "target_os": target_os,
                "module": args.module_name,
                "db": str(config.static_db_path),
            }
        )
        return 0

    def _parse(self, raw) -> List[StaticFunction]:
        if isinstance(raw, dict):
            raw = raw.get("functions")
        if not isinstance(raw, list):
            raise ValueError("functions file must hold a JSON array")
        functions = []
        for i, entry in enumerate(raw):
            try:
                functions.append(StaticFunction.model_validate(entry))
            except ValidationError as e:
                raise ValueError(f"entry {i} is not a valid function: {e}") from e
        return functions
