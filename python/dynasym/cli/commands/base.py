"""Base command class for all CLI commands."""

import argparse
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List

from ..formatters.base import OutputFormat, BaseFormatter
from ..utils.formatting import parse_module_spec
from ...cache import SymbolCache
from ...config import CacheConfig
from ...models import Module
from ...sources import AgentClient


class BaseCommand(ABC):
    """Abstract base class for CLI commands."""

    def __init__(self):
        self.name = self.get_name()
        self.help = self.get_help()

    @abstractmethod
    def get_name(self) -> str:
        """Return the command name."""
        pass

    @abstractmethod
    def get_help(self) -> str:
        """Return the command help text."""
        pass

    @abstractmethod
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments to the parser."""
        pass

    @abstractmethod
    def execute(self, args: argparse.Namespace, formatter: BaseFormatter) -> int:
        """Execute the command with the given arguments and formatter."""
        pass

    def setup_parser(self, subparsers) -> argparse.ArgumentParser:
        """Set up the command parser."""
        parser = subparsers.add_parser(self.name, help=self.help)
        self.add_common_arguments(parser)
        self.add_arguments(parser)
        return parser

    def add_common_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add common arguments shared by all commands."""
        parser.add_argument(
            "--format",
            choices=["plain", "rich", "json", "jsonl"],
            default="plain",
            help="Output format (default: plain)",
        )
        parser.add_argument(
            "--json", action="store_true", help="Alias for --format json"
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable colored output (forces plain format)",
        )
        parser.add_argument(
            "--quiet", "-q", action="store_true", help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )

    def add_connection_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Arguments for commands that talk to the agent or the static database."""
        parser.add_argument("--host", help="Debug agent host (env: DYNASYM_AGENT_HOST)")
        parser.add_argument(
            "--port", type=int, help="Debug agent port (default: 3030)"
        )
        parser.add_argument("--token", help="Debug agent bearer token")
        parser.add_argument(
            "--target-os", help="Target OS key for static-analysis lookups"
        )
        parser.add_argument("--db", help="Path to the static-analysis database")
        parser.add_argument(
            "--no-demangle", action="store_true", help="Show raw symbol names"
        )
        parser.add_argument(
            "--module",
            dest="module_specs",
            action="append",
            default=[],
            metavar="NAME:BASE:SIZE",
            help="Describe a loaded module instead of asking the agent (repeatable)",
        )

    def build_config(self, args: argparse.Namespace) -> CacheConfig:
        """Environment-derived config with command-line overrides applied."""
        config = CacheConfig()
        if getattr(args, "host", None):
            config.agent_host = args.host
        if getattr(args, "port", None):
            config.agent_port = args.port
        if getattr(args, "token", None):
            config.agent_token = args.token
        if getattr(args, "target_os", None):
            config.target_os = args.target_os
        if getattr(args, "db", None):
            config.static_db_path = Path(args.db)
        if getattr(args, "no_demangle", False):
            config.demangle_enabled = False
        config.validate()
        return config

    def build_cache(self, args: argparse.Namespace) -> SymbolCache:
        return SymbolCache.from_config(self.build_config(args))

    async def get_modules(self, args: argparse.Namespace, cache: SymbolCache) -> List[Module]:
        """Modules given with ``--module``, else the agent's module list."""
        specs = getattr(args, "module_specs", None) or []
        if specs:
            return [parse_module_spec(s) for s in specs]
        if not isinstance(cache.live_source, AgentClient):
            return []
        return await cache.live_source.list_modules()

    def load_json_file(self, path: str) -> Any:
        p = self.validate_file_path(path)
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)

    def validate_file_path(self, path: str) -> Path:
        """Validate that a file path exists and is readable."""
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not p.is_file():
            raise ValueError(f"Not a file: {path}")
        return p

    def get_output_format(self, args: argparse.Namespace) -> OutputFormat:
        """Determine the output format from arguments."""
        if getattr(args, "json", False):
            return OutputFormat.JSON
        if args.no_color:
            return OutputFormat.PLAIN
        try:
            return OutputFormat.from_string(args.format)
        except (ValueError, AttributeError):
            return OutputFormat.RICH
