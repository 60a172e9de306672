"""Main CLI entry point with modular command structure."""

import argparse
import sys
from typing import List, Optional

from .commands import (
    DemangleCommand,
    ImportFunctionsCommand,
    LookupCommand,
    ModulesCommand,
    ResolveCommand,
    SymbolsCommand,
)
from .formatters import (
    DemangleFormatter,
    ImportFormatter,
    LookupFormatter,
    ModulesFormatter,
    ResolveFormatter,
    SymbolsFormatter,
)
from .. import __version__
from ..config import get_config
from ..errors import ConfigError
from ..logging import configure_logging


class DynasymCLI:
    """Main CLI application."""

    def __init__(self):
        self.commands = {
            "modules": ModulesCommand(),
            "symbols": SymbolsCommand(),
            "resolve": ResolveCommand(),
            "lookup": LookupCommand(),
            "demangle": DemangleCommand(),
            "import-functions": ImportFunctionsCommand(),
        }

        # Map commands to their formatters
        self.formatter_map = {
            "modules": ModulesFormatter,
            "symbols": SymbolsFormatter,
            "resolve": ResolveFormatter,
            "lookup": LookupFormatter,
            "demangle": DemangleFormatter,
            "import-functions": ImportFormatter,
        }

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="dynasym", description="Symbol resolution for live-process debugging"
        )
        parser.add_argument(
            "--version", action="version", version=f"%(prog)s {__version__}"
        )

        subparsers = parser.add_subparsers(
            dest="cmd", required=True, help="Available commands"
        )
        for cmd in self.commands.values():
            cmd.setup_parser(subparsers)

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI application."""
        parser = self.create_parser()
        args = parser.parse_args(argv)

        command = self.commands.get(args.cmd)
        if not command:
            print(f"Unknown command: {args.cmd}", file=sys.stderr)
            return 1

        if args.verbose:
            level = "DEBUG"
        elif args.quiet:
            level = "ERROR"
        else:
            try:
                level = get_config().log_level
            except ConfigError:
                # Reported again by the command when it builds its config.
                level = "WARNING"
        configure_logging(level=level, add_timestamp=args.verbose)

        output_format = command.get_output_format(args)
        formatter_class = self.formatter_map.get(args.cmd)
        if not formatter_class:
            print(f"No formatter for command: {args.cmd}", file=sys.stderr)
            return 1

        formatter = formatter_class(output_format)

        try:
            return command.execute(args, formatter)
        except KeyboardInterrupt:
            print("\nInterrupted by user", file=sys.stderr)
            return 130
        except Exception as e:
            if args.verbose:
                import traceback

                traceback.print_exc()
            else:
                print(f"Error: {e}", file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = DynasymCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
