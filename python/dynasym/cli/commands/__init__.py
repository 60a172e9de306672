"""CLI command implementations."""

from .base import BaseCommand
from .modules import ModulesCommand
from .symbols import SymbolsCommand
from .resolve import ResolveCommand
from .lookup import LookupCommand
from .demangle import DemangleCommand
from .import_functions import ImportFunctionsCommand

__all__ = [
    "BaseCommand",
    "ModulesCommand",
    "SymbolsCommand",
    "ResolveCommand",
    "LookupCommand",
    "DemangleCommand",
    "ImportFunctionsCommand",
]
