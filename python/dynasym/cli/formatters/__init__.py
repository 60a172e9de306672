"""Output formatters for CLI commands."""

from .base import BaseFormatter, OutputFormat
from .modules import ModulesFormatter
from .symbols import SymbolsFormatter
from .resolve import ResolveFormatter, LookupFormatter
from .demangle import DemangleFormatter, ImportFormatter

__all__ = [
    "BaseFormatter",
    "OutputFormat",
    "ModulesFormatter",
    "SymbolsFormatter",
    "ResolveFormatter",
    "LookupFormatter",
    "DemangleFormatter",
    "ImportFormatter",
]
