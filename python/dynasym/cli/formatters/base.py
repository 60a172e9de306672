"""Base output formatter abstraction for consistent CLI output across formats."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
import json
import sys

from rich.console import Console
from rich.table import Table


class OutputFormat(Enum):
    """Supported output formats."""

    PLAIN = "plain"
    RICH = "rich"
    JSON = "json"
    JSONL = "jsonl"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        """Create from string value."""
        return cls(value.lower())


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, format_type: OutputFormat = OutputFormat.PLAIN, stream=None):
        """Initialize formatter with output type."""
        self.format_type = format_type
        self.stream = stream
        self._console: Optional[Console] = None

    @property
    def console(self) -> Console:
        """Lazily created rich console bound to the output stream."""
        if self._console is None:
            self._console = Console(file=self.stream or sys.stdout)
        return self._console

    @abstractmethod
    def format_output(self, data: Any) -> None:
        """Format and output data according to the format type."""
        pass

    def output_json(self, data: Any, stream=None) -> None:
        """Output data as JSON."""
        stream = stream or self.stream or sys.stdout
        # One line so scripts can read the first line only
        json.dump(data, stream, separators=(",", ":"), default=str)
        stream.write("\n")
        stream.flush()

    def output_jsonl(self, data: Any, stream=None) -> None:
        """Output data as JSON Lines."""
        stream = stream or self.stream or sys.stdout
        if isinstance(data, (list, tuple)):
            for item in data:
                json.dump(item, stream, default=str)
                stream.write("\n")
        else:
            json.dump(data, stream, default=str)
            stream.write("\n")
        stream.flush()

    def output_plain(self, text: str, stream=None) -> None:
        """Output plain text."""
        stream = stream or self.stream or sys.stdout
        stream.write(text)
        if not text.endswith("\n"):
            stream.write("\n")
        stream.flush()

    def output_error(self, text: str) -> None:
        """Report an error; JSON formats get an error object."""
        if self.format_type in (OutputFormat.JSON, OutputFormat.JSONL):
            self.output_json({"error": text})
        else:
            self.output_plain(f"Error: {text}", stream=sys.stderr)

    def create_table(self, title: Optional[str] = None, **kwargs) -> Optional[Table]:
        """Create a rich table if in rich mode, otherwise return None."""
        if self.format_type == OutputFormat.RICH:
            return Table(title=title, **kwargs)
        return None
