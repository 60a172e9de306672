"""Formatter for the modules command."""

from typing import Any, Dict, List

from .base import BaseFormatter, OutputFormat
from ..utils.formatting import format_hex, human_bytes


class ModulesFormatter(BaseFormatter):
    """Formatter for the loaded-module list."""

    def format_output(self, data: List[Dict[str, Any]]) -> None:
        if self.format_type == OutputFormat.JSON:
            self.output_json(data)
        elif self.format_type == OutputFormat.JSONL:
            self.output_jsonl(data)
        elif self.format_type == OutputFormat.RICH:
            self._format_rich(data)
        else:
            self._format_plain(data)

    def _format_rich(self, data: List[Dict[str, Any]]) -> None:
        table = self.create_table(
            title=f"[bold cyan]Modules ({len(data)})[/bold cyan]",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Base", style="yellow")
        table.add_column("Size", style="dim", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Path", style="dim", overflow="ellipsis", max_width=60)
        for m in data:
            table.add_row(
                format_hex(m["base"]),
                human_bytes(m["size"]),
                m["name"],
                m.get("path") or "",
            )
        self.console.print(table)

    def _format_plain(self, data: List[Dict[str, Any]]) -> None:
        lines = [f"modules: {len(data)}"]
        for m in data:
            lines.append(f"  {format_hex(m['base'])}\t{m['size']:#x}\t{m['name']}")
        self.output_plain("\n".join(lines))
