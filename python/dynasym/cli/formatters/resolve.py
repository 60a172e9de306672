"""Formatters for address resolution and reverse lookup."""

from typing import Any, Dict, List

from .base import BaseFormatter, OutputFormat
from ..utils.formatting import format_hex


class ResolveFormatter(BaseFormatter):
    """One line per queried address: ``0xADDR  module@symbol + 0xOFF``."""

    def format_output(self, data: List[Dict[str, Any]]) -> None:
        if self.format_type == OutputFormat.JSON:
            self.output_json(data)
        elif self.format_type == OutputFormat.JSONL:
            self.output_jsonl(data)
        elif self.format_type == OutputFormat.RICH:
            table = self.create_table(show_header=True, header_style="bold green")
            table.add_column("Address", style="yellow")
            table.add_column("Location", style="green")
            for row in data:
                table.add_row(format_hex(row["address"]), row["text"] or "[dim]?[/dim]")
            self.console.print(table)
        else:
            self.output_plain(
                "\n".join(
                    f"{format_hex(row['address'])}\t{row['text'] or '?'}" for row in data
                )
            )


class LookupFormatter(BaseFormatter):
    """Result of a name to address lookup."""

    def format_output(self, data: Dict[str, Any]) -> None:
        if self.format_type in (OutputFormat.JSON, OutputFormat.JSONL):
            self.output_json(data)
            return
        sym = data.get("symbol")
        if sym is None:
            text = f"{data['query']}: not found in {data['module']}"
        else:
            text = (
                f"{format_hex(sym['address'])}\t{sym['module_name']}@{sym['name']}"
                f"\t{sym['end_address'] - sym['address']:#x}"
            )
        if self.format_type == OutputFormat.RICH:
            style = "red" if sym is None else "green"
            self.console.print(f"[{style}]{text}[/{style}]")
        else:
            self.output_plain(text)
