"""Formatters for demangling and static-function import output."""

from typing import Any, Dict, List

from .base import BaseFormatter, OutputFormat


class DemangleFormatter(BaseFormatter):
    def format_output(self, data: List[Dict[str, str]]) -> None:
        if self.format_type == OutputFormat.JSON:
            self.output_json(data)
        elif self.format_type == OutputFormat.JSONL:
            self.output_jsonl(data)
        elif self.format_type == OutputFormat.RICH:
            table = self.create_table(show_header=True, header_style="bold blue")
            table.add_column("Raw", style="dim", overflow="fold")
            table.add_column("Display", style="blue", overflow="fold")
            for row in data:
                table.add_row(row["raw"], row["display"])
            self.console.print(table)
        else:
            self.output_plain("\n".join(row["display"] for row in data))


class ImportFormatter(BaseFormatter):
    def format_output(self, data: Dict[str, Any]) -> None:
        if self.format_type in (OutputFormat.JSON, OutputFormat.JSONL):
            self.output_json(data)
            return
        text = (
            f"stored {data['count']} functions for "
            f"{data['target_os']}/{data['module']} in {data['db']}"
        )
        if self.format_type == OutputFormat.RICH:
            self.console.print(f"[green]{text}[/green]")
        else:
            self.output_plain(text)
