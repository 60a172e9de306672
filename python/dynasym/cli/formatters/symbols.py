"""Formatter for symbols command output."""

from .base import BaseFormatter, OutputFormat
from ..utils.formatting import format_hex


class SymbolsFormatter(BaseFormatter):
    """Formatter for a module's merged symbol table.

    Expects ``{"module": str, "base": int, "total": int, "symbols": [...]}``
    where each symbol has ``address``, ``size``, ``name`` and ``display``.
    """

    def format_output(self, data: dict) -> None:
        if self.format_type == OutputFormat.JSON:
            self.output_json(data)
        elif self.format_type == OutputFormat.JSONL:
            for sym in data["symbols"]:
                self.output_jsonl({"module": data["module"], **sym})
        elif self.format_type == OutputFormat.RICH:
            self._format_rich(data)
        else:
            self._format_plain(data)

    def _format_rich(self, data: dict) -> None:
        symbols = data["symbols"]
        table = self.create_table(
            title=(
                f"[bold magenta]{data['module']}[/bold magenta] "
                f"[dim]({len(symbols)} of {data['total']} symbols)[/dim]"
            ),
            show_header=True,
            header_style="bold magenta",
            expand=False,
        )
        table.add_column("Address", style="yellow")
        table.add_column("Size", style="dim", justify="right")
        table.add_column("Symbol", style="magenta", overflow="ellipsis", max_width=80)
        for sym in symbols:
            table.add_row(format_hex(sym["address"]), f"{sym['size']:#x}", sym["display"])
        self.console.print(table)

    def _format_plain(self, data: dict) -> None:
        symbols = data["symbols"]
        lines = [f"{data['module']}: {len(symbols)} of {data['total']}"]
        for sym in symbols:
            lines.append(f"  {format_hex(sym['address'])}\t{sym['size']:#x}\t{sym['display']}")
        self.output_plain("\n".join(lines))
