"""Table rendering for CLI output, built on rich."""

from typing import Any

from rich.console import Console
from rich.table import Table as RichTable


class TableColumn:
    """How one column is titled, styled and aligned."""

    def __init__(
        self,
        name: str,
        style: str | None = None,
        justify: str = "left",
        no_wrap: bool = False,
    ):
        self.name = name
        self.style = style
        self.justify = justify
        self.no_wrap = no_wrap


class Table:
    """A titled table of rows, rendered to the terminal or captured as text.

    Example usage:
        columns = [
            TableColumn("Category", style="bold cyan"),
            TableColumn("Supplier"),
            TableColumn("Price", justify="right"),
        ]
        table = Table("Party Plan", columns, caption="premium tier")
        table.add_row(["venue", "Little Explorers Hall", "£250"])
        table.add_row(["cakes", "—", "—"], style="red")
        table.render()
    """

    def __init__(
        self,
        title: str | None = None,
        columns: list[TableColumn] | None = None,
        show_header: bool = True,
        show_lines: bool = False,
        caption: str | None = None,
    ):
        self.title = title
        self.columns = columns or []
        self.show_header = show_header
        self.show_lines = show_lines
        self.caption = caption
        self.rows: list[tuple[list[Any], str | None]] = []

    def add_row(self, values: list[Any], style: str | None = None) -> None:
        """Append a row; ``None`` cells render as an em dash placeholder."""
        self.rows.append((values, style))

    def __len__(self) -> int:
        return len(self.rows)

    def _build_rich_table(self) -> RichTable:
        table = RichTable(
            title=self.title,
            caption=self.caption,
            show_header=self.show_header,
            show_lines=self.show_lines,
        )
        for col in self.columns:
            table.add_column(
                col.name,
                style=col.style,
                justify=col.justify,  # type: ignore
                no_wrap=col.no_wrap,
            )
        for values, row_style in self.rows:
            table.add_row(*("—" if v is None else str(v) for v in values), style=row_style)
        return table

    def render(self) -> None:
        Console().print(self._build_rich_table())

    def to_string(self, width: int = 120) -> str:
        """Return the rendered table as plain text (used by tests)."""
        console = Console(width=width)
        with console.capture() as capture:
            console.print(self._build_rich_table())
        return capture.get()
