"""Table rendering for reports.

Rows are lists of cells; a cell is a string, a number, or None. Numbers
are shown with three decimals and None renders as an empty cell.
"""

from typing import Optional, Sequence, Union

from rich import box
from rich.console import Console
from rich.table import Table

Cell = Union[str, float, int, None]

MARKDOWN_ALIGN = {"left": ":--", "right": "--:", "center": ":-:"}


def format_cell(value: Cell) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return f"{value:.3f}"


def _alignments(headers: Sequence[str], align: Optional[Sequence[str]]) -> list[str]:
    if align is None:
        return ["left"] + ["right"] * (len(headers) - 1)
    if len(align) != len(headers):
        raise ValueError("align must have one entry per column")
    return list(align)


def build_console_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Cell]],
    title: str = "",
    align: Optional[Sequence[str]] = None,
) -> Table:
    """Build a rich Table with ASCII-safe borders."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
        box=box.ASCII,
    )

    for header, justify in zip(headers, _alignments(headers, align)):
        table.add_column(header, justify=justify, no_wrap=True)

    for row in rows:
        table.add_row(*(format_cell(cell) for cell in row))

    return table


def render_console(
    console: Console,
    headers: Sequence[str],
    rows: Sequence[Sequence[Cell]],
    title: str = "",
    align: Optional[Sequence[str]] = None,
) -> None:
    """Print a table to ``console``."""
    console.print(build_console_table(headers, rows, title=title, align=align))


def render_markdown(
    headers: Sequence[str],
    rows: Sequence[Sequence[Cell]],
    align: Optional[Sequence[str]] = None,
) -> str:
    """Render a GitHub-flavoured markdown table.

    Returns:
        The table text, without a trailing newline.
    """
    alignments = _alignments(headers, align)

    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join(MARKDOWN_ALIGN[a] for a in alignments) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(format_cell(cell) for cell in row) + " |")

    return "\n".join(lines)
