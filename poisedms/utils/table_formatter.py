"""
Table Formatter

Renders query results as bordered ASCII tables for the terminal. The caller
passes the column labels in display order and the rows as mappings of label to
raw value; this module turns every value into display text:

- None or blank values are shown as "N/A"
- The "Finalised" column shows 1/True as "Yes" and 0/False as "No"
- Dates use ISO format, amounts keep their stored precision

An empty result prints a single "No data found for <title>." line instead of
a table.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from rich import box
from rich.table import Table
from rich.text import Text

MISSING_VALUE = "N/A"
FINALISED_COLUMN = "Finalised"
FINALISED_LABELS = {"1": "Yes", "0": "No"}


def format_cell(column: str, value: Any) -> str:
    """Convert one stored value into the text shown in the table."""
    if isinstance(value, bool):
        text = "1" if value else "0"
    elif isinstance(value, date):
        text = value.isoformat()
    elif value is None:
        text = ""
    else:
        text = str(value)

    if not text.strip():
        return MISSING_VALUE

    if column == FINALISED_COLUMN:
        return FINALISED_LABELS.get(text, text)
    return text


def build_table(title: str, columns: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> Table:
    table = Table(title=title, box=box.ASCII, show_lines=False, title_justify="left")
    for column in columns:
        table.add_column(column)

    for row in rows:
        # Cells are plain Text, never markup
        table.add_row(*[Text(format_cell(column, row.get(column))) for column in columns])
    return table


def display_table(terminal, title: str, columns: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> bool:
    """
    Print ``rows`` as a table with ``title`` above it.

    Args:
        terminal: Services.terminal.Terminal used for output
        title (str): Table title, also used in the empty message
        columns (Sequence[str]): Column labels in display order
        rows (Sequence[Mapping]): One mapping of label to value per row

    Returns:
        bool: True if a table was printed, False for an empty result
    """
    if not rows:
        terminal.say(f"\nNo data found for {title}.\n")
        return False

    terminal.show(build_table(title, columns, rows))
    return True
