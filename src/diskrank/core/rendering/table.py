from __future__ import annotations

"""
Rich Table Renderer.

Turns a Snapshot into a two-column `rich` table (Path, Size) and prints it on
a Console. Live redraws clear the terminal first; when the console is not
attached to a terminal the clear is a no-op and each drawing is appended.

Paths are inserted as literal Text, never parsed as console markup. On a
terminal long paths fold inside the Path column; piped output is widened to
the table's natural width so every path stays on a single line.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from diskrank.core.rendering.base import TABLE_HEADERS, SnapshotRenderer
from diskrank.domain.models import Snapshot
from diskrank.utils.format import format_bytes

# Upper bound used when measuring a table for non-terminal output
_UNBOUNDED_WIDTH = 1 << 16


def build_table(snapshot: Snapshot, *, human_readable: bool = False) -> Table:
    """
    Build the ranking table for a snapshot.

    Args:
        snapshot: Ranked records to display.
        human_readable: Render sizes with binary units instead of raw bytes.

    Returns:
        Table: A table with one row per record in ranked order.
    """
    path_header, size_header = TABLE_HEADERS
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column(path_header, overflow="fold")
    table.add_column(size_header, justify="right", no_wrap=True)

    for record in snapshot:
        size = format_bytes(record.size) if human_readable else str(record.size)
        table.add_row(Text(record.path), Text(size))

    return table


class TableRenderer(SnapshotRenderer):
    """Renders snapshots to a rich Console (stdout by default)."""

    def __init__(self, console: Optional[Console] = None, *, human_readable: bool = False):
        # highlight=False keeps numbers and paths uncolored
        self.console = console or Console(highlight=False)
        self.human_readable = human_readable

    def render(self, snapshot: Snapshot, *, redraw: bool = False) -> None:
        table = build_table(snapshot, human_readable=self.human_readable)
        if not self.console.is_terminal:
            self._fit_width(table)
        if redraw:
            self.console.clear()
        self.console.print(table)

    def _fit_width(self, table: Table) -> None:
        """Grow a non-terminal console so no row has to wrap."""
        options = self.console.options.update_width(_UNBOUNDED_WIDTH)
        natural = self.console.measure(table, options=options).maximum
        if natural > self.console.width:
            self.console.width = natural
