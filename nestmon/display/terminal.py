"""Terminal display for the nest status table.

Renders the in-memory display state as a rich table inside a Live region
that redraws a few times per second.
"""

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nestmon.display.surface import (
    PLACEHOLDER,
    ConnectionState,
    DeviceField,
    DisplayState,
    Style,
)
from nestmon.lib.config import Unit
from nestmon.lib.registry import Registry

GREEN = "rgb(40,167,69)"
RED = "rgb(220,53,69)"
AMBER = "rgb(133,100,4)"
ALERT_ROW = "on rgb(255,243,205)"

_STYLES = {
    Style.NORMAL: "",
    Style.EMPHASIS: f"bold {AMBER}",
    Style.SUCCESS: GREEN,
    Style.DANGER: RED,
}

_COLUMNS = (
    ("Temperature", DeviceField.TEMPERATURE, f" {Unit.CELSIUS}"),
    ("Humidity", DeviceField.HUMIDITY, f" {Unit.PERCENT}"),
    ("Vibration", DeviceField.VIBRATION, ""),
    ("Status", DeviceField.STATUS, ""),
    ("Last Update", DeviceField.LAST_UPDATE, ""),
)


class TerminalDisplay(DisplayState):
    """Display state drawn live on a terminal."""

    def __init__(
        self,
        registry: Registry,
        console: Console | None = None,
        refresh_per_second: float = 4,
    ) -> None:
        super().__init__(registry)
        self.console = console or Console()
        self._live = Live(
            get_renderable=self.render,
            console=self.console,
            refresh_per_second=refresh_per_second,
            transient=False,
        )

    def _banner(self) -> Text:
        color = GREEN if self.banner.state == ConnectionState.ONLINE else RED
        text = Text("● ", style=color)
        text.append(self.banner.text, style=f"bold {color}")
        return text

    def _table(self) -> Table:
        table = Table(box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("Nest", style="bold")
        for title, _field, _unit in _COLUMNS:
            table.add_column(title)

        for row in self.rows:
            cells: list[Text] = [Text(row.device.name)]
            for _title, field, unit in _COLUMNS:
                text = row.text(field)
                if unit and text != PLACEHOLDER:
                    text += unit
                cells.append(Text(text, style=_STYLES[row.style(field)]))
            table.add_row(*cells, style=ALERT_ROW if row.alert else None)
        return table

    def render(self) -> Panel:
        """Build the renderable for the current state."""
        return Panel(
            Group(self._banner(), self._table()),
            title="Turtle Nest Monitor",
            border_style="bold",
        )

    def start(self) -> None:
        self._live.start(refresh=True)

    def close(self) -> None:
        self._live.stop()
