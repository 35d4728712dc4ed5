"""
Terminal output helpers built on rich.
"""
from typing import Any, Optional

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text


class OutputSink:
    """Prints plain, colored and emphasized lines to the terminal."""

    def __init__(self, console: Optional[Console] = None, use_color: bool = True):
        self.use_color = use_color
        self.console = console or Console(highlight=False, no_color=not use_color)

    def colorize(self, text: Any, color: Optional[str]) -> str:
        """Return rich markup for text in the given color."""
        text = escape(str(text))
        if not color or not self.use_color:
            return text
        return f"[{color}]{text}[/{color}]"

    def log(self, msg: str, color: Optional[str] = None) -> None:
        """Print one line. msg may contain markup from colorize()."""
        if color:
            msg = f"[{color}]{msg}[/{color}]" if self.use_color else msg
        self.console.print(msg)

    def errorlog(self, msg: str) -> None:
        self.console.print(f"{self.colorize('Error:', 'bold red')} {self.colorize(msg, 'red')}")

    def biglog(self, value: Any, color: Optional[str] = "green", title: Optional[str] = None) -> None:
        """Print value emphasized inside a panel, with an optional heading above it.

        Heading and value go out in a single console write.
        """
        style = f"bold {color}" if color and self.use_color else "bold"
        body = Text(str(value), style=style, justify="center")
        if title:
            body = Group(Text(title, justify="center"), body)
        self.console.print(Panel.fit(body, padding=(0, 4)))
