"""User-facing notifications."""

from rich.console import Console
from rich.panel import Panel


class ConsoleNotifier:
    """Shows notifications as panels on the terminal."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def notify(self, title: str, message: str) -> None:
        self.console.print(Panel.fit(message, title=f"[bold]{title}[/]"))
