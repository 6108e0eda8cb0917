"""Transient "waiting for the model" indicator."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.status import Status

from .ansi import err_console


class Spinner:
    """Show a spinner on stderr while a request is in flight.

    Nothing is drawn when stderr is not a terminal, so piped output stays
    exactly the reply text.
    """

    def __init__(self, text: str = "", console: Optional[Console] = None):
        self._console = console or err_console
        self._text = text
        self._status: Optional[Status] = None

    def start(self) -> None:
        if self._status is not None or not self._console.is_terminal:
            return
        self._status = self._console.status(self._text, spinner="dots")
        self._status.start()

    def stop(self) -> None:
        if self._status is None:
            return
        self._status.stop()
        self._status = None

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
