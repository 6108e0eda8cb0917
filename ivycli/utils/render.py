"""Reply rendering: rich markdown or verbatim text."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from .ansi import console as default_console

CODE_THEME = "monokai"


class Renderer:
    def __init__(
        self,
        enable_markdown: bool = True,
        response_color: Optional[str] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.enable_markdown = enable_markdown
        self.response_color = response_color
        self.console = console or default_console

    def render(self, text: str) -> None:
        if self.enable_markdown:
            self.console.print(
                Markdown(text, code_theme=CODE_THEME, style=self.response_color or "none")
            )
            return
        # Raw mode bypasses rich entirely: tabs, carriage returns and any
        # other characters reach the stream untouched. response_color only
        # applies to markdown output.
        out = self.console.file
        out.write(text + "\n")
        out.flush()
