"""Logging setup: standard logging routed through rich on stderr."""
import logging

from rich.logging import RichHandler

from .ansi import err_console


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=err_console, show_path=verbose, markup=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # The HTTP stack is chatty at DEBUG; keep it to warnings.
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING if not verbose else logging.INFO)
