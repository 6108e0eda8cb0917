"""Command-line chat client for OpenAI compatible models.

Prompts are taken from the command line, from standard input or, with
``--repl``, from an interactive loop.  Turns can be kept in an encrypted
history file between invocations.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
import readline  # noqa: F401 – side-effect: history & line editing
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel

from openai import OpenAI  # type: ignore

from .core import (
    Config,
    Conversation,
    HistoryStore,
    IvyCLIError,
    CryptoError,
    NetworkError,
    ResponseFormatError,
    load_config,
    resolve_config_path,
)
from .core.config import BASE_URL_ENV_VAR
from .core.client import CompletionClient, OpenAICompletionClient, DEFAULT_TIMEOUT
from .provision import first_run_setup, get_api_key, get_passphrase
from .utils import (
    Ansi,
    ASSISTANT_LABEL,
    ERROR_TAG,
    USER_LABEL,
    WARNING_TAG,
    Renderer,
    Spinner,
    console,
    err_console,
)
from .utils.log import setup_logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helper classes
# ---------------------------------------------------------------------------


class ChatCLI:
    """Runs prompts through the model and keeps the history file in step."""

    def __init__(
        self,
        conversation: Conversation,
        client: CompletionClient,
        renderer: Renderer,
        store: Optional[HistoryStore] = None,
        passphrase: Optional[str] = None,
    ):
        self.conversation = conversation
        self.client = client
        self.renderer = renderer
        self.store = store
        self.passphrase = passphrase
        self.persist_history = store is not None and passphrase is not None

    # ---------------- History ----------------

    def load_history(self) -> None:
        """Merge the saved turns into the conversation.

        An unreadable history file is reported and then left alone: saving is
        switched off for this run so it does not get overwritten.
        """
        if not self.persist_history:
            return
        try:
            history = self.store.load(self.passphrase)
        except FileNotFoundError:
            logger.debug("No history file at %s", self.store.path)
            return
        except (CryptoError, OSError) as exc:
            self.persist_history = False
            err_console.print(
                f"{WARNING_TAG} Error loading conversation history: {escape(str(exc))}\n"
                "Continuing without history; it will not be saved this run "
                "(use --reset-history to discard it)."
            )
            return
        self.conversation.extend_history(history)

    def save_history(self) -> None:
        if not self.persist_history:
            return
        try:
            self.store.save(self.conversation.history(), self.passphrase)
        except (OSError, CryptoError) as exc:
            logger.warning("Error saving conversation history: %s", exc)

    def reset_history(self) -> None:
        if self.store is not None:
            self.store.reset()
            # The unreadable file, if any, is gone: saving is safe again.
            self.persist_history = self.passphrase is not None
        self.conversation.clear()

    # ---------------- One turn ----------------

    def ask(self, prompt: str) -> str:
        """Send *prompt*, render the reply and persist the turn.

        Network and response errors propagate; the unanswered prompt is taken
        back out of the conversation first.
        """
        self.conversation.add_user_message(prompt)
        try:
            with Spinner("Waiting for the model…"):
                reply = self.client.complete(self.conversation.messages)
        except (NetworkError, ResponseFormatError, KeyboardInterrupt):
            self.conversation.discard_pending_user_message()
            raise

        self.conversation.add_assistant_message(reply)
        self.renderer.render(reply)
        self.save_history()
        return reply

    # ---------------- Command handling ---------------

    def handle_command(self, line: str) -> bool:
        """Handle slash commands. Return False to exit REPL."""

        parts = line.strip().split()
        if not parts:
            return True

        cmd = parts[0].lower()

        if cmd == "/help":
            from . import __doc__ as _doc  # lazy import to avoid circularity

            console.print(_doc or "(no help available)", markup=False)

        elif cmd == "/exit":
            console.print("Bye!")
            return False

        elif cmd == "/reset":
            try:
                self.reset_history()
            except OSError as exc:
                console.print(Ansi.style(f"Failed to delete history: {escape(str(exc))}", Ansi.FG_RED))
                return True
            if self.store is None:
                console.print("[conversation cleared; history is disabled for this session]", markup=False)
            else:
                console.print("[conversation history deleted]", markup=False)

        else:
            console.print(Ansi.style(f"Unknown command: {escape(cmd)} (see /help)", Ansi.FG_RED))

        return True

    # ---------------- Interaction loop ---------------

    def _turn(self, line: str) -> bool:
        """Run one prompt inside the loop. Return False to exit REPL."""
        console.print(f"{ASSISTANT_LABEL}>")
        try:
            self.ask(line)
        except (NetworkError, ResponseFormatError) as exc:
            err_console.print(f"{ERROR_TAG} {escape(str(exc))}")
        except KeyboardInterrupt:
            console.print("\n[interrupted, exiting]", markup=False)
            return False
        return True

    def repl(self, first_prompt: Optional[str] = None) -> None:
        """Run the interactive read–eval–print-loop.

        *first_prompt*, when given, is answered before the first read.
        """
        console.print(Panel.fit("ivycli", style="bold magenta"))
        console.print(
            Ansi.style("Type your message and press Enter. Commands start with '/'.", Ansi.FG_YELLOW),
            Ansi.style("Press Ctrl+D or Ctrl+C to exit.", Ansi.FG_YELLOW),
            sep="\n",
        )

        if first_prompt and not self._turn(first_prompt):
            return

        while True:
            try:
                line = console.input(f"{USER_LABEL}> ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print("\n[exiting]", markup=False)
                break

            if not line:
                continue

            if line.startswith("/"):
                if not self.handle_command(line):
                    break
                continue

            if not self._turn(line):
                break


# ---------------------------------------------------------------------------
# Entrypoint helpers (keeping it separate simplifies __main__ handling)
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ivycli",
        description="Chat with OpenAI models from the terminal, with encrypted history.",
    )
    parser.add_argument("prompt", nargs="*", help="Prompt text (read from stdin when omitted)")
    parser.add_argument("--config", "-c", help="Path to the JSON configuration file")
    parser.add_argument(
        "--no-markdown", action="store_true", help="Print replies as raw text"
    )
    parser.add_argument(
        "--reset-history", action="store_true", help="Delete the conversation history file"
    )
    parser.add_argument(
        "--no-history", action="store_true", help="Neither load nor save conversation history"
    )
    parser.add_argument("--repl", action="store_true", help="Start an interactive session")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="HTTP request timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.timeout <= 0:
        parser.error("--timeout must be a positive number of seconds")
    return args


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _read_prompt(args: argparse.Namespace) -> str:
    if args.prompt:
        prompt = " ".join(args.prompt)
    else:
        if _is_interactive():
            err_console.print("Enter your message (end with Ctrl+D):")
        prompt = sys.stdin.read()
    prompt = prompt.strip()
    if not prompt:
        raise IvyCLIError("Empty prompt.")
    return prompt


def _load_or_provision_config(path: Path) -> Config:
    if not path.exists() and _is_interactive() and sys.stdout.isatty():
        console.print(f"No configuration found at {path}; starting first-run setup.", markup=False)
        return first_run_setup(path)
    return load_config(path)


def _build_client(config: Config, timeout: float) -> OpenAICompletionClient:
    client_kwargs = {"api_key": get_api_key(), "max_retries": 0, "timeout": timeout}
    base_url = os.getenv(BASE_URL_ENV_VAR)
    if base_url:
        client_kwargs["base_url"] = base_url

    client = OpenAI(**client_kwargs)  # type: ignore[arg-type]
    return OpenAICompletionClient(client, model=config.model, timeout=timeout)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)

    store = HistoryStore()
    try:
        if args.reset_history:
            if store.reset():
                console.print("Conversation history deleted.", markup=False)
            else:
                console.print("No conversation history to delete.", markup=False)
            if not args.prompt and not args.repl:
                return 0

        config = _load_or_provision_config(resolve_config_path(args.config))
        client = _build_client(config, args.timeout)
        prompt = None if args.repl else _read_prompt(args)

        passphrase = None
        if not args.no_history:
            passphrase = get_passphrase(interactive=_is_interactive())

        renderer = Renderer(
            enable_markdown=config.enable_markdown and not args.no_markdown,
            response_color=config.response_color,
        )
        conversation = Conversation(
            system_prompt=config.system_prompt,
            max_history_size=config.max_history_size,
        )
        cli = ChatCLI(
            conversation,
            client,
            renderer,
            store=None if args.no_history else store,
            passphrase=passphrase,
        )
        cli.load_history()

        if args.repl:
            cli.repl(" ".join(args.prompt) or None)
        else:
            cli.ask(prompt)
    except (IvyCLIError, OSError) as exc:
        err_console.print(f"{ERROR_TAG} {escape(str(exc))}")
        return 1
    except KeyboardInterrupt:
        err_console.print("\n[interrupted]", markup=False)
        return 1
    return 0


def run_cli() -> None:  # pragma: no cover
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run_cli()
