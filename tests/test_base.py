import io
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from ivycli import ChatCLI, Conversation, HistoryStore
from ivycli.core.client import CompletionClient
from ivycli.utils import Renderer

# Keeps key derivation fast in tests; production uses crypto.KDF_ITERATIONS.
TEST_ITERATIONS = 1000
PASSPHRASE = "correct horse battery staple"


class ScriptedClient(CompletionClient):
    """Replays canned replies (or raises canned errors) in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    def complete(self, messages):
        self.requests.append([dict(m) for m in messages])
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class BaseIvyCLITest(unittest.TestCase):
    def setUp(self):
        # Temporary directory for the history file
        self.tmp_dir = Path(tempfile.mkdtemp(prefix="ivycli_test_"))
        self.history_path = self.tmp_dir / "history.enc"
        self.store = HistoryStore(self.history_path, iterations=TEST_ITERATIONS)

        # Capture everything the CLI prints
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.console_patcher = patch("ivycli.cli.console", Console(file=self.out, width=80))
        self.err_console_patcher = patch("ivycli.cli.err_console", Console(file=self.err, width=80))
        self.console_patcher.start()
        self.err_console_patcher.start()

        self.rendered = io.StringIO()
        self.renderer = Renderer(
            enable_markdown=False, console=Console(file=self.rendered, width=80)
        )
        self.client = ScriptedClient([])

    def tearDown(self):
        self.console_patcher.stop()
        self.err_console_patcher.stop()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def make_cli(self, replies, system_prompt=None, max_history_size=10, persist=True):
        self.client.replies = list(replies)
        conversation = Conversation(system_prompt=system_prompt, max_history_size=max_history_size)
        return ChatCLI(
            conversation,
            self.client,
            self.renderer,
            store=self.store if persist else None,
            passphrase=PASSPHRASE if persist else None,
        )
