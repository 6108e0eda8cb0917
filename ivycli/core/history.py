"""Encrypted, on-disk conversation history."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import crypto
from .errors import CryptoError

logger = logging.getLogger(__name__)

ROLES = ("system", "user", "assistant")

Message = Dict[str, str]


def strip_system_messages(messages: List[Dict[str, Any]]) -> List[Message]:
    """Return *messages* without system entries."""
    return [m for m in messages if m.get("role") != "system"]


def trim_history(messages: List[Message], max_history_size: int) -> List[Message]:
    """Keep the most recent *max_history_size* turns (two messages per turn)."""
    limit = max_history_size * 2
    if limit <= 0:
        return []
    return list(messages[-limit:])


def _decode(plaintext: bytes) -> List[Message]:
    try:
        data = json.loads(plaintext.decode("utf-8"))
    except ValueError as exc:
        raise CryptoError(f"history payload is not valid JSON: {exc}") from None

    if not isinstance(data, list):
        raise CryptoError("history payload is not a message list")

    messages: List[Message] = []
    for item in data:
        if (
            not isinstance(item, dict)
            or item.get("role") not in ROLES
            or not isinstance(item.get("content"), str)
        ):
            raise CryptoError("history payload contains a malformed message")
        messages.append({"role": item["role"], "content": item["content"]})
    return messages


class HistoryStore:
    """Conversation history encrypted with a user passphrase.

    The store only reads and writes whole lists: callers decide what goes in
    (see :func:`strip_system_messages` and :func:`trim_history`).
    """

    HISTORY_DIR = Path.home() / ".config" / "ivycli"
    FILENAME = "history.enc"

    def __init__(self, path: Optional[Path] = None, iterations: int = crypto.KDF_ITERATIONS) -> None:
        self.path = Path(path) if path is not None else self.HISTORY_DIR / self.FILENAME
        self.iterations = iterations

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, passphrase: str) -> List[Message]:
        """Return the stored messages.

        Raises ``FileNotFoundError`` when there is no history yet and
        :class:`CryptoError` when the file cannot be decrypted.
        """
        blob = self.path.read_bytes()
        messages = _decode(crypto.decrypt(blob, passphrase, self.iterations))
        logger.debug("Loaded %d history messages from %s", len(messages), self.path)
        return messages

    def save(self, messages: List[Message], passphrase: str) -> None:
        payload = json.dumps(
            [{"role": m["role"], "content": m["content"]} for m in messages],
            ensure_ascii=False,
        ).encode("utf-8")
        blob = crypto.encrypt(payload, passphrase, self.iterations)

        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        # Write next to the target so the final rename stays on one filesystem.
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(blob)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("Saved %d history messages to %s", len(messages), self.path)

    def reset(self) -> bool:
        """Delete the history file. Return whether there was one."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Deleted history file %s", self.path)
        return True
