"""In-memory conversation buffer."""
from typing import List, Optional

from .history import Message, strip_system_messages, trim_history

# Used when the config file does not set ``system_prompt``.  It tells the model
# that its answers end up in a terminal so it formats them accordingly.
SYSTEM_PROMPT = (
    "You are an AI assistant running in a terminal (CLI) environment. "
    "Optimise all answers for 80-column readability, prefer plain text "
    "or concise bullet lists over heavy markup, and wrap code snippets in "
    "fenced blocks when helpful. Do not emit trailing spaces or control "
    "characters."
)


class Conversation:
    """Ordered list of messages sent to the model on every request."""

    def __init__(
        self,
        system_prompt: Optional[str] = None,
        history: Optional[List[Message]] = None,
        max_history_size: int = 10,
    ) -> None:
        self.system_prompt = system_prompt
        self.max_history_size = max_history_size
        self.messages: List[Message] = []
        if system_prompt:
            self.messages.append({"role": "system", "content": system_prompt})
        if history:
            self.extend_history(history)

    def extend_history(self, history: List[Message]) -> None:
        """Insert previously saved turns ahead of anything said this run."""
        turns = trim_history(strip_system_messages(history), self.max_history_size)
        head = 1 if self.messages and self.messages[0]["role"] == "system" else 0
        self.messages[head:head] = turns

    def add_user_message(self, content: str) -> None:
        self.messages.append({"role": "user", "content": content})

    def add_assistant_message(self, content: str) -> None:
        self.messages.append({"role": "assistant", "content": content})

    def discard_pending_user_message(self) -> None:
        """Drop a trailing user message that never got an answer."""
        if self.messages and self.messages[-1]["role"] == "user":
            self.messages.pop()

    def clear(self) -> None:
        """Forget every turn but keep the system prompt."""
        self.messages = [m for m in self.messages if m["role"] == "system"]

    def history(self) -> List[Message]:
        """Messages to persist: no system prompt, capped to the configured size."""
        return trim_history(strip_system_messages(self.messages), self.max_history_size)
