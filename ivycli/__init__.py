"""ivycli: chat with OpenAI models from the terminal.

Features
--------
1. One-shot prompts: `ivycli "explain rsync -a"` or `echo "..." | ivycli`.
2. Interactive mode with `--repl`.
3. Encrypted history: previous turns are stored in ~/.config/ivycli/history.enc
   (AES-256-GCM, key derived from your passphrase) and sent along with new
   prompts. Disable with `--no-history`, delete with `--reset-history`.

REPL commands:

    /help     show this help
    /reset    delete the conversation history
    /exit     leave the session

Environment variables
---------------------
* OPENAI_API_KEY     your OpenAI API key (required)
* OPENAI_BASE_URL    custom base URL (optional, for self-hosting/proxy)
* IVYCLI_PASSPHRASE  history passphrase (asked for interactively when unset)
* IVYCLI_CONFIG_PATH config file location (default ~/.config/ivycli/config.json)
"""
# Re-export useful symbols for convenience
from .core import Config, Conversation, HistoryStore, SYSTEM_PROMPT
from .core.client import CompletionClient, OpenAICompletionClient
from .cli import ChatCLI, main, run_cli

__all__ = [
    "Config",
    "Conversation",
    "HistoryStore",
    "SYSTEM_PROMPT",
    "CompletionClient",
    "OpenAICompletionClient",
    "ChatCLI",
    "main",
    "run_cli",
]
