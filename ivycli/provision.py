"""First-run provisioning and credential lookup.

Everything here touches the user's environment (prompts, dotfiles, the config
directory) and runs before the chat core is built.  Shell profiles are only
ever read, never written.
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Optional

import questionary

from .core.config import (
    API_KEY_ENV_VAR,
    PASSPHRASE_ENV_VAR,
    DEFAULT_MAX_HISTORY_SIZE,
    Config,
)
from .core.conversation import SYSTEM_PROMPT
from .core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Offered by the setup wizard; any model name is accepted in the config file.
SUPPORTED_MODELS = [
    "gpt-4.1",
    "gpt-4.1-mini",
    "gpt-4o",  # default
    "gpt-4o-mini",
    "gpt-4",
    "o3",
    "o4-mini",
]
DEFAULT_MODEL = "gpt-4o"

PROFILE_FILES = (".zshrc", ".bashrc", ".profile")

_KEY_PATTERN = re.compile(
    r"^\s*(?:export\s+)?OPENAI_API_KEY\s*=\s*['\"]?([^'\"\n]+)['\"]?", re.MULTILINE
)


def read_key_from_profiles(home: Optional[Path] = None) -> Optional[str]:
    """Look for an ``OPENAI_API_KEY=...`` assignment in common shell profiles."""
    home = home or Path.home()
    for name in PROFILE_FILES:
        path = home / name
        try:
            text = path.read_text(errors="replace")
        except OSError:
            continue
        match = _KEY_PATTERN.search(text)
        if match:
            logger.debug("Using %s found in %s", API_KEY_ENV_VAR, path)
            return match.group(1).strip()
    return None


def get_api_key() -> str:
    api_key = os.getenv(API_KEY_ENV_VAR) or read_key_from_profiles()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV_VAR} must be set via environment variables "
            f"(also tried {', '.join('~/' + n for n in PROFILE_FILES)})."
        )
    return api_key


def get_passphrase(interactive: bool) -> str:
    """Return the history passphrase from the environment or an interactive prompt."""
    passphrase = os.getenv(PASSPHRASE_ENV_VAR)
    if passphrase:
        return passphrase
    if not interactive:
        raise ConfigurationError(
            f"{PASSPHRASE_ENV_VAR} must be set to use conversation history "
            "(or pass --no-history)."
        )
    try:
        passphrase = questionary.password(
            "Enter passphrase for conversation history encryption:"
        ).ask()
    except (KeyboardInterrupt, EOFError):
        passphrase = None
    if not passphrase:
        raise ConfigurationError("A passphrase is required to use conversation history.")
    return passphrase


def first_run_setup(path: Path) -> Config:
    """Ask for the basic settings and write them to *path*.

    Only called when no config file exists yet.
    """
    try:
        model = questionary.select(
            "Select a model:", choices=SUPPORTED_MODELS, default=DEFAULT_MODEL
        ).ask()
        if not model:
            raise ConfigurationError("Setup cancelled: no model selected.")
        system_prompt = questionary.text(
            "System prompt (leave empty for none):", default=SYSTEM_PROMPT
        ).ask()
        enable_markdown = questionary.confirm(
            "Render replies as markdown?", default=True
        ).ask()
    except (KeyboardInterrupt, EOFError):
        raise ConfigurationError("Setup cancelled.") from None

    data = {
        "model": model,
        "system_prompt": system_prompt or "",
        "max_history_size": DEFAULT_MAX_HISTORY_SIZE,
        "enable_markdown": bool(enable_markdown),
    }
    config = Config.from_dict(data)

    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not write config file {path}: {exc}") from None
    logger.debug("Wrote initial config to %s", path)
    return config
