"""Configuration file loading and validation."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .conversation import SYSTEM_PROMPT
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IVYCLI_CONFIG_PATH"
PASSPHRASE_ENV_VAR = "IVYCLI_PASSPHRASE"
API_KEY_ENV_VAR = "OPENAI_API_KEY"
BASE_URL_ENV_VAR = "OPENAI_BASE_URL"

CONFIG_DIR = Path.home() / ".config" / "ivycli"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_MAX_HISTORY_SIZE = 10


@dataclass(frozen=True)
class Config:
    model: str
    system_prompt: Optional[str] = SYSTEM_PROMPT
    max_history_size: int = DEFAULT_MAX_HISTORY_SIZE
    enable_markdown: bool = True
    response_color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Validate a decoded config object.

        ``system_prompt`` falls back to the built-in prompt only when the key
        is missing; an empty string disables the system message.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a JSON object.")

        model = data.get("model")
        if not isinstance(model, str) or not model.strip():
            raise ConfigurationError("Model must be specified in the config file.")

        system_prompt = data.get("system_prompt", SYSTEM_PROMPT)
        if system_prompt is not None and not isinstance(system_prompt, str):
            raise ConfigurationError("'system_prompt' must be a string.")

        max_history_size = data.get("max_history_size", DEFAULT_MAX_HISTORY_SIZE)
        # bool is an int subclass; reject it explicitly
        if isinstance(max_history_size, bool) or not isinstance(max_history_size, int):
            raise ConfigurationError("'max_history_size' must be an integer.")
        if max_history_size < 0:
            raise ConfigurationError("'max_history_size' must not be negative.")

        enable_markdown = data.get("enable_markdown", True)
        if not isinstance(enable_markdown, bool):
            raise ConfigurationError("'enable_markdown' must be true or false.")

        response_color = data.get("response_color")
        if response_color is not None and not isinstance(response_color, str):
            raise ConfigurationError("'response_color' must be a string.")

        return cls(
            model=model.strip(),
            system_prompt=system_prompt or None,
            max_history_size=max_history_size,
            enable_markdown=enable_markdown,
            response_color=response_color or None,
        )


def resolve_config_path(cli_path: Optional[str] = None) -> Path:
    """``--config`` wins over ``IVYCLI_CONFIG_PATH``, which wins over the default."""
    if cli_path:
        return Path(cli_path).expanduser()
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path) -> Config:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigurationError(f"Error reading config file: {exc}") from None

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigurationError(f"Error parsing config file: {exc}") from None

    config = Config.from_dict(data)
    logger.debug("Loaded config from %s (model=%s)", path, config.model)
    return config
