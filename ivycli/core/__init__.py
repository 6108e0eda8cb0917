from .config import Config, load_config, resolve_config_path
from .conversation import Conversation, SYSTEM_PROMPT
from .errors import (
    IvyCLIError,
    ConfigurationError,
    CryptoError,
    NetworkError,
    RequestTimeoutError,
    APIRequestError,
    ResponseFormatError,
)
from .history import HistoryStore, strip_system_messages, trim_history
# client module will be imported lazily to avoid heavy dependencies when not needed.

__all__ = [
    "Config",
    "load_config",
    "resolve_config_path",
    "Conversation",
    "SYSTEM_PROMPT",
    "IvyCLIError",
    "ConfigurationError",
    "CryptoError",
    "NetworkError",
    "RequestTimeoutError",
    "APIRequestError",
    "ResponseFormatError",
    "HistoryStore",
    "strip_system_messages",
    "trim_history",
]
