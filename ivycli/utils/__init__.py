from .ansi import (
    Ansi,
    USER_LABEL,
    ASSISTANT_LABEL,
    ERROR_LABEL,
    WARNING_LABEL,
    ERROR_TAG,
    WARNING_TAG,
    console,
    err_console,
)
from .render import Renderer
from .spinner import Spinner

__all__ = [
    "Ansi",
    "USER_LABEL",
    "ASSISTANT_LABEL",
    "ERROR_LABEL",
    "WARNING_LABEL",
    "ERROR_TAG",
    "WARNING_TAG",
    "console",
    "err_console",
    "Renderer",
    "Spinner",
]
