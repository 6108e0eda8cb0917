"""Exception hierarchy shared by the CLI and the core modules."""


class IvyCLIError(Exception):
    """Base class for every error raised by ivycli."""


class ConfigurationError(IvyCLIError):
    """Missing or invalid settings or credentials."""


class CryptoError(IvyCLIError):
    """History blob could not be decrypted or decoded."""


class NetworkError(IvyCLIError):
    """The completion endpoint could not be reached."""


class RequestTimeoutError(NetworkError):
    """The completion request did not finish within the timeout."""


class APIRequestError(NetworkError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(IvyCLIError):
    """The completion endpoint answered with an unexpected payload."""
