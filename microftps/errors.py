from typing import Any, Dict, Optional


class FtpsError(Exception):
    """Base class for every error raised by MicroFtps."""


class ConfigError(FtpsError, ValueError):
    """
    Connection parameters are missing or invalid.

    Raised by connect() when the server or username is empty, and when an
    option has the wrong type or an unknown key. Never retried: the caller
    has to fix the parameters.
    """


class NotConnectedError(FtpsError, RuntimeError):
    """An operation was attempted before connect() stored any parameters."""


class TransportEngineInitError(FtpsError, RuntimeError):
    """The curl engine could not be created or refused an option."""


class TransportError(FtpsError, ConnectionError):
    """
    The curl engine ran the command and reported a failure.

    The message is curl's own diagnostic text, unchanged.

    Attributes:
        code: curl error number, when curl supplied one.
        info: Response metadata captured after the failed command.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        info: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.info = info or {}


class ResourceAllocationError(FtpsError, MemoryError):
    """The in-memory buffer for an upload could not be allocated."""
