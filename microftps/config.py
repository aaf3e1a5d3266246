from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .auth import Basic
from .errors import ConfigError
from .settings import SSL

# Baseline option table; a caller-supplied key always wins over these
DEFAULTS: Dict[str, Any] = {
    "passive": True,
    "port": 990,
    "timeout": 10,
    "ssl": None,
    "extra_options": {},
}


def merge_defaults(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Fill in every option the caller left out.

    Defaulting is key by key: a key present in ``options`` is kept as given
    (an explicit ``passive=False`` stays False), and only absent keys are
    taken from DEFAULTS.

    Args:
        options: Caller-supplied options, or None.

    Returns:
        A new dict holding exactly the DEFAULTS keys.

    Raises:
        ConfigError: If options is not a mapping or holds unknown keys.
    """
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise ConfigError("Options must be a mapping")

    unknown = sorted(map(str, set(options) - set(DEFAULTS)))
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

    merged = dict(options)
    for key, value in DEFAULTS.items():
        if key not in merged:
            merged[key] = dict(value) if isinstance(value, dict) else value
    return merged


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Validated, fully defaulted parameters for one FTPS server.

    Instances are immutable; every operation builds its transport handle
    from one of these. Use ConnectionConfig.create() rather than the
    constructor so that option defaulting is applied.

    Attributes:
        server: Host name, optionally "host:port", used verbatim in URLs.
        auth: Login credentials.
        passive: Passive data connections when True, active when False.
        port: Control connection port (990 is implicit FTPS).
        timeout: Whole-operation timeout in seconds, enforced by curl.
        ssl: Certificate verification and TLS material.
        extra_options: pycurl option id to value, applied after the baseline.
    """

    server: str
    auth: Basic
    passive: bool = True
    port: int = 990
    timeout: int = 10
    ssl: SSL = field(default_factory=SSL)
    extra_options: Dict[int, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """
        Check option types and ranges.

        Raises:
            ConfigError: If any value is out of range or of the wrong type.
        """
        if not self.server:
            raise ConfigError("FTPS server url is empty")

        if not isinstance(self.passive, bool):
            raise ConfigError("Option 'passive' must be a boolean")

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigError("Option 'port' must be an integer")
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"Option 'port' must be in 1..65535, got {self.port}")

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int):
            raise ConfigError("Option 'timeout' must be an integer number of seconds")
        if self.timeout <= 0:
            raise ConfigError("Option 'timeout' must be positive")

        if not isinstance(self.ssl, SSL):
            raise ConfigError("Option 'ssl' must be an SSL instance or a mapping")

        for key in self.extra_options:
            if isinstance(key, bool) or not isinstance(key, int):
                raise ConfigError(f"Extra option keys must be pycurl option ids, got {key!r}")

    @classmethod
    def create(
        cls,
        server: str,
        username: str,
        password: Optional[str] = "",
        options: Optional[Mapping[str, Any]] = None,
    ) -> "ConnectionConfig":
        """
        Validate connection parameters and apply the option defaults.

        Args:
            server: FTPS server, e.g. "files.example.com".
            username: Login name.
            password: Login password, empty when omitted.
            options: Any of passive, port, timeout, ssl, extra_options.

        Returns:
            ConnectionConfig: The validated configuration.

        Raises:
            ConfigError: If server or username is empty, or an option is invalid.
        """
        if not server:
            raise ConfigError("FTPS server url is empty")
        if not username:
            raise ConfigError("FTPS username is empty")

        merged = merge_defaults(options)
        extra = merged["extra_options"]
        if not isinstance(extra, Mapping):
            raise ConfigError("Option 'extra_options' must be a mapping")

        return cls(
            server=server,
            auth=Basic(user=username, password=password or ""),
            passive=merged["passive"],
            port=merged["port"],
            timeout=merged["timeout"],
            ssl=cls._ssl(merged["ssl"]),
            extra_options=dict(extra),
        )

    @staticmethod
    def _ssl(value: Union[SSL, Mapping[str, Any], None]) -> SSL:
        if value is None:
            return SSL()
        if isinstance(value, Mapping):
            try:
                return SSL(**value)
            except TypeError as error:
                raise ConfigError(f"Invalid SSL options: {error}") from error
        return value

    @property
    def username(self) -> str:
        return self.auth.user

    @property
    def password(self) -> str:
        return self.auth.password

    @property
    def url(self) -> str:
        """Base URL of the server, without any path."""
        return f"ftps://{self.server}"
