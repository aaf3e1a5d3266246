from dataclasses import dataclass

from .errors import ConfigError

# Type aliases for readability
Username = str
Password = str


@dataclass(frozen=True)
class Basic:
    """
    Username and password used to log in to the FTPS server.

    FTP only knows plain USER/PASS authentication. The password may be empty
    (some servers accept any password, or none at all), but the username may
    not: an anonymous login still has to name a user.

    Attributes:
        user: Login name sent with USER. Must not be empty.
        password: Secret sent with PASS. Empty by default.
    """

    user: Username
    password: Password = ""

    def __post_init__(self) -> None:
        """
        Reject credentials that can never log in.

        Raises:
            ConfigError: If the username is empty.
        """
        if not self.user:
            raise ConfigError("FTPS username is empty")

    def __repr__(self) -> str:
        # Keep the password out of tracebacks and logs
        return f"Basic(user={self.user!r}, password='***')"
