from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import pycurl

from .errors import ConfigError


@dataclass(frozen=True)
class SSL:
    """
    TLS configuration for the FTPS control and data channels.

    Controls whether curl verifies the server certificate and host name, and
    which certificate material it uses. Many FTPS servers run with
    self-signed certificates, so verification is off unless asked for; turn
    it on whenever the server has a certificate you can check.

    Attributes:
        verify: Verify the peer certificate and that it matches the host name.
        bundle: Path to a CA bundle used for verification.
        cert: Path to a client certificate for mutual TLS.
        key: Path to the private key matching cert.
        ciphers: OpenSSL cipher list string.
    """

    verify: bool = False  # Verify peer certificate and host name
    bundle: Optional[str] = None  # CA bundle file for verification
    cert: Optional[str] = None  # Client certificate file for mutual TLS
    key: Optional[str] = None  # Private key file for mutual TLS
    ciphers: Optional[str] = None  # Allowed cipher suites

    def __post_init__(self) -> None:
        """
        Validate the TLS material before it reaches curl.

        Returns:
            None

        Raises:
            ConfigError: If cert and key are not given together, or a
                         referenced file does not exist.
        """
        if not isinstance(self.verify, bool):
            raise ConfigError("SSL verify must be a boolean")

        # Both must be provided together for mutual TLS authentication
        if bool(self.cert) != bool(self.key):
            raise ConfigError(
                "Both certificate and key must be provided together for mutual TLS"
            )

        for label, value in (
            ("Certificate", self.cert),
            ("Private key", self.key),
            ("CA bundle", self.bundle),
        ):
            if value and not Path(value).is_file():
                raise ConfigError(f"{label} file not found: {value}")

    def options(self) -> Dict[int, Any]:
        """Translate this configuration into curl option ids and values."""
        opts: Dict[int, Any] = {
            pycurl.SSL_VERIFYPEER: 1 if self.verify else 0,
            pycurl.SSL_VERIFYHOST: 2 if self.verify else 0,
        }
        if self.bundle:
            opts[pycurl.CAINFO] = self.bundle
        if self.cert and self.key:
            opts[pycurl.SSLCERT] = self.cert
            opts[pycurl.SSLKEY] = self.key
        if self.ciphers:
            opts[pycurl.SSL_CIPHER_LIST] = self.ciphers
        return opts
