import io
from typing import Any, Dict, IO, List, Optional

import pycurl

from .config import ConnectionConfig
from .errors import TransportEngineInitError

# FTP reply codes - what the server is trying to tell you
codes = {
    # 1xx - "Hold on, I'm working on it"
    110: "Restart marker reply",
    120: "Service ready in n minutes",
    125: "Data connection already open; transfer starting",
    150: "File status okay; about to open data connection",
    # 2xx - "Success! Everything went great"
    200: "Command okay",
    202: "Command not implemented, superfluous at this site",
    211: "System status, or system help reply",
    212: "Directory status",
    213: "File status",
    214: "Help message",
    215: "NAME system type",
    220: "Service ready for new user",
    221: "Service closing control connection",
    225: "Data connection open; no transfer in progress",
    226: "Closing data connection",
    227: "Entering Passive Mode",
    229: "Entering Extended Passive Mode",
    230: "User logged in, proceed",
    234: "Security mechanism accepted",
    250: "Requested file action okay, completed",
    257: "PATHNAME created",
    # 3xx - "I need more info from you"
    331: "User name okay, need password",
    332: "Need account for login",
    350: "Requested file action pending further information",
    # 4xx - "Something's wrong, but we can try again"
    421: "Service not available, closing control connection",
    425: "Can't open data connection",
    426: "Connection closed; transfer aborted",
    450: "Requested file action not taken",
    451: "Requested action aborted: local error in processing",
    452: "Requested action not taken; insufficient storage space",
    # 5xx - "Nope, that's not going to work"
    500: "Syntax error, command unrecognized",
    501: "Syntax error in parameters or arguments",
    502: "Command not implemented",
    503: "Bad sequence of commands",
    504: "Command not implemented for that parameter",
    530: "Not logged in",
    532: "Need account for storing files",
    550: "Requested action not taken; file unavailable",
    551: "Requested action aborted: page type unknown",
    552: "Requested file action aborted; exceeded storage allocation",
    553: "Requested action not taken; file name not allowed",
}

# Response info key -> curl getinfo id
INFO = {
    "url": pycurl.EFFECTIVE_URL,
    "status": pycurl.RESPONSE_CODE,
    "total_time": pycurl.TOTAL_TIME,
    "connect_time": pycurl.CONNECT_TIME,
    "size_download": pycurl.SIZE_DOWNLOAD_T,
    "size_upload": pycurl.SIZE_UPLOAD_T,
    "primary_ip": pycurl.PRIMARY_IP,
}


class TransportHandle:
    """
    One curl easy handle, configured for exactly one FTPS command.

    A handle is built from a ConnectionConfig, pointed at a target with one
    of download(), listing(), upload() or quote(), performed once and then
    closed. It is never reused: the next operation builds a fresh handle, so
    nothing set for one command can leak into the next.

    Every option applied through setopt() is also kept in ``options`` so the
    exact configuration sent to curl can be inspected after the fact.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        """Create the curl handle and apply the connection-level options.

        Args:
            config: Validated connection parameters.

        Raises:
            TransportEngineInitError: If curl cannot be initialized or
                                      rejects one of the options.
        """
        self.config = config
        self.options: Dict[int, Any] = {}
        self.buffer = io.BytesIO()
        self.closed = False
        try:
            self.curl = pycurl.Curl()
        except pycurl.error as error:
            self.closed = True
            self.buffer.close()
            raise TransportEngineInitError(f"Could not initialize cURL: {error}") from error
        try:
            self.configure()
        except TransportEngineInitError:
            self.close()
            raise

    def configure(self) -> None:
        """Apply credentials, port, timeout, TLS and data-connection mode."""
        config = self.config
        opts: Dict[int, Any] = {
            # Sent separately so a ":" in the username stays part of it
            pycurl.USERNAME: config.auth.user,
            pycurl.PASSWORD: config.auth.password,
            pycurl.PORT: config.port,
            pycurl.TIMEOUT: config.timeout,
        }
        opts.update(config.ssl.options())

        # curl uses passive mode unless told otherwise; "-" lets curl pick
        # the address of the control connection for PORT/EPRT
        if not config.passive:
            opts[pycurl.FTPPORT] = "-"

        # Caller overrides go last and win on collision
        opts.update(config.extra_options)

        for option, value in opts.items():
            self.setopt(option, value)

    def setopt(self, option: int, value: Any) -> None:
        try:
            self.curl.setopt(option, value)
        except (pycurl.error, TypeError) as error:
            raise TransportEngineInitError(
                f"cURL rejected option {option}: {error}"
            ) from error
        self.options[option] = value

    def download(self, url: str) -> None:
        """Fetch ``url`` into memory."""
        self.setopt(pycurl.URL, url)
        self.setopt(pycurl.WRITEDATA, self.buffer)

    def listing(self, url: str) -> None:
        """List the directory at ``url`` by name only (NLST) into memory."""
        self.download(url)
        self.setopt(pycurl.DIRLISTONLY, 1)

    def upload(self, url: str, source: IO[bytes], size: int) -> None:
        """Store the contents of the readable ``source`` at ``url``."""
        self.setopt(pycurl.URL, url)
        self.setopt(pycurl.UPLOAD, 1)
        self.setopt(pycurl.READDATA, source)
        self.setopt(pycurl.INFILESIZE_LARGE, size)
        self.setopt(pycurl.WRITEDATA, self.buffer)

    def quote(self, url: str, commands: List[str]) -> None:
        """Send raw control-channel ``commands`` while connected to ``url``."""
        self.setopt(pycurl.URL, url)
        self.setopt(pycurl.QUOTE, list(commands))
        self.setopt(pycurl.WRITEDATA, self.buffer)

    def perform(self) -> bytes:
        """Run the configured command and return what the server sent back.

        Raises:
            pycurl.error: When curl reports the command failed.
        """
        self.curl.perform()
        return self.buffer.getvalue()

    def info(self) -> Dict[str, Any]:
        """Collect response metadata for the last performed command.

        Values curl cannot report are left out; ``url`` is always present and
        falls back to the configured target.
        """
        info: Dict[str, Any] = {}
        for key, option in INFO.items():
            try:
                info[key] = self.curl.getinfo(option)
            except (pycurl.error, AttributeError, TypeError):
                continue
        if not info.get("url"):
            info["url"] = self.options.get(pycurl.URL, self.config.url)
        status: Optional[int] = info.get("status")
        if isinstance(status, int):
            info["reason"] = codes.get(status, "")
        return info

    def close(self) -> None:
        """Release the curl handle. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        curl = getattr(self, "curl", None)
        try:
            if curl is not None:
                curl.close()
        finally:
            self.buffer.close()

    def __enter__(self) -> "TransportHandle":
        return self

    def __exit__(self, type, value, trace) -> None:
        self.close()
