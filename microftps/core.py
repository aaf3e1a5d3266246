import tempfile
import warnings
from typing import IO, Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import pycurl

from .config import ConnectionConfig
from .errors import (
    NotConnectedError,
    ResourceAllocationError,
    TransportError,
)
from .transport import TransportHandle

HookType = Callable[..., Any]
Payload = Union[bytes, bytearray, str]

# Upload buffers stay in memory up to this size, then spill to a temp file
SPOOL = 2 * 1024 * 1024


class CommandExecutor:
    """
    Runs a fully configured transport handle on behalf of a session.

    The executor is where curl's outcome is turned into MicroFtps terms: the
    response metadata is written to the session whatever happens, a curl
    failure becomes a TransportError, and the handle is closed before control
    returns to the caller. Nothing is retried.
    """

    def __init__(self, session: "FtpsSession") -> None:
        self.session = session

    def run(self, handle: TransportHandle) -> bytes:
        """Perform the command held by ``handle``.

        Args:
            handle: Handle configured for a single command.

        Returns:
            bytes: Whatever the server sent back on the data channel.

        Raises:
            TransportError: If curl reports failure. The message is curl's
                            diagnostic text, unchanged.
        """
        try:
            try:
                result = handle.perform()
            except pycurl.error as error:
                info = self.session.last_response_info = handle.info()
                code, message = self.diagnose(error)
                raise TransportError(message, code=code, info=info) from error
            self.session.last_response_info = handle.info()
            return result
        finally:
            handle.close()

    @staticmethod
    def diagnose(error: pycurl.error) -> Tuple[Optional[int], str]:
        """Split a pycurl error into its curl error number and message."""
        if len(error.args) >= 2:
            return error.args[0], str(error.args[1])
        return None, str(error)


class FtpsSession:
    """
    A small, synchronous FTPS client bound to one server.

    Give it the server and credentials once, then read, list, write and
    delete files as often as you like. Nothing touches the network until the
    first operation, and every operation builds its own freshly configured
    curl handle from the stored parameters, so a command that failed half way
    can never poison the next one.

    Metadata about the last command (effective URL, FTP status, timings) is
    kept in ``last_response_info`` and replaced after every call.
    """

    def __init__(
        self,
        server: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = "",
        options: Optional[Mapping[str, Any]] = None,
        hooks: Optional[Dict[str, HookType]] = None,
        encoding: str = "utf-8",
    ) -> None:
        """Set up the session, connecting right away when possible.

        When both ``server`` and ``username`` are given this is the same as
        calling connect() straight after construction. Otherwise the session
        stays unconnected until connect() is called.

        Args:
            server: FTPS server like "files.example.com" or "host:990"
            username: Login name
            password: Login password (empty if omitted)
            options: passive, port, timeout, ssl and extra_options overrides
            hooks: Callbacks for read, list, write, delete and error events
            encoding: Encoding used for str payloads and directory listings
        """
        self.config: Optional[ConnectionConfig] = None
        self.handle: Optional[TransportHandle] = None
        self.last_response_info: Dict[str, Any] = {}
        self.hooks = hooks or {}
        self.encoding = encoding
        self.executor = CommandExecutor(self)
        self._options: Optional[Mapping[str, Any]] = None

        if server and username:
            self.connect(server, username, password, options)

    def connect(
        self,
        server: str,
        username: str,
        password: Optional[str] = "",
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Validate and store connection parameters.

        No network traffic happens here; the server is first contacted by
        the next operation.

        Args:
            server: FTPS server like "files.example.com"
            username: Login name
            password: Login password (empty if omitted)
            options: passive (True), port (990), timeout (10 seconds), ssl
                     and extra_options (pycurl option id -> value)

        Raises:
            ConfigError: If server or username is empty, or an option is invalid
        """
        self.config = ConnectionConfig.create(server, username, password, options)
        # Nested mappings are copied too so later caller edits never leak in
        self._options = (
            {
                key: dict(value) if isinstance(value, Mapping) else value
                for key, value in options.items()
            }
            if options
            else None
        )

    def read(self, path: str) -> bytes:
        """Download a file into memory.

        Args:
            path: Remote path like "/reports/today.csv"

        Returns:
            bytes: The file's raw contents

        Raises:
            NotConnectedError: If connect() was never called
            TransportError: If the download failed
        """
        with self._init() as handle:
            url = self.config.url + path
            self._hook("read", url)
            handle.download(url)
            return self._run(handle)

    def list_dir(self, path: str) -> List[str]:
        """List the names in a remote directory.

        Only bare names are returned (NLST), in the order the server sent
        them. An empty directory gives an empty list.

        Args:
            path: Remote directory like "/reports/"

        Returns:
            List[str]: Entry names

        Raises:
            NotConnectedError: If connect() was never called
            TransportError: If the listing failed
        """
        with self._init() as handle:
            url = self.config.url + path
            self._hook("list", url)
            handle.listing(url)
            raw = self._run(handle).decode(self.encoding, errors="replace").strip()
        if not raw:
            return []
        return [name.rstrip("\r") for name in raw.split("\n")]

    def write(self, path: str, payload: Payload) -> bool:
        """Upload content to a remote file, replacing it if it exists.

        ``payload`` is the content itself, not the name of a local file.
        Read the file yourself first if that is what you want to send.

        Args:
            path: Remote path like "/incoming/report.csv"
            payload: Bytes to store, or text encoded with the session encoding

        Returns:
            bool: True once the server has accepted the upload

        Raises:
            TypeError: If payload is not bytes, bytearray or str
            NotConnectedError: If connect() was never called
            ResourceAllocationError: If the upload buffer cannot be allocated or filled
            TransportError: If the upload failed
        """
        if isinstance(payload, str):
            data = payload.encode(self.encoding)
        elif isinstance(payload, (bytes, bytearray)):
            data = bytes(payload)
        else:
            raise TypeError(
                f"Payload must be bytes, bytearray or str, not {type(payload).__name__}"
            )

        with self._init() as handle:
            url = self.config.url + path
            with self._spool(data) as buffer:
                self._hook("write", url)
                handle.upload(url, buffer, len(data))
                self._run(handle)
        return True

    def delete(self, path: str) -> bool:
        """Delete a remote file.

        The transfer goes to the server root while DELE is sent on the
        control channel with the file's full URL as its argument.

        Args:
            path: Remote path like "/incoming/report.csv"

        Returns:
            bool: True once the server has accepted the command

        Raises:
            NotConnectedError: If connect() was never called
            TransportError: If the server refused the command
        """
        with self._init() as handle:
            target = self.config.url + path
            self._hook("delete", target)
            handle.quote(self.config.url, [f"DELE {target}"])
            self._run(handle)
        return True

    def close(self) -> None:
        """Release the transport handle of the last operation, if still open.

        Never raises: problems are reported as warnings.
        """
        handle, self.handle = self.handle, None
        if handle is None:
            return
        try:
            handle.close()
        except Exception as error:
            try:
                warnings.warn(f"Error during FTPS session cleanup: {error}")
            except Exception:
                pass

    def __enter__(self) -> "FtpsSession":
        return self

    def __exit__(self, type, value, trace) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def _init(self) -> TransportHandle:
        """Re-validate the stored parameters and build a fresh handle."""
        if self.config is None:
            raise NotConnectedError("Connect to the server before executing commands")

        config = self.config
        self.connect(config.server, config.username, config.password, self._options)

        # The previous handle is finished with; never carry it over
        self.close()
        self.handle = TransportHandle(self.config)
        return self.handle

    @staticmethod
    def _spool(data: bytes) -> IO[bytes]:
        """Load the upload payload into a rewound temporary buffer."""
        try:
            buffer = tempfile.SpooledTemporaryFile(max_size=SPOOL)
        except (OSError, MemoryError) as error:
            raise ResourceAllocationError(
                f"Failed to allocate upload buffer: {error}"
            ) from error
        try:
            buffer.write(data)
            buffer.seek(0)
        except (OSError, MemoryError) as error:
            buffer.close()
            raise ResourceAllocationError(f"Failed to fill upload buffer: {error}") from error
        return buffer

    def _run(self, handle: TransportHandle) -> bytes:
        try:
            return self.executor.run(handle)
        except TransportError as error:
            self._hook("error", error)
            raise

    def _hook(self, name: str, *args: Any) -> None:
        """Call a user hook; a failing hook only produces a warning."""
        hook = self.hooks.get(name)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception as error:
            warnings.warn(f"{name.capitalize()} hook failed: {error}")
