__version__ = "1.0.0"
__author__ = "Andrew Hernandez"
__email__ = "andromedeyz@hotmail.com"
__license__ = "MIT"
__description__ = "A minimal synchronous FTPS client: read, list, write and delete files over implicit TLS."
__url__ = "http://github.com/ApaxPhoenix/MicroFtps"

# Build sessions straight from an ftps:// URL
from .ftp import MicroFtps

# The client itself and the piece that runs each command
from .core import (
    FtpsSession,  # Connect once, then read/list/write/delete as often as you like
    CommandExecutor,  # Runs a configured handle and maps curl failures
)

# Connection parameters and their defaults
from .config import (
    ConnectionConfig,  # Validated server, credentials and options
    DEFAULTS,  # Baseline option table
    merge_defaults,  # Fill in the options a caller left out
)

# Login credentials
from .auth import Basic

# Certificate verification and TLS material
from .settings import SSL

# One curl handle per command, plus the FTP reply code table
from .transport import TransportHandle, codes

# Everything that can go wrong
from .errors import (
    FtpsError,
    ConfigError,
    NotConnectedError,
    TransportEngineInitError,
    TransportError,
    ResourceAllocationError,
)

# Everything you can import and use
__all__ = [
    # The main classes you'll work with
    "MicroFtps",
    "FtpsSession",
    # Internals that are still useful to see
    "CommandExecutor",
    "TransportHandle",
    # Configuration
    "ConnectionConfig",
    "DEFAULTS",
    "merge_defaults",
    "Basic",
    "SSL",
    # Errors
    "FtpsError",
    "ConfigError",
    "NotConnectedError",
    "TransportEngineInitError",
    "TransportError",
    "ResourceAllocationError",
    # Reference data
    "codes",
    # Package info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__description__",
    "__url__",
]
