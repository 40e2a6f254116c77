"""Error types for Redshift MCP Server."""

class MCPError(Exception):
    """Base error class for MCP operations."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class ConfigError(MCPError):
    """Error raised when the connection configuration is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class AddressError(MCPError):
    """Error raised when a resource URI cannot be resolved to an address."""

    def __init__(self, uri: str, message: str = None):
        if message is None:
            message = f"Invalid resource URI: {uri}"
        super().__init__(message, recoverable=False)
        self.uri = uri


class InvalidAddress(AddressError):
    """Error raised when a resource URI path has an unrecognised shape."""


class UnknownKind(AddressError):
    """Error raised when a table resource names an unknown resource kind."""

    def __init__(self, uri: str, kind: str):
        super().__init__(uri, f"Unknown resource type: {kind}")
        self.kind = kind


class EngineError(MCPError):
    """Error raised when the warehouse rejects or fails a query."""


class ConnectionError(MCPError):
    """Error raised when database connection fails."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)


class RollbackWarning(MCPError):
    """Raised when a read-only transaction could not be rolled back.

    Never leaves the database service; it is logged there and dropped.
    """

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)
