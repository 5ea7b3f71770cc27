"""Adapter-specific exceptions."""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConfigurationError(AdapterError):
    """Raised when adapter or registry configuration is invalid."""


class AdapterNotFoundError(AdapterError):
    """Raised when a requested adapter id is not registered."""


class RemoteTransportError(AdapterError):
    """Raised when the remote backend cannot be reached."""


class RemoteTimeout(AdapterError):
    """Raised when the remote backend does not answer within the call timeout."""


class RemoteStatusError(AdapterError):
    """Raised when the remote backend answers with a non-success status code."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        detail = f" - {body}" if body else ""
        super().__init__(f"Remote service error: HTTP {status_code}{detail}")


class RemoteShapeError(AdapterError):
    """Raised when the remote payload does not match the expected shape."""
