"""Tenant patcher exception hierarchy.

Every failure raised by the pipeline inherits from TenantPatcherError so the
HTTP and CLI surfaces can catch the family while still mapping the gateway
case to its own status.
"""


class TenantPatcherError(Exception):
    """Base exception for all tenant patcher errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ArchiveError(TenantPatcherError):
    """Malformed application bundle or conflicting destination paths."""


class ConfigCoercionError(TenantPatcherError):
    """App config module text does not match the supported literal shape."""

    def __init__(self, message: str = "", *, line: int = 0, column: int = 0) -> None:
        if line:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class MarkerError(TenantPatcherError):
    """Entry point marker missing from, or repeated in, a tenant file."""


class UpstreamError(TenantPatcherError):
    """Registry, bundle transport or repository read failed."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)


class GatewayError(TenantPatcherError):
    """Repository host returned no usable result for the change proposal."""


class ConfigError(TenantPatcherError):
    """Invalid or missing configuration."""


class InvalidNameError(TenantPatcherError):
    """App or tenant identifier cannot be used as a path or branch segment."""
