"""
Core business exceptions for the synchronization handler.

This module defines a hierarchy of custom exceptions to allow for granular
error handling and clear separation of failure domains. Errors that abort a
whole run may carry the partial sync report on their ``report`` attribute.
"""


class SyncError(Exception):
    """Base exception for all component-specific errors."""

    def __init__(self, message: str = "", report=None):
        super().__init__(message)
        self.report = report


# --- Configuration Errors ---

class ConfigurationError(SyncError):
    """Raised for errors related to application configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(SyncError):
    """Base class for errors related to external systems (network, disk)."""
    pass


class QueryError(InfrastructureError):
    """Raised when the remote file search fails or returns no usable list."""
    pass


class DownloadError(InfrastructureError):
    """Raised when a single file transfer fails."""
    pass


class StorageError(InfrastructureError):
    """Raised when the local mirror cannot be written to at all."""
    pass


# --- Domain/Business Logic Errors ---

class DomainError(SyncError):
    """Base class for errors related to business logic failures."""
    pass


class MappingError(DomainError):
    """Raised when a remote locator cannot be mapped to a local path."""
    pass
