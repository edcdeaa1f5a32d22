"""
Error hierarchy for the sync subsystem, used for classification in logs and CLI output.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SyncError(Exception):
    """Base class for all sync subsystem errors."""

    def __init__(
        self,
        message: str,
        *,
        sync_class: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.sync_class = sync_class
        self.details = details or {}

    def as_dict(self) -> Dict[str, Any]:
        """Serializable representation for logs/CLI."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "sync_class": self.sync_class,
            "details": self.details,
        }


class RemoteFetchError(SyncError):
    """Raised when the remote source cannot deliver the record set."""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.source = source
        self.status_code = status_code
        if source is not None:
            self.details["source"] = source
        if status_code is not None:
            self.details["status_code"] = status_code


class PersistenceError(SyncError):
    """Raised during read/write of a durable key-value file."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.path = path
        self.operation = operation
        if path is not None:
            self.details["path"] = path
        if operation is not None:
            self.details["operation"] = operation


class ConfigError(SyncError):
    """Raised on missing/invalid configuration values."""

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        section: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.key = key
        self.section = section
        if key is not None:
            self.details["key"] = key
        if section is not None:
            self.details["section"] = section


__all__ = ["SyncError", "RemoteFetchError", "PersistenceError", "ConfigError"]
