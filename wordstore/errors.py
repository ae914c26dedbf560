"""
Error Handling Module
=====================
Custom exceptions for the word book storage layer.
Provides consistent error codes and messages across both backends.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class ErrorCode(Enum):
    """Error codes for the word book store."""
    # Initialization errors (W001-W099)
    W001 = "Storage initialization failed"

    # Operation errors (W100-W199)
    W100 = "Storage statement failed"
    W101 = "Stored value serialization failed"

    # Input errors (W200-W299)
    W200 = "Invalid input"

    # Facade errors (W300-W399)
    W300 = "Store not initialized"
    W301 = "Unknown storage backend"


@dataclass
class WordStoreError(Exception):
    """Base exception for the word book store with error codes."""
    code: ErrorCode
    message: str
    details: Optional[str] = None

    def __str__(self) -> str:
        base = f"[{self.code.name}] {self.code.value}: {self.message}"
        if self.details:
            base += f" ({self.details})"
        return base


class InitializationError(WordStoreError):
    """The backend could not open or create its store."""
    def __init__(self, message: str, details: str = None):
        super().__init__(
            code=ErrorCode.W001,
            message=message,
            details=details
        )


class StatementError(WordStoreError):
    """A single CRUD statement failed."""
    def __init__(self, message: str, statement: str = None):
        super().__init__(
            code=ErrorCode.W100,
            message=message,
            details=statement
        )
        self.statement = statement


class SerializationError(WordStoreError):
    """A stored value could not be encoded to or decoded from JSON."""
    def __init__(self, key: str, message: str, details: str = None):
        super().__init__(
            code=ErrorCode.W101,
            message=f"{message} (key '{key}')",
            details=details
        )
        self.key = key


class ValidationError(WordStoreError, ValueError):
    """Caller supplied data that can never be stored."""
    def __init__(self, message: str, field_name: str = None):
        super().__init__(
            code=ErrorCode.W200,
            message=message,
            details=f"Field: {field_name}" if field_name else None
        )


class StoreNotInitializedError(WordStoreError, RuntimeError):
    """A CRUD call reached the facade before initialize() completed."""
    def __init__(self, operation: str):
        super().__init__(
            code=ErrorCode.W300,
            message=f"Cannot run '{operation}' before initialize()",
        )


class UnknownBackendError(WordStoreError, ValueError):
    """Requested backend name is not registered."""
    def __init__(self, name: str, available: list[str] = None):
        super().__init__(
            code=ErrorCode.W301,
            message=f"Unknown storage backend: '{name}'",
            details=f"Available backends: {', '.join(available)}" if available else None
        )
