"""
Custom exceptions for the product search-document pipeline.
Provides structured error handling with rich context for debugging and monitoring.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for routing and handling."""
    STORAGE = "storage"
    COLLABORATOR = "collaborator"
    CONFIGURATION = "configuration"
    ASSEMBLY = "assembly"


@dataclass
class ErrorContext:
    """Rich context for error tracking and debugging."""
    correlation_id: Optional[str] = None
    product_id: Optional[str] = None
    field_name: Optional[str] = None
    batch_id: Optional[str] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    additional_data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert context to dictionary for logging."""
        return {
            "correlation_id": self.correlation_id,
            "product_id": self.product_id,
            "field_name": self.field_name,
            "batch_id": self.batch_id,
            "timestamp": self.timestamp,
            **self.additional_data,
        }


class IndexingError(Exception):
    """Base exception for all product indexing errors."""

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.ASSEMBLY,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.original_exception = original_exception

    def to_dict(self) -> dict:
        """Serialize exception for logging and monitoring."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class StorageError(IndexingError):
    """Raised when a record or relation lookup against storage fails."""

    def __init__(
        self,
        message: str,
        product_id: Optional[str] = None,
        entity: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.product_id = product_id or ctx.product_id
        if entity:
            ctx.additional_data["entity"] = entity

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.STORAGE,
            original_exception=original_exception,
        )
        self.entity = entity


class CollaboratorError(IndexingError):
    """Raised when an external collaborator call (pricing, inventory, locales, localized content) fails."""

    def __init__(
        self,
        message: str,
        collaborator: str,
        operation: str,
        product_id: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.product_id = product_id or ctx.product_id
        ctx.additional_data["collaborator"] = collaborator
        ctx.additional_data["operation"] = operation

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.COLLABORATOR,
            original_exception=original_exception,
        )
        self.collaborator = collaborator
        self.operation = operation


class ConfigurationError(IndexingError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: str,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.additional_data["config_key"] = config_key

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            original_exception=original_exception,
        )
        self.config_key = config_key


def as_indexing_error(
    exc: Exception,
    product_id: Optional[str] = None,
) -> IndexingError:
    """Wrap an unexpected exception so callers can treat all failures uniformly."""
    if isinstance(exc, IndexingError):
        return exc
    return IndexingError(
        message=f"Failed to index product {product_id}: {exc}",
        context=ErrorContext(product_id=product_id),
        original_exception=exc,
    )
