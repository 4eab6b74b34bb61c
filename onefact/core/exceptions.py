"""Custom exceptions for OneFact application.

This module defines all custom exceptions used throughout the application.
All exceptions inherit from OneFactError for easy catching.

Exception classes include context dictionaries for structured logging
and debugging. Use the `context` property to access additional details.
"""

from typing import Any


class OneFactError(Exception):
    """Base exception for all OneFact errors.

    All custom exceptions in the application should inherit from this class.
    Provides a context dictionary for structured error information.

    Attributes:
        context: Dictionary with additional error context

    Example:
        >>> try:
        ...     raise OneFactError("Something went wrong", context={"fact_id": "123"})
        ... except OneFactError as e:
        ...     print(f"Error: {e}, Context: {e.context}")
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize OneFactError.

        Args:
            message: Error message
            context: Optional dictionary with additional context
        """
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **kwargs: Any) -> "OneFactError":
        """Add additional context to the exception.

        Args:
            **kwargs: Key-value pairs to add to context

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with error type, message, and context
        """
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "context": self.context,
        }


# ============================================
# Database Errors
# ============================================


class DatabaseError(OneFactError):
    """Base exception for database-related errors."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize DatabaseError.

        Args:
            message: Error message
            context: Additional context
            operation: Database operation that failed (e.g., "insert", "update")
        """
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message, context=ctx)


class RecordNotFoundError(DatabaseError):
    """Raised when a database record is not found.

    Attributes:
        model: The model class that was queried
        record_id: The ID that was not found
    """

    def __init__(
        self,
        model: str,
        record_id: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize RecordNotFoundError.

        Args:
            model: Name of the model class
            record_id: ID that was not found
            context: Additional context
        """
        ctx = context or {}
        ctx.update({"model": model, "record_id": record_id})
        super().__init__(f"{model} with id={record_id} not found", context=ctx)
        self.model = model
        self.record_id = record_id


class RecordAlreadyExistsError(DatabaseError):
    """Raised when attempting to create a duplicate record.

    Attributes:
        model: The model class
        field: Field that caused the conflict
        value: Value that already exists
    """

    def __init__(
        self,
        model: str,
        field: str,
        value: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize RecordAlreadyExistsError.

        Args:
            model: Name of the model class
            field: Field that caused the conflict
            value: Value that already exists
            context: Additional context
        """
        ctx = context or {}
        ctx.update({"model": model, "field": field, "value": value})
        super().__init__(
            f"{model} with {field}={value} already exists",
            context=ctx,
        )
        self.model = model
        self.field = field
        self.value = value


# ============================================
# Service Errors
# ============================================


class ServiceError(OneFactError):
    """Base exception for service-related errors."""

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ServiceError.

        Args:
            message: Error message
            service_name: Name of the service
            context: Additional context
        """
        ctx = context or {}
        if service_name:
            ctx["service_name"] = service_name
        super().__init__(message, context=ctx)


class ExternalAPIError(ServiceError):
    """Raised when an external API call fails.

    Attributes:
        service: Name of the external service
        status_code: HTTP status code (if applicable)
        endpoint: API endpoint that was called
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        response_body: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ExternalAPIError.

        Args:
            service: Name of the external service
            message: Error message
            status_code: HTTP status code (optional)
            endpoint: API endpoint (optional)
            response_body: Response body for debugging (optional)
            context: Additional context
        """
        ctx = context or {}
        ctx["service"] = service
        if status_code is not None:
            ctx["status_code"] = status_code
        if endpoint:
            ctx["endpoint"] = endpoint
        if response_body:
            ctx["response_body"] = response_body[:500]  # Truncate long responses

        self.service = service
        self.status_code = status_code
        self.endpoint = endpoint

        super().__init__(f"{service} API error: {message}", service_name=service, context=ctx)


class SourceFetchError(ExternalAPIError):
    """Raised when a fact source cannot produce records.

    Wraps the underlying network, HTTP status or decoding failure.

    Attributes:
        source: Name of the failing source
    """

    def __init__(
        self,
        source: str,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize SourceFetchError.

        Args:
            source: Source name (e.g., "wikipedia")
            message: Error message
            status_code: HTTP status code (optional)
            endpoint: Request URL (optional)
            context: Additional context
        """
        self.source = source
        super().__init__(
            source,
            message,
            status_code=status_code,
            endpoint=endpoint,
            context=context,
        )


class SourceTimeoutError(SourceFetchError):
    """Raised when a source exceeds its fetch deadline.

    Attributes:
        timeout: Deadline in seconds
    """

    def __init__(
        self,
        source: str,
        timeout: float,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize SourceTimeoutError.

        Args:
            source: Source name
            timeout: Deadline that was exceeded (seconds)
            context: Additional context
        """
        ctx = context or {}
        ctx["timeout"] = timeout
        self.timeout = timeout
        super().__init__(source, f"timed out after {timeout:g}s", context=ctx)


# ============================================
# Content Errors
# ============================================


class ContentError(OneFactError):
    """Base exception for content-related errors."""

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ContentError.

        Args:
            message: Error message
            content_type: Type of content (e.g., "fact")
            context: Additional context
        """
        ctx = context or {}
        if content_type:
            ctx["content_type"] = content_type
        super().__init__(message, context=ctx)


class ContentValidationError(ContentError):
    """Raised when submitted content violates fact rules.

    Attributes:
        validation_errors: List of validation error details
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        content_type: str | None = "fact",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ContentValidationError.

        Args:
            message: Error message
            validation_errors: List of validation error details
            content_type: Type of content
            context: Additional context
        """
        ctx = context or {}
        if validation_errors:
            ctx["validation_errors"] = validation_errors

        self.validation_errors = validation_errors or []

        super().__init__(message, content_type=content_type, context=ctx)


# ============================================
# Fact Errors
# ============================================


class FactNotFoundError(OneFactError):
    """Raised when no fact matches a serving request.

    This is a normal "empty result" outcome, distinct from server faults.
    The API maps it to HTTP 404.

    Attributes:
        category: Category filter that was applied, if any
        fact_id: Requested fact ID, if any
    """

    def __init__(
        self,
        message: str = "No fact found",
        category: str | None = None,
        fact_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize FactNotFoundError.

        Args:
            message: Error message
            category: Category filter
            fact_id: Requested fact ID
            context: Additional context
        """
        ctx = context or {}
        if category:
            ctx["category"] = category
        if fact_id:
            ctx["fact_id"] = fact_id

        self.category = category
        self.fact_id = fact_id

        super().__init__(message, context=ctx)


class CollectionRunError(OneFactError):
    """Aggregate of the faults raised during one collection pass.

    Attributes:
        faults: Human-readable fault descriptions
        source_faults: Number of failed sources
        store_faults: Number of failed store writes
    """

    def __init__(
        self,
        faults: list[str],
        source_faults: int = 0,
        store_faults: int = 0,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize CollectionRunError.

        Args:
            faults: Fault descriptions
            source_faults: Number of source faults
            store_faults: Number of store write faults
            context: Additional context
        """
        ctx = context or {}
        ctx.update(
            {
                "faults": faults,
                "source_faults": source_faults,
                "store_faults": store_faults,
            }
        )

        self.faults = faults
        self.source_faults = source_faults
        self.store_faults = store_faults

        super().__init__(
            f"Collection pass had {len(faults)} fault(s): " + "; ".join(faults),
            context=ctx,
        )


# ============================================
# LLM Errors
# ============================================


class LLMError(ServiceError):
    """Raised when an LLM completion fails.

    Attributes:
        model: Model that was called
    """

    def __init__(
        self,
        message: str,
        model: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize LLMError.

        Args:
            message: Error message
            model: LiteLLM model identifier
            context: Additional context
        """
        ctx = context or {}
        if model:
            ctx["model"] = model
        self.model = model
        super().__init__(message, service_name="llm", context=ctx)
