"""Structured error taxonomy for doc-restlet.

Every failure on the tag resolution path is one of the classes below.
All of them inherit from StructuredError and provide:
- A consistent to_dict() method for log output
- Error category and severity metadata
- Human-readable messages with context in ``details``

None of these errors is recovered locally. They bubble up to the
RestTaglet, which logs them with the tag's source position and aborts
the documentation build.

Example:
    >>> try:
    ...     raise UpstreamError("Server responded: 500 Server Error",
    ...                         details={"status_code": 500})
    ... except StructuredError as e:
    ...     error_json = e.to_dict()
    ...     print(error_json["category"])
    upstream
"""
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"  # Base URI missing, machinery unavailable
    SPECIFICATION = "specification"  # Tag attributes unusable
    REFERENCE = "reference"          # Constant lookup failures
    UPSTREAM = "upstream"            # REST server errors
    CONTENT = "content"              # Missing example content
    XML = "xml"                      # Parse/serialization failures
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class StructuredError(Exception):
    """Base class for all structured errors.

    Attributes:
        message: Human-readable error message
        category: ErrorCategory classification
        severity: ErrorSeverity level
        details: Additional context (dict)
        timestamp: When the error occurred
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to structured dictionary.

        Returns:
            Dictionary with error details in predictable schema:
            {
                "error_type": "ErrorClassName",
                "message": "Human-readable message",
                "category": "configuration|specification|...",
                "severity": "warning|error|critical",
                "details": {...},
                "timestamp": "2024-01-01T12:00:00.000000"
            }
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat()
        }


class FatalConfigError(StructuredError):
    """The REST base URI is missing or blank, or the HTTP/XML machinery
    could not be constructed.

    Example:
        >>> raise FatalConfigError(
        ...     "Bad tut.pori.javadocer.rest_uri",
        ...     details={"property": "tut.pori.javadocer.rest_uri"}
        ... )
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            details=details
        )


class BadSpecError(StructuredError):
    """Service or method missing or blank."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.SPECIFICATION,
            severity=ErrorSeverity.ERROR,
            details=details
        )


class BadTypeError(StructuredError):
    """The ``type`` attribute is missing or not one of GET, POST, DELETE."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.SPECIFICATION,
            severity=ErrorSeverity.ERROR,
            details=details
        )


class BadValueError(StructuredError):
    """Unbalanced ``[`` / ``]`` in an attribute value.

    Example:
        >>> raise BadValueError('Invalid value: "foo]"', details={"value": '"foo]"'})
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.SPECIFICATION,
            severity=ErrorSeverity.ERROR,
            details=details
        )


class BadReferenceError(StructuredError):
    """A bracketed path does not resolve to a readable constant."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.REFERENCE,
            severity=ErrorSeverity.ERROR,
            details=details
        )


class UpstreamError(StructuredError):
    """HTTP status outside [200, 300), or the request could not be made.

    ``details`` carries ``url``, and ``status_code`` / ``reason`` when the
    server answered at all.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.UPSTREAM,
            severity=ErrorSeverity.ERROR,
            details=details
        )

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status_code")

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason")


class NoExampleError(StructuredError):
    """A body document was fetched, but it has no usable <example> subtree."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONTENT,
            severity=ErrorSeverity.ERROR,
            details=details
        )


class XmlError(StructuredError):
    """Response payload is not parseable XML, or serialization failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.XML,
            severity=ErrorSeverity.ERROR,
            details=details
        )
