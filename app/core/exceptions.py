"""Custom exception hierarchy."""

class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass


class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""
    pass


class ExtractionUnavailableError(AppError):
    """Raised when an extraction operation yields no usable payload."""

    def __init__(self, operation: str, message: str, original_error: Exception = None):
        super().__init__(f"{operation}: {message}", original_error=original_error)
        self.operation = operation


class DocumentReadError(AppError):
    """Raised when uploaded document content cannot be decoded to text."""
    pass


class UnsupportedDocumentError(DocumentReadError):
    """Raised when the uploaded document type is not supported."""
    pass


class ValidationError(AppError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass
