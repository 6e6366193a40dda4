"""Custom exceptions for the BFHL API."""


class BFHLError(Exception):
    """Base exception for all BFHL API errors."""
    
    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class InvalidShapeError(BFHLError):
    """Raised when the request body is not a JSON object."""
    
    def __init__(self, message: str = "Request body must be a JSON object"):
        super().__init__(message=message, code="INVALID_SHAPE")


class InvalidKeyCountError(BFHLError):
    """Raised when the request body does not carry exactly one key.
    
    Attributes:
        key_count: Number of keys found in the body.
    """
    
    def __init__(self, key_count: int):
        super().__init__(
            message="Request must contain exactly one key",
            code="INVALID_KEY_COUNT"
        )
        self.key_count = key_count


class ForbiddenKeyError(BFHLError):
    """Raised when the key is a prototype-pollution-sensitive name.
    
    Attributes:
        key: The rejected key.
    """
    
    def __init__(self, key: str):
        super().__init__(
            message=f"Forbidden key: {key}",
            code="FORBIDDEN_KEY"
        )
        self.key = key


class UnknownOperationError(BFHLError):
    """Raised when the key does not name a supported operation.
    
    Attributes:
        key: The unrecognized key.
    """
    
    def __init__(self, key: str):
        super().__init__(
            message=f"Invalid key: {key}",
            code="UNKNOWN_OPERATION"
        )
        self.key = key


class InvalidInputError(BFHLError):
    """Raised when an operation's input fails validation."""
    
    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_INPUT")


class ConfigError(BFHLError):
    """Raised when a required setting is missing."""
    
    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIG_ERROR")


class UpstreamError(BFHLError):
    """Raised when the external AI service fails.
    
    Attributes:
        status_code: HTTP status returned upstream, if any.
    """
    
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message=message, code="UPSTREAM_ERROR")
        self.status_code = status_code


class InvalidJSONError(BFHLError):
    """Raised when the request body cannot be decoded as JSON."""
    
    def __init__(self):
        super().__init__(message="Invalid JSON in request body", code="INVALID_JSON")
