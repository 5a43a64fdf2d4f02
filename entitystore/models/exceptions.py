"""
Custom exceptions for the entity access layer.
"""

HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500


class EntityStoreError(Exception):
    """
    Base class for every error the access layer reports.

    Carries a ``code``/``message`` pair that callers (for example the HTTP
    layer) can surface directly, plus the store exception that caused it,
    if any.
    """

    def __init__(
        self,
        code: int | str,
        message: str,
        cause: BaseException | None = None,
    ):
        """
        Initialize error.

        Args:
            code: Numeric or symbolic error code.
            message: Human readable description.
            cause: Underlying store exception, if any.
        """
        self.code = code
        self.message = message
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, int | str]:
        return {"code": self.code, "message": self.message}


class NotFoundError(EntityStoreError):
    """Raised when a key resolves to no record and the store reported no error."""

    def __init__(self, message: str = "Not found"):
        super().__init__(HTTP_NOT_FOUND, message)


class StoreError(EntityStoreError):
    """
    Raised when the underlying store fails an operation.

    The code is taken from the cause when it exposes an integer ``code``
    attribute (``google.api_core`` exceptions do), otherwise 500. The
    message is the cause's own text, unchanged.
    """

    operation = "access"

    def __init__(self, cause: BaseException):
        code = getattr(cause, "code", None)
        if not isinstance(code, int) or isinstance(code, bool):
            code = HTTP_INTERNAL_ERROR
        message = str(cause) or f"Store {self.operation} failed: {type(cause).__name__}"
        super().__init__(code, message, cause)


class StoreReadError(StoreError):
    """Raised when a get by key fails in the store."""

    operation = "read"


class StoreWriteError(StoreError):
    """Raised when a put fails in the store."""

    operation = "write"


class StoreDeleteError(StoreError):
    """Raised when a delete fails in the store."""

    operation = "delete"


class StoreQueryError(StoreError):
    """Raised when an ordered query fails in the store."""

    operation = "query"
