"""Application exception types."""

from typing import Any

from aidguide.schemas.error import ErrorCode, ErrorResponse


class ServiceError(Exception):
    """Typed failure raised by core write-style operations."""

    def __init__(self, code: ErrorCode, message: str, details: dict[str, Any] | None = None) -> None:
        self.code = code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class StoreError(Exception):
    """Raised by store adapters when the backing service cannot complete a call."""

    def __init__(self, message: str, *, code: ErrorCode = ErrorCode.NETWORK_FAILURE) -> None:
        self.code = code
        super().__init__(message)


class DocumentNotFoundError(StoreError):
    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(f"{collection}/{document_id} does not exist", code=ErrorCode.NOT_FOUND)
        self.collection = collection
        self.document_id = document_id


class ConfigurationError(Exception):
    """Raised when settings cannot produce a working service container."""


__all__ = ["ConfigurationError", "DocumentNotFoundError", "ServiceError", "StoreError"]
