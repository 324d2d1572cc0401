"""Error payload schemas."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class ErrorCode(StrEnum):
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    ACCOUNT_EXISTS = "ACCOUNT_EXISTS"
    USER_CANCELLED = "USER_CANCELLED"
    CREDENTIAL_CONFLICT = "CREDENTIAL_CONFLICT"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"
    # Bridge-only codes; core services never raise these.
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"


class ErrorResponse(BaseModel):
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None
