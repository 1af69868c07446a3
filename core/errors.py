"""
Error taxonomy shared by all LazyMint services

Every failure a service raises is a LazyMintError carrying one ErrorKind and a
machine-readable code. The HTTP layer maps kinds to status codes through
ERROR_STATUS; nothing inspects error messages.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds"""
    VALIDATION = "validation"
    AUTH_REQUIRED = "auth_required"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    EXPIRED = "expired"
    INTERNAL = "internal"


ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH_REQUIRED: 401,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_STATE: 400,
    ErrorKind.EXPIRED: 400,
    ErrorKind.INTERNAL: 500,
}


class ErrorCode:
    """Machine-readable error codes returned to clients"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    CAMPAIGN_NOT_ACTIVE = "CAMPAIGN_NOT_ACTIVE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    CAMPAIGN_ARCHIVED = "CAMPAIGN_ARCHIVED"
    MAX_CLAIMS_BELOW_CURRENT = "MAX_CLAIMS_BELOW_CURRENT"
    MAX_CLAIMS_REACHED = "MAX_CLAIMS_REACHED"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    CLAIM_NOT_FOUND = "CLAIM_NOT_FOUND"
    INVALID_VERIFICATION_TOKEN = "INVALID_VERIFICATION_TOKEN"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    CLAIM_NOT_VERIFIED = "CLAIM_NOT_VERIFIED"
    CLAIM_NOT_COMPLETED = "CLAIM_NOT_COMPLETED"
    TICKET_NOT_AVAILABLE = "TICKET_NOT_AVAILABLE"
    TICKET_GENERATION_FAILED = "TICKET_GENERATION_FAILED"
    NO_FILE_UPLOADED = "NO_FILE_UPLOADED"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    TRANSACTION_CONFLICT = "TRANSACTION_CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class LazyMintError(Exception):
    """Base exception for LazyMint services"""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_code: str = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.field = field

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(LazyMintError):
    """Input failed validation"""
    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.VALIDATION_ERROR


class AuthRequiredError(LazyMintError):
    """Caller is not authenticated"""
    kind = ErrorKind.AUTH_REQUIRED
    default_code = ErrorCode.AUTH_REQUIRED


class PermissionDeniedError(LazyMintError):
    """Caller is authenticated but not allowed"""
    kind = ErrorKind.PERMISSION_DENIED
    default_code = ErrorCode.PERMISSION_DENIED


class NotFoundError(LazyMintError):
    kind = ErrorKind.NOT_FOUND
    default_code = ErrorCode.NOT_FOUND


class ConflictError(LazyMintError):
    kind = ErrorKind.CONFLICT
    default_code = ErrorCode.TRANSACTION_CONFLICT


class InvalidStateError(LazyMintError):
    """Operation not allowed in the record's current state"""
    kind = ErrorKind.INVALID_STATE
    default_code = ErrorCode.INVALID_STATUS_TRANSITION

    def __init__(self, message: str, code: Optional[str] = None, current_status: Optional[str] = None):
        super().__init__(message, code)
        self.current_status = current_status


class ExpiredError(LazyMintError):
    kind = ErrorKind.EXPIRED
    default_code = ErrorCode.TOKEN_EXPIRED


class InternalError(LazyMintError):
    """Unexpected failure; the message is never shown to clients"""
    kind = ErrorKind.INTERNAL
    default_code = ErrorCode.INTERNAL_ERROR

    PUBLIC_MESSAGE = "Internal server error"

    def to_dict(self) -> dict:
        return {"error": self.PUBLIC_MESSAGE, "code": self.code}


__all__ = [
    "ErrorKind",
    "ErrorCode",
    "ERROR_STATUS",
    "LazyMintError",
    "ValidationError",
    "AuthRequiredError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "InvalidStateError",
    "ExpiredError",
    "InternalError",
]
