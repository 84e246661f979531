"""
Application errors and the JSON error envelope.

Every error leaves the API as ``{"success": false, "message": ..., "code": ...}``,
with ``errors`` added for validation failures.
"""
from typing import Dict, List, Optional

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_error"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        if code:
            self.code = code

    def to_content(self) -> Dict:
        return {"success": False, "message": self.message, "code": self.code}


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    message = "Validation error"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str):
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, errors):
        return cls(format_validation_errors(errors))

    def to_content(self) -> Dict:
        content = super().to_content()
        content["errors"] = self.errors
        return content


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    message = "Resource already exists"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Forbidden: Admin access required"


class StorageError(AppError):
    code = "storage_error"
    message = "Object storage error"


class StorageConfigError(StorageError):
    code = "storage_config"
    message = "Object storage is misconfigured"


class StorageAccessDenied(StorageError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "storage_access_denied"
    message = "Access to object storage was denied"


class StorageNotFound(StorageError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "storage_not_found"
    message = "Content unavailable: object not found in storage"


# Request sections that pydantic puts in front of the field name
_LOCATION_PREFIXES = ("body", "query", "path", "header", "form")


def format_validation_errors(errors) -> List[Dict[str, str]]:
    formatted = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        formatted.append({"field": field, "message": error.get("msg", "Invalid value")})
    return formatted
