"""
Custom exceptions for the marketing CMS.
Services raise these; the API layer maps them to HTTP responses and the
scheduler recovers them per content item.
"""
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class CMSException(Exception):
    """Base exception for the CMS"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": type(self).__name__, **self.details}


class NotFoundError(CMSException):
    """Referenced entity missing"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", resource_id: str = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message, {"resource": resource, "resource_id": resource_id})


class ConflictError(CMSException):
    """Uniqueness or reference violation"""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, resource: str = "Resource", field: str = None, value: str = None, message: str = None):
        if message is None:
            if field and value:
                message = f"{resource} with {field} '{value}' already exists"
            else:
                message = f"{resource} already exists"
        super().__init__(message, {"resource": resource, "field": field, "value": value})


class ValidationFailedError(CMSException):
    """Request data is inconsistent"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str = "Validation failed", field: str = None):
        if field:
            message = f"Validation failed for field '{field}': {message}"
        super().__init__(message, {"field": field})


class InvalidTransitionError(CMSException):
    """State-machine edge not allowed"""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity: str, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid {entity} transition from '{current}' to '{target}'",
            {"entity": entity, "current": current, "target": target},
        )


class PreconditionFailedError(CMSException):
    """Cross-entity gate not satisfied"""
    status_code = status.HTTP_412_PRECONDITION_FAILED

    def __init__(self, message: str, **details: Any):
        super().__init__(message, details)


class GuidelineViolationError(CMSException):
    """Content text contains terms the brand avoids"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, matched_terms: List[str], brand_id: str = None):
        self.matched_terms = list(matched_terms)
        super().__init__(
            f"Content contains avoided terms: {', '.join(self.matched_terms)}",
            {"matched_terms": self.matched_terms, "brand_id": brand_id},
        )


class InvalidStateError(CMSException):
    """Mutation attempted outside the allowed state"""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str, current_state: str = None):
        self.current_state = current_state
        super().__init__(message, {"current_state": current_state})


class PublishError(CMSException):
    """
    External publication channel failed.
    retryable is False when the channel refused this content, so resending
    it unchanged cannot succeed.
    """
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, channel: str = "Publication channel", message: str = None, retryable: bool = True):
        msg = f"{channel} publish failed"
        if message:
            msg = f"{msg}: {message}"
        self.retryable = retryable
        super().__init__(msg, {"channel": channel, "retryable": retryable})


class ResolutionFailure(CMSException):
    """No owning brand could be found for a content item"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, content_id: str = None):
        message = "Could not resolve the owning brand"
        if content_id:
            message = f"Could not resolve the owning brand for content '{content_id}'"
        super().__init__(message, {"content_id": content_id})


async def cms_exception_handler(request: Request, exc: CMSException) -> JSONResponse:
    """Render a CMSException as a JSON error response."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
