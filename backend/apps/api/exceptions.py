from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

GENERIC_SERVER_MESSAGE = "Something went wrong"


class ApplicationError(Exception):
    """
    Error raised by services and views that maps onto the API error envelope.

    Subclasses set ``code`` (and optionally ``status_code``) as class
    attributes so call sites only need to pass a message and details.
    """

    code = "SERVER_ERROR"
    status_code: Optional[int] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        if message is None:
            message, code = code, None
        message = message or GENERIC_SERVER_MESSAGE
        super().__init__(message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        self.details = details
        self.hint = hint
        self.extra = extra
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every failure leaves as the error envelope."""
    log = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        log.info("Handled application error", code=exc.code, error_message=exc.message)
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(
            exc.message_dict if hasattr(exc, "message_dict") else list(exc.messages)
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception reached the API boundary")
        return error_response(
            "SERVER_ERROR",
            GENERIC_SERVER_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details = _classify(exc, response.data, response.status_code)
    log.info("Converted framework exception", code=code, status=response.status_code)
    return error_response(
        code,
        message,
        details,
        http_status=response.status_code,
        headers=dict(response.headers) if getattr(response, "headers", None) else None,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _classify(
    exc: Exception, payload: Any, status_code: int
) -> Tuple[str, str, Optional[Any]]:
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR", _message(payload, "Validation failed"), payload
    if isinstance(exc, ParseError):
        return "VALIDATION_ERROR", _message(payload, "Malformed request"), None
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return "UNAUTHORIZED", _message(payload, "Authentication required"), None
    if isinstance(exc, (PermissionDenied, DjangoPermissionDenied)):
        return (
            "FORBIDDEN",
            _message(payload, "You do not have permission to perform this action"),
            None,
        )
    if isinstance(exc, (NotFound, Http404)):
        return "NOT_FOUND", _message(payload, "Resource not found"), None
    if isinstance(exc, MethodNotAllowed):
        return "METHOD_NOT_ALLOWED", _message(payload, "Method not allowed"), None
    if status_code >= 500:
        return "SERVER_ERROR", GENERIC_SERVER_MESSAGE, None
    return "REQUEST_FAILED", _message(payload, "Request failed"), None


def _message(payload: Any, fallback: str) -> str:
    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
