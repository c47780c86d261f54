from collections.abc import Mapping
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_QUANTITY": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CART_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UNPROCESSABLE_ENTITY": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "VENDOR_SUBMISSION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "TOO_MANY_REQUESTS": status.HTTP_429_TOO_MANY_REQUESTS,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the error envelope shared by every endpoint::

        {"error": {"code", "message", "status", "details"?, "hint"?, "extra"?}}

    Args:
        code: Machine-readable identifier, upper-cased before use.
        message: Human-readable explanation; clients may show it verbatim.
        details: Optional structured context (validation errors, offending ids).
        http_status: Explicit status overriding ``ERROR_STATUS_MAP``.
        hint: Optional remediation advice.
        extra: Optional additional machine-readable fields.
        headers: Optional response headers.
    """
    if not isinstance(code, str) or not code.strip():
        raise ValueError("error_response requires a non-empty string code")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("error_response requires a non-empty string message")
    if extra is not None and not isinstance(extra, Mapping):
        raise TypeError("error_response extra must be a mapping if provided")
    if headers is not None and not isinstance(headers, Mapping):
        raise TypeError("error_response headers must be a mapping if provided")

    normalized_code = code.strip().upper()
    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(normalized_code, DEFAULT_ERROR_STATUS)
    )
    if not 100 <= status_code <= 599:
        raise ValueError("error_response status must be a valid HTTP status code")

    body: Dict[str, Any] = {
        "code": normalized_code,
        "message": message.strip(),
        "status": status_code,
    }
    if details is not None:
        body["details"] = _normalize_details(details)
    if hint is not None:
        body["hint"] = hint
    if extra:
        body["extra"] = dict(extra)

    response_headers = (
        {str(key): str(value) for key, value in headers.items()} if headers else None
    )
    return Response({"error": body}, status=status_code, headers=response_headers)
