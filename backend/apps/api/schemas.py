from typing import Dict

from drf_spectacular.utils import OpenApiResponse
from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField(help_text="Stable machine code, e.g. INVALID_QUANTITY")
    message = serializers.CharField(help_text="Human readable text, safe to show as is")
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)
    extra = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


ERROR_DESCRIPTIONS = {
    400: "Malformed payload or quantity (VALIDATION_ERROR, INVALID_QUANTITY)",
    401: "Missing or invalid bearer token (UNAUTHORIZED)",
    403: "Caller is not a client account (FORBIDDEN)",
    404: "Unknown product, or no cart under the strict policy (NOT_FOUND, CART_NOT_FOUND)",
    422: "Order rejected for the vendor (VENDOR_SUBMISSION_FAILED)",
}


def error_responses(*statuses: int) -> Dict[int, OpenApiResponse]:
    """Schema entries for the error envelope, keyed by HTTP status."""
    return {
        code: OpenApiResponse(
            response=ErrorResponseSerializer, description=ERROR_DESCRIPTIONS.get(code, "")
        )
        for code in statuses
    }
