"""
Project-wide DRF exception handler.

Every error body is reshaped into `{"message": "..."}`. Validation errors are
aggregated into one message that lists every failing field instead of only
the first one.
"""
import logging

from rest_framework.exceptions import APIException
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def flatten_error_detail(detail) -> str:
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            message = flatten_error_detail(value)
            if field in (api_settings.NON_FIELD_ERRORS_KEY, "detail"):
                parts.append(message)
            else:
                parts.append(f"{field}: {message}")
        return "; ".join(parts)

    if isinstance(detail, (list, tuple)):
        return ", ".join(flatten_error_detail(item) for item in detail)

    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, APIException):
        detail = exc.detail
    else:
        detail = response.data

    response.data = {"message": flatten_error_detail(detail)}

    request = context.get("request")
    if response.status_code >= 400:
        logger.info(
            "request rejected",
            extra={
                "correlation_id": getattr(request, "correlation_id", None),
                "status_code": response.status_code,
                "path": getattr(request, "path", None),
                "error": response.data["message"],
            },
        )
    return response
