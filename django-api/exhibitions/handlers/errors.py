"""Map domain errors to HTTP responses.

Installed as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]`` so views can let domain
errors propagate. Anything that is not a DomainError goes to DRF's default
handler.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from exhibitions.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.PRECONDITION_FAILED: status.HTTP_409_CONFLICT,
}


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def domain_exception_handler(exc, context):
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    http_status = STATUS_BY_CODE.get(exc.code)
    if http_status is None:
        # Never expose internal error details
        logger.error("Unmapped domain error in %s: %s", context.get("view"), exc)
        return Response(
            error_body("INTERNAL_ERROR", "Internal server error"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return Response(error_body(exc.code.value, exc.message), status=http_status)
