"""Maps domain errors raised by services to HTTP responses.

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Internal error details are
never exposed; infrastructure failures are logged and answered generically.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INFRASTRUCTURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        if exc.code is ErrorCode.INFRASTRUCTURE:
            logger.error(
                "Infrastructure failure in %s",
                context.get("view").__class__.__name__,
                exc_info=exc,
            )
            message = "Service temporarily unavailable, please try again"
        else:
            message = exc.message
        return Response(error_body(exc.code.value, message), status=STATUS_BY_CODE[exc.code])

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "detail" in response.data:
        response.data = error_body("REQUEST_ERROR", str(response.data["detail"]))
    return response
