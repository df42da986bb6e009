"""DRF exception handler.

Translates the shared error taxonomy into HTTP responses by exception
type and renders every error with the same body shape::

    {"error": "<message>", "code": "<CODE>", "status": <http status>}

Validation failures add an ``errors`` list of ``{"field", "detail"}``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import (
    Conflict,
    DomainError,
    InvalidArgument,
    NotFound,
    StorageFailure,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_KIND = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (InvalidArgument, status.HTTP_400_BAD_REQUEST),
)


def _body(
    message: str,
    code: str,
    http_status: int,
    errors: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message, "code": code, "status": http_status}
    if errors is not None:
        body["errors"] = errors
    return body


def _validation_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "__root__",
            "detail": error["msg"],
        }
        for error in exc.errors()
    ]


def catalog_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    if isinstance(exc, DomainError):
        for kind, http_status in _STATUS_BY_KIND:
            if isinstance(exc, kind):
                return Response(
                    _body(str(exc), exc.code, http_status), status=http_status
                )
        return Response(
            _body(str(exc), exc.code, status.HTTP_400_BAD_REQUEST),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, PydanticValidationError):
        http_status = status.HTTP_400_BAD_REQUEST
        return Response(
            _body(
                "Invalid request payload.",
                "VALIDATION_ERROR",
                http_status,
                _validation_errors(exc),
            ),
            status=http_status,
        )

    if isinstance(exc, StorageFailure):
        logger.error("api.storage_failure", error=str(exc))
        http_status = status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(
            _body("Storage unavailable.", exc.code, http_status), status=http_status
        )

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        code = getattr(detail, "code", None) or "error"
        message = str(detail) if detail is not None else "Invalid request."
        response.data = _body(message, str(code).upper(), response.status_code)
    return response
