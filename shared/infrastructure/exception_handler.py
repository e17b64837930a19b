"""
DRF exception handler for domain errors.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Domain errors are
translated to HTTP responses by family; everything else falls through to
the stock DRF handler.
"""

from __future__ import annotations

import structlog
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    BusinessRuleViolation,
    ConflictError,
    DomainError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)

STATUS_BY_FAMILY = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (BusinessRuleViolation, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: DomainError) -> int:
    for family, http_status in STATUS_BY_FAMILY:
        if isinstance(exc, family):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):  # type: ignore
    if isinstance(exc, DomainError):
        http_status = status_for(exc)
        view = context.get("view")
        logger.info(
            "domain_error",
            error=exc.code,
            status=http_status,
            view=view.__class__.__name__ if view else None,
            detail=exc.message,
            **exc.context,
        )
        return Response({"error": exc.code, "detail": exc.message}, status=http_status)
    return drf_exception_handler(exc, context)
