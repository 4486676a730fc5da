"""
Error handling for the jobs API.

Maps the classified job / ETA failures onto HTTP responses so every error body
carries a `kind` the client can act on:
- fixable request (validation, duplicate reference, empty upload, unroutable addresses) -> 400
- unknown job id -> 404
- routing provider down -> 502 (try again later)
"""
import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from jobs.errors import (
    DuplicateReferenceError,
    EmptyOrInvalidUploadError,
    JobError,
    JobNotFoundError,
    JobValidationError,
)
from routing.eta_service import EtaError, ProviderUnavailableError, RouteUnresolvableError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (JobNotFoundError, status.HTTP_404_NOT_FOUND),
    (JobValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateReferenceError, status.HTTP_400_BAD_REQUEST),
    (EmptyOrInvalidUploadError, status.HTTP_400_BAD_REQUEST),
    (RouteUnresolvableError, status.HTTP_400_BAD_REQUEST),
    (ProviderUnavailableError, status.HTTP_502_BAD_GATEWAY),
]


def tracker_exception_handler(exc, context):
    if isinstance(exc, (JobError, EtaError)):
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_class, mapped_status in _STATUS_BY_ERROR:
            if isinstance(exc, error_class):
                http_status = mapped_status
                break
        logger.warning(f"{context['view'].__class__.__name__}: {exc.kind}: {exc}")
        return Response({"kind": exc.kind, "message": str(exc)}, status=http_status)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {"kind": JobValidationError.kind, "message": "Invalid request", "errors": response.data}
    else:
        # Http404 / PermissionDenied arrive here as plain Django exceptions
        response.data = {
            "kind": getattr(exc, "default_code", "error"),
            "message": str(getattr(exc, "detail", exc)),
        }
    return response
