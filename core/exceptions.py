from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import (
    APIException,
    NotAuthenticated,
    AuthenticationFailed,
    PermissionDenied,
    ValidationError as DRFValidationError,
)
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("devfest")


class HubError(APIException):
    """
    Base for the expected, typed failures of the hub.

    Carries a user-facing message and optional per-field details. The
    exception handler renders every subclass as ``{"error", "details"?}``.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"

    def __init__(self, message=None, details=None, code=None):
        self.message = message or self.default_detail
        self.details = details
        super().__init__(detail=self.message, code=code)


class ValidationError(HubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid data"
    default_code = "invalid"


class AuthenticationError(HubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "You must be signed in."
    default_code = "not_authenticated"


class AuthorizationError(HubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Unauthorized: Access Denied"
    default_code = "unauthorized"


class NotFoundError(HubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(HubError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class InvalidTransition(ConflictError):
    default_detail = "No actions available for this status."
    default_code = "invalid_transition"


class BackendPreconditionError(HubError):
    """
    Store-level configuration fault (missing composite index, unapplied
    schema). The operator detail is logged; users only see a generic message.
    """
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Something went wrong. Please try again later."
    default_code = "precondition_failed"

    def __init__(self, operator_detail, message=None):
        self.operator_detail = operator_detail
        super().__init__(message=message)


class IntegrationError(Exception):
    """Outbound integration (push notifications) failed. Never fatal."""


def custom_exception_handler(exc, context):
    """
    Wrap hub, DRF and Django exceptions into ``{"error": ..., "details"?: ...}``.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    if isinstance(exc, HubError):
        if isinstance(exc, BackendPreconditionError):
            logger.error(
                "Backend precondition failed in %s: %s",
                context.get("view").__class__.__name__,
                exc.operator_detail,
            )
        body = {"error": exc.message}
        if exc.details:
            body["details"] = exc.details
        return Response(body, status=exc.status_code)

    response = drf_exception_handler(exc, context)

    # If DRF handled it, reshape it
    if response is not None:
        if isinstance(exc, DRFValidationError):
            body = {"error": "Invalid data", "details": response.data}
        elif isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
            body = {"error": AuthenticationError.default_detail}
        elif isinstance(exc, PermissionDenied):
            body = {"error": AuthorizationError.default_detail}
        else:
            body = {"error": response.data.get("detail", "Request failed.")}
        return Response(body, status=response.status_code)

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {"error": "Something went wrong. Please try again."},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
