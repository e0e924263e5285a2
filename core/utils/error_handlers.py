"""
Error Handling Utilities

Provides the decorator that turns service-layer exceptions into unified
API error responses.
"""
from functools import wraps
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.exceptions import PermissionDenied, ObjectDoesNotExist
from django.http import Http404
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
import json
import logging

from core.exceptions import (
    PriorityException,
    ResourceNotFoundError,
    InvalidDateRangeError,
    ValidationError as PriorityValidationError,
    DuplicateError,
    RateLimitError,
    ExternalServiceError,
    ExternalServiceTimeout,
)
from core.utils.response_helpers import UXResponse

logger = logging.getLogger(__name__)


def _first_validation_message(e):
    """Pick the first field error out of a Django/DRF validation container."""
    if hasattr(e, 'message_dict') and e.message_dict:
        first_field = next(iter(e.message_dict))
        return f"{first_field}: {e.message_dict[first_field][0]}"
    if hasattr(e, 'detail') and e.detail:
        if isinstance(e.detail, dict):
            first_field = next(iter(e.detail))
            value = e.detail[first_field]
            if isinstance(value, list) and value:
                value = value[0]
            return f"{first_field}: {value}"
        if isinstance(e.detail, list) and e.detail:
            return str(e.detail[0])
        return str(e.detail)
    return str(e)


def handle_service_errors(view_func):
    """
    Decorator for API views to handle exceptions and return consistent UXResponses.
    Catches service-layer exceptions and standard Django/DRF exceptions.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)

        # --- Not Found Errors ---
        except (ResourceNotFoundError, Http404, ObjectDoesNotExist) as e:
            return UXResponse.error(
                message=str(e) or "Resource not found",
                error_code="NOT_FOUND",
                status=404
            )

        # --- Permission Errors ---
        except (PermissionDenied, DRFPermissionDenied) as e:
            return UXResponse.error(
                message=str(e) or "Permission denied",
                error_code="PERMISSION_DENIED",
                status=403
            )

        except DuplicateError as e:
            return UXResponse.error(
                message=str(e),
                error_code="DUPLICATE",
                status=409
            )

        except RateLimitError as e:
            return UXResponse.error(
                message=str(e),
                error_code="RATE_LIMITED",
                details={'suggestion': e.suggestion} if e.suggestion else None,
                status=429
            )

        # --- Upstream Errors ---
        except ExternalServiceTimeout as e:
            logger.warning(f"Upstream timeout: {e}")
            return UXResponse.error(
                message=str(e),
                error_code="UPSTREAM_TIMEOUT",
                retry=True,
                status=504
            )

        except ExternalServiceError as e:
            logger.warning(f"Upstream failure: {e}")
            return UXResponse.error(
                message=str(e),
                error_code="UPSTREAM_ERROR",
                retry=True,
                status=502
            )

        # --- Validation Errors ---
        except PriorityValidationError as e:
            return UXResponse.error(
                message=e.message,
                error_code="VALIDATION_ERROR",
                details={e.field: e.message},
                status=400
            )

        except (InvalidDateRangeError, json.JSONDecodeError) as e:
            msg = str(e)
            if isinstance(e, json.JSONDecodeError):
                msg = "Invalid JSON body"

            return UXResponse.error(
                message=msg,
                error_code="VALIDATION_ERROR",
                status=400
            )

        except (DjangoValidationError, DRFValidationError) as e:
            return UXResponse.error(
                message=_first_validation_message(e),
                error_code="VALIDATION_ERROR",
                status=400
            )

        # --- Generic Application Errors ---
        except PriorityException as e:
            return UXResponse.error(
                message=str(e),
                error_code="APP_ERROR",
                status=400
            )

        # --- Unexpected Errors ---
        except Exception as e:
            logger.exception(f"Unhandled error in {view_func.__name__}: {e}")

            return UXResponse.error(
                message="An unexpected error occurred",
                error_code="INTERNAL_ERROR",
                retry=True,
                status=500
            )

    return wrapper
