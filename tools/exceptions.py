import logging

from rest_framework import serializers
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def extract_first_error(errors):
    """
    Walks a DRF error payload (nested dicts/lists) and returns the first message.
    """

    if isinstance(errors, dict):
        for value in errors.values():
            message = extract_first_error(value)
            if message:
                return message
    elif isinstance(errors, list) and errors:
        return extract_first_error(errors[0])
    elif isinstance(errors, (str, serializers.ErrorDetail)):
        return str(errors)
    return None


def custom_exception_handler(exc, context):
    """
    Flattens every handled API error into `{"detail": "<first message>"}`.

    Exceptions DRF does not know about are left to Django (500), after being
    logged together with the view that raised them.
    """

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s", view.__class__.__name__ if view else "unknown view",
            exc_info=exc,
        )
        return None

    if isinstance(response.data, (dict, list)):
        response.data = {"detail": extract_first_error(response.data) or "Invalid request"}

    return response
