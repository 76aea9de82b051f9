import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidInput(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class Forbidden(exceptions.PermissionDenied):
    default_detail = 'Not authorized to perform this action.'
    default_code = 'forbidden'


class Conflict(exceptions.APIException):
    # The public API reports conflicts as plain 400s.
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'


class InvalidState(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The resource is not in a state that allows this operation.'
    default_code = 'invalid_state'


class ExternalServiceError(exceptions.APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'External service request failed.'
    default_code = 'external_service_error'


def _first_message(detail):
    """Pull a readable message out of a DRF error detail structure."""
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ''
    if isinstance(detail, dict):
        if not detail:
            return ''
        field, value = next(iter(detail.items()))
        message = _first_message(value)
        if field in ('detail', 'non_field_errors'):
            return message
        return f"{field}: {message}"
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every error as ``{"success": false, "message": ...}``.

    Validation errors keep the per-field breakdown under ``errors``. Anything
    DRF does not know how to handle is logged and turned into a 500.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or 'Not found.')
    elif isinstance(exc, DjangoPermissionDenied):
        exc = Forbidden(str(exc) or None)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'request', exc_info=exc)
        return Response(
            {'success': False, 'message': 'Server Error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = {'success': False, 'message': _first_message(exc.detail)}
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        body['errors'] = exc.detail
    response.data = body
    return response
