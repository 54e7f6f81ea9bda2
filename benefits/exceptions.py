"""
Project exceptions and the unified API error body.

Every error leaves the API as ``{"error": <message>, "code": <code>}``;
validation failures additionally carry the per-field messages under
``"fields"``.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict with the current state of the resource.'
    default_code = 'conflict'


class CardNumberExhausted(APIException):
    """No free card number was found within the configured attempts."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Could not allocate a unique card number.'
    default_code = 'card_number_exhausted'


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for field, value in detail.items():
            msg = _first_message(value)
            return msg if field in ('non_field_errors', 'detail') else f'{field}: {msg}'
        return 'Invalid input.'
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else 'Invalid input.'
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', type(view).__name__ if view else 'unknown view')
        return Response({'error': 'Internal server error', 'code': 'server_error'}, status=500)

    if isinstance(exc, exceptions.ValidationError):
        resp.data = {'error': _first_message(exc.detail), 'code': 'validation_error', 'fields': exc.detail}
    else:
        codes = exc.get_codes()
        resp.data = {'error': _first_message(exc.detail), 'code': codes if isinstance(codes, str) else 'api_error'}
    if resp.status_code >= 500:
        logger.error('api error %s: %s', resp.status_code, resp.data['error'])
    return resp
