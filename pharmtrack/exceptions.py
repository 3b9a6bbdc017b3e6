import logging

from django.core.exceptions import ObjectDoesNotExist
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull a single readable message out of a DRF error detail"""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field == api_settings.NON_FIELD_ERRORS_KEY:
                return message
            return f'{field}: {message}'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every API error as {"message": ...}.

    Validation errors keep the field detail under "errors". Anything DRF
    does not know how to handle is logged and turned into a generic 500.
    """
    if isinstance(exc, ObjectDoesNotExist):
        exc = Http404(str(exc))

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'API view')
        return Response({'message': 'Server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'message': _first_message(exc.detail),
            'errors': exc.detail,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'message': str(response.data['detail'])}

    return response
