# api/exceptions.py
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BadRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Некорректный запрос'
    default_code = 'bad_request'


class Unauthorized(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Требуется авторизация'
    default_code = 'unauthorized'


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Доступ запрещён'
    default_code = 'forbidden'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Не найдено'
    default_code = 'not_found'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Конфликт данных'
    default_code = 'conflict'


class InsufficientStock(Conflict):
    default_detail = 'Недостаточно товара на складе'
    default_code = 'insufficient_stock'


class ServiceError(APIException):
    """Catch-all for persistence failures and unexpected errors inside services."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Внутренняя ошибка сервера'
    default_code = 'service_error'


def error_message(exc):
    """Flattens DRF detail (str / list / dict) into one human-readable line"""
    detail = getattr(exc, 'detail', str(exc))
    if isinstance(detail, dict):
        parts = []
        for field, messages in detail.items():
            if isinstance(messages, (list, tuple)):
                messages = '; '.join(str(m) for m in messages)
            parts.append(f'{field}: {messages}')
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return '; '.join(str(m) for m in detail)
    return str(detail)


def custom_exception_handler(exc, context):
    """
    Все ошибки API отдаются в одном формате: {"error": "..."}
    Для ошибок валидации сериализаторов дополнительно возвращаются поля в "details"
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    payload = {'error': error_message(exc)}
    if isinstance(getattr(exc, 'detail', None), dict):
        payload['details'] = response.data

    if response.status_code >= 500:
        view = context.get('view')
        logger.error(f"[API] {view.__class__.__name__ if view else 'view'}: {payload['error']}")

    response.data = payload
    return response
