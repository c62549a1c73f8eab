# api/middleware.py
import logging

from django.shortcuts import render
from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import APIException

from .exceptions import error_message

logger = logging.getLogger(__name__)


class ServiceErrorMiddleware(MiddlewareMixin):
    """
    Ошибки сервисного слоя (NotFound, Forbidden, ServiceError...), выброшенные из
    страничных views, превращаются в страницу error.html с соответствующим статусом.
    API views обрабатывают их сами через api.exceptions.custom_exception_handler.
    """

    def process_exception(self, request, exception):
        if not isinstance(exception, APIException):
            return None

        status_code = exception.status_code
        message = error_message(exception)
        if status_code >= 500:
            logger.error(f"[PAGE] {request.path}: {message}")
        else:
            logger.info(f"[PAGE] {request.path}: {status_code} {message}")

        return render(
            request,
            'error.html',
            {'status_code': status_code, 'message': message},
            status=status_code,
        )
