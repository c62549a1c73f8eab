# api/auth_middleware.py
from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed, TokenError
from rest_framework_simplejwt.settings import api_settings

from .authentication import CustomJWTAuthentication, get_raw_token_from_request


class JWTAuthMiddleware:
    """
    Middleware для проверки JWT токена из Authorization header или cookie `token`
    Добавляет user информацию в request если токен валиден
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.jwt_token = None
        request.jwt_user_id = None

        raw_token = get_raw_token_from_request(request)
        if raw_token:
            try:
                validated_token = CustomJWTAuthentication().get_validated_token(raw_token)

                # Сохраняем в request для использования в decorators
                request.jwt_token = validated_token
                request.jwt_user_id = validated_token.get(api_settings.USER_ID_CLAIM)
            except (InvalidToken, AuthenticationFailed, TokenError):
                pass

        return self.get_response(request)
