from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework.exceptions import AuthenticationFailed
from apps.users.models import Users
from .tokens import is_blacklisted


def get_raw_token_from_request(request):
    """Bearer токен из Authorization header, иначе значение cookie `token`"""
    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    if auth_header.startswith('Bearer '):
        return auth_header[7:].strip() or None
    return request.COOKIES.get(settings.AUTH_COOKIE_NAME) or None


class CustomJWTAuthentication(JWTAuthentication):
    """
    Кастомная аутентификация JWT для работы с user_id
    Вместо встроенной модели User использует apps.users.Users
    """

    def authenticate(self, request):
        """
        Unauthenticated requests proceed as anonymous.
        An invalid or blacklisted token is treated the same as no token.
        """
        raw_token = get_raw_token_from_request(request)
        if not raw_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except (InvalidToken, AuthenticationFailed, TokenError):
            return None

    def get_validated_token(self, raw_token):
        validated_token = super().get_validated_token(raw_token)
        if is_blacklisted(validated_token.get(api_settings.JTI_CLAIM)):
            raise InvalidToken('Token is blacklisted')
        return validated_token

    def get_user(self, validated_token):
        """
        Получает пользователя по user_id из токена
        """
        user_id = validated_token.get(api_settings.USER_ID_CLAIM)
        if not user_id:
            raise InvalidToken('Invalid token: no user_id')

        try:
            return Users.objects.get(user_id=user_id)
        except Users.DoesNotExist:
            raise AuthenticationFailed('User not found')
