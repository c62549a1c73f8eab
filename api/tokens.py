# api/tokens.py
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.token_blacklist.models import OutstandingToken, BlacklistedToken
from rest_framework_simplejwt.utils import datetime_from_epoch

TOKEN_PREFIX = 'Bearer '


class CustomRefreshToken(RefreshToken):
    """
    Custom RefreshToken для модели Users с user_id
    """
    @classmethod
    def for_user(cls, user):
        """
        Генерирует токен для Users объекта с user_id
        """
        if not user.pk:
            raise ValueError('User must have a PK to generate token.')

        token = cls()
        token[api_settings.USER_ID_CLAIM] = user.user_id

        # Добавляем email и роли
        token['email'] = user.email
        token['roles'] = user.role_names

        return token


def blacklist_token(token):
    """
    Заносит токен (access или refresh) в таблицы token_blacklist.
    Встроенный RefreshToken.blacklist() ищет пользователя через get_user_model(),
    а у нас пользователи живут в apps.users.Users, поэтому пишем напрямую.
    """
    jti = token.payload.get(api_settings.JTI_CLAIM)
    if not jti:
        return None

    outstanding, _ = OutstandingToken.objects.get_or_create(
        jti=jti,
        defaults={
            'token': str(token),
            'created_at': timezone.now(),
            'expires_at': datetime_from_epoch(token.payload['exp']),
        },
    )
    blacklisted, _ = BlacklistedToken.objects.get_or_create(token=outstanding)
    return blacklisted


def is_blacklisted(jti):
    if not jti:
        return False
    return BlacklistedToken.objects.filter(token__jti=jti).exists()
