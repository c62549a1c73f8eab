import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.hashers import make_password
from django.db import DatabaseError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from api.exceptions import BadRequest, Conflict, NotFound, ServiceError, Unauthorized
from api.tokens import TOKEN_PREFIX, CustomRefreshToken, blacklist_token, is_blacklisted
from .models import Roles, Users

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Неверный email или пароль'


def set_auth_cookie(response, access):
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        str(access),
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        path=settings.AUTH_COOKIE_PATH,
        httponly=True,
        samesite='Lax',
    )


class UserService:

    def check_email(self, email):
        if not email:
            raise BadRequest('Введите email')
        if Users.objects.filter(email__iexact=email.strip()).exists():
            raise Conflict(f'Email уже зарегистрирован: {email}')

    def _create(self, data, role_names):
        email = (data.get('email') or '').strip()
        password = data.get('password')
        if not password:
            raise BadRequest('Введите пароль')
        self.check_email(email)

        try:
            with transaction.atomic():
                user = Users.objects.create(
                    email=email,
                    username=data.get('username') or email.split('@')[0],
                    password_hash=make_password(password),
                    phone_number=data.get('phone_number') or None,
                )
                for role_name in role_names:
                    role, _ = Roles.objects.get_or_create(role_name=role_name)
                    user.roles.add(role)
        except DatabaseError as e:
            logger.error(f'[AUTH] Ошибка регистрации {email}: {e}')
            raise ServiceError(f'Ошибка при регистрации: {e}')

        logger.info(f'[AUTH] Зарегистрирован {email}, роли: {", ".join(role_names)}')
        return user

    def join(self, data):
        return self._create(data, [Roles.ROLE_USER])

    def join_admin(self, data):
        return self._create(data, [Roles.ROLE_USER, Roles.ROLE_ADMIN])

    def login(self, email, password, response, request=None):
        """
        Проверяет email/пароль, выдаёт access + refresh токены и ставит cookie `token`.
        Возвращает ("Bearer <access>", refresh).
        """
        user = authenticate(request, email=email, password=password)
        if user is None:
            logger.info(f'[AUTH] Неудачный вход: {email}')
            raise Unauthorized(INVALID_CREDENTIALS)

        refresh = CustomRefreshToken.for_user(user)
        access = refresh.access_token

        user.refresh_token = str(refresh)
        user.save(update_fields=['refresh_token', 'updated_at'])

        set_auth_cookie(response, access)
        logger.info(f'[AUTH] Вход: {user.email}')
        return f'{TOKEN_PREFIX}{access}', str(refresh)

    def refresh(self, refresh_token, response):
        """Новый access токен по refresh токену, сохранённому у пользователя"""
        if not refresh_token:
            raise Unauthorized('Refresh токен не передан')

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            raise Unauthorized('Refresh токен недействителен')

        if is_blacklisted(refresh.get(api_settings.JTI_CLAIM)):
            raise Unauthorized('Refresh токен отозван')

        user = Users.objects.filter(user_id=refresh.get(api_settings.USER_ID_CLAIM)).first()
        if user is None or user.refresh_token != refresh_token:
            raise Unauthorized('Refresh токен недействителен')

        access = refresh.access_token
        set_auth_cookie(response, access)
        return f'{TOKEN_PREFIX}{access}'

    @transaction.atomic
    def logout(self, user_id, access_token, response):
        user = Users.objects.filter(user_id=user_id).first()

        if user is not None and user.refresh_token:
            try:
                blacklist_token(RefreshToken(user.refresh_token))
            except TokenError:
                # Уже истёк, отзывать нечего
                pass
            user.refresh_token = None
            user.save(update_fields=['refresh_token', 'updated_at'])

        if access_token:
            if access_token.startswith(TOKEN_PREFIX):
                access_token = access_token[len(TOKEN_PREFIX):]
            try:
                blacklist_token(AccessToken(access_token))
            except TokenError as e:
                logger.info(f'[AUTH] Access токен не отозван: {e}')

        response.delete_cookie(settings.AUTH_COOKIE_NAME, path=settings.AUTH_COOKIE_PATH)
        logger.info(f'[AUTH] Выход: user={user_id}')
        return '/'

    def get_user_info(self, email, username):
        user = Users.objects.filter(email__iexact=email, username=username).first()
        if user is None:
            raise NotFound('Пользователь не найден')
        return user

    def find_by_id(self, user_id):
        user = Users.objects.filter(user_id=user_id).first()
        if user is None:
            raise NotFound(f'Пользователь не найден. ID: {user_id}')
        return user
