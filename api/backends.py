# api/backends.py
from django.contrib.auth.hashers import check_password, make_password
from apps.users.models import Users


class EmailBackend:
    """
    Аутентификация по email + паролю для модели Users.
    Подключается через AUTHENTICATION_BACKENDS и вызывается из django.contrib.auth.authenticate()
    """

    def authenticate(self, request, email=None, password=None, **kwargs):
        if not email or password is None:
            return None

        try:
            user = Users.objects.get(email__iexact=email.strip())
        except Users.DoesNotExist:
            # Хешируем впустую, чтобы время ответа не выдавало существование email
            make_password(password)
            return None

        if not check_password(password, user.password_hash):
            return None
        return user

    def get_user(self, user_id):
        return Users.objects.filter(user_id=user_id).first()
