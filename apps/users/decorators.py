# apps/users/decorators.py
from functools import wraps
from django.http import JsonResponse
from django.shortcuts import redirect, render
from apps.users.models import Users


def get_user_from_request(request):
    """Извлекает пользователя из JWT токена (проверенного JWTAuthMiddleware)"""
    user_id = getattr(request, 'jwt_user_id', None)
    if not user_id:
        return None
    return Users.objects.filter(user_id=user_id).prefetch_related('roles').first()


def _unauthorized(request):
    if request.headers.get('Accept', '').startswith('application/json'):
        return JsonResponse({"error": "Требуется авторизация"}, status=401)
    return redirect('login')


def require_role(*allowed_roles):
    """
    Декоратор для проверки ролей на функциональных views
    Использование:
        @require_role('admin')
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user = get_user_from_request(request)

            # Нет авторизации - перенаправить на логин
            if not user:
                return _unauthorized(request)

            user_roles = user.role_names
            if not any(role in user_roles for role in allowed_roles):
                return render(
                    request,
                    'error.html',
                    {
                        'status_code': 403,
                        'message': 'У вас нет прав доступа к этой странице',
                        'user_roles': user_roles,
                    },
                    status=403,
                )

            # Передаём user в контекст request
            request.current_user = user
            return view_func(request, *args, **kwargs)

        return wrapper
    return decorator


def require_auth(view_func):
    """Декоратор для проверки авторизации (без проверки ролей)"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        user = get_user_from_request(request)
        if not user:
            return _unauthorized(request)

        request.current_user = user
        return view_func(request, *args, **kwargs)

    return wrapper
