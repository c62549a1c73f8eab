"""Общие фабрики данных для тестов приложений"""
from decimal import Decimal

from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient

from api.tokens import CustomRefreshToken
from apps.options.models import Options
from apps.products.models import Products
from apps.users.models import Roles, Users

PASSWORD = 'secret123'


def make_user(email='buyer@example.com', password=PASSWORD, admin=False, username=None):
    user = Users.objects.create(
        email=email,
        username=username or email.split('@')[0],
        password_hash=make_password(password),
    )
    role_names = [Roles.ROLE_USER] + ([Roles.ROLE_ADMIN] if admin else [])
    for role_name in role_names:
        role, _ = Roles.objects.get_or_create(role_name=role_name)
        user.roles.add(role)
    return user


def make_product(name='Диван', price='10000.00', category=None, options=(('Серый', '0.00', 5),)):
    product = Products.objects.create(
        product_name=name,
        description=f'{name} для гостиной',
        price=Decimal(price),
        category=category,
    )
    for option_name, delta, stock in options:
        Options.objects.create(
            product=product,
            option_name=option_name,
            price=Decimal(delta),
            stock_quantity=stock,
        )
    return product


def access_token(user):
    return str(CustomRefreshToken.for_user(user).access_token)


def auth_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access_token(user)}')
    return client
