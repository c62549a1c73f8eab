from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from apps.users.services import UserService


class Command(BaseCommand):
    help = 'Создаёт пользователя магазина с ролями user и admin'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('password')
        parser.add_argument('--username', default=None)

    def handle(self, *args, **options):
        try:
            user = UserService().join_admin({
                'email': options['email'],
                'password': options['password'],
                'username': options['username'],
            })
        except APIException as e:
            raise CommandError(str(e.detail))

        self.stdout.write(self.style.SUCCESS(f'Администратор создан: {user.email} (id={user.user_id})'))
