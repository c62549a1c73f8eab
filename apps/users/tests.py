from io import StringIO

from django.contrib.auth.hashers import check_password
from django.core.management import call_command
from django.http import HttpResponse
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from api.exceptions import Conflict, NotFound, Unauthorized
from apps.testing import PASSWORD, make_user
from .models import Roles, Users
from .services import UserService


class UserServiceTest(TestCase):
    "Регистрация, вход, обновление токена и выход"

    def setUp(self):
        self.service = UserService()

    def join(self, email='anna@example.com', password=PASSWORD):
        return self.service.join({'email': email, 'password': password, 'username': 'anna'})

    def test_join_hashes_password_and_grants_user_role(self):
        user = self.join()
        self.assertNotEqual(user.password_hash, PASSWORD)
        self.assertTrue(check_password(PASSWORD, user.password_hash))
        self.assertEqual(user.role_names, [Roles.ROLE_USER])
        self.assertFalse(user.is_admin)

    def test_join_duplicate_email(self):
        "повторная регистрация email: Conflict, первый пользователь не меняется"
        first = self.join()
        with self.assertRaises(Conflict):
            self.service.join({'email': 'ANNA@example.com', 'password': 'other-password', 'username': 'clone'})

        self.assertEqual(Users.objects.count(), 1)
        first.refresh_from_db()
        self.assertEqual(first.username, 'anna')
        self.assertTrue(check_password(PASSWORD, first.password_hash))

    def test_join_admin(self):
        user = self.service.join_admin({'email': 'boss@example.com', 'password': PASSWORD, 'username': 'boss'})
        self.assertEqual(user.role_names, [Roles.ROLE_ADMIN, Roles.ROLE_USER])
        self.assertTrue(user.is_admin)

    def test_check_email(self):
        self.join()
        self.service.check_email('free@example.com')
        with self.assertRaises(Conflict):
            self.service.check_email('anna@example.com')

    def test_login_sets_cookie(self):
        self.join()
        response = HttpResponse()

        access, refresh = self.service.login('anna@example.com', PASSWORD, response)

        self.assertTrue(access.startswith('Bearer '))
        cookie = response.cookies['token']
        self.assertEqual(cookie.value, access[len('Bearer '):])
        self.assertEqual(cookie['max-age'], 3600)
        self.assertEqual(cookie['path'], '/')
        self.assertTrue(cookie['httponly'])
        self.assertEqual(Users.objects.get(email='anna@example.com').refresh_token, refresh)

    def test_login_failures_are_indistinguishable(self):
        self.join()
        for email, password in (('anna@example.com', 'wrong-password'), ('ghost@example.com', PASSWORD)):
            with self.subTest(email=email):
                with self.assertRaises(Unauthorized) as ctx:
                    self.service.login(email, password, HttpResponse())
                self.assertEqual(str(ctx.exception.detail), 'Неверный email или пароль')

    def test_refresh_issues_new_access(self):
        self.join()
        _, refresh = self.service.login('anna@example.com', PASSWORD, HttpResponse())

        response = HttpResponse()
        access = self.service.refresh(refresh, response)

        self.assertTrue(access.startswith('Bearer '))
        self.assertIn('token', response.cookies)

    def test_refresh_rejects_unknown_token(self):
        for token in ('', 'garbage'):
            with self.subTest(token=token):
                with self.assertRaises(Unauthorized):
                    self.service.refresh(token, HttpResponse())

    def test_logout_revokes_tokens(self):
        user = self.join()
        access, refresh = self.service.login('anna@example.com', PASSWORD, HttpResponse())
        response = HttpResponse()

        redirect_to = self.service.logout(user.user_id, access, response)

        self.assertEqual(redirect_to, '/')
        self.assertIsNone(Users.objects.get(pk=user.pk).refresh_token)
        self.assertEqual(BlacklistedToken.objects.count(), 2)
        self.assertEqual(response.cookies['token'].value, '')
        with self.assertRaises(Unauthorized):
            self.service.refresh(refresh, HttpResponse())

    def test_get_user_info(self):
        user = self.join()
        self.assertEqual(self.service.get_user_info('anna@example.com', 'anna').pk, user.pk)
        with self.assertRaises(NotFound):
            self.service.get_user_info('anna@example.com', 'someone-else')

    def test_createadmin_command(self):
        call_command('createadmin', 'root@example.com', PASSWORD, username='root', stdout=StringIO())
        self.assertTrue(Users.objects.get(email='root@example.com').is_admin)


class AuthApiTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        make_user('anna@example.com')

    def login(self):
        return self.client.post(reverse('api_login'), {'email': 'anna@example.com', 'password': PASSWORD}, format='json')

    def test_join(self):
        response = self.client.post(
            reverse('api_join'),
            {'email': 'new@example.com', 'password': PASSWORD, 'username': 'new'},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertTrue(Users.objects.filter(email='new@example.com').exists())

    def test_join_duplicate_returns_409(self):
        response = self.client.post(
            reverse('api_join'),
            {'email': 'anna@example.com', 'password': PASSWORD, 'username': 'anna'},
            format='json',
        )
        self.assertEqual(response.status_code, 409)

    def test_join_short_password(self):
        response = self.client.post(
            reverse('api_join'),
            {'email': 'new@example.com', 'password': '123', 'username': 'new'},
            format='json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.json()['details'])

    def test_join_admin_requires_admin(self):
        payload = {'email': 'boss@example.com', 'password': PASSWORD, 'username': 'boss'}
        self.assertEqual(self.client.post(reverse('api_join_admin'), payload, format='json').status_code, 401)

        self.login()
        self.assertEqual(self.client.post(reverse('api_join_admin'), payload, format='json').status_code, 403)

    def test_login_cookie_authenticates_next_requests(self):
        response = self.login()
        self.assertEqual(response.status_code, 200)
        self.assertIn('token', response.cookies)

        me = self.client.get(reverse('api_me'))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['email'], 'anna@example.com')

    def test_login_wrong_password(self):
        response = self.client.post(reverse('api_login'), {'email': 'anna@example.com', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Неверный email или пароль'})

    def test_logout_invalidates_cookie_token(self):
        self.login()
        token = self.client.cookies['token'].value

        self.assertEqual(self.client.post(reverse('api_logout')).status_code, 200)

        # Старый токен больше не принимается даже в заголовке
        replay = APIClient()
        replay.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        self.assertEqual(replay.get(reverse('api_me')).status_code, 401)

    def test_token_refresh(self):
        refresh = self.login().json()['refresh']
        response = APIClient().post(reverse('token_refresh'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['access'].startswith('Bearer '))

    def test_check_email(self):
        url = reverse('api_check_email')
        self.assertEqual(self.client.get(url, {'email': 'free@example.com'}).status_code, 200)
        self.assertEqual(self.client.get(url, {'email': 'anna@example.com'}).status_code, 409)

    def test_user_info(self):
        url = reverse('api_user_info')
        self.assertEqual(
            self.client.post(url, {'email': 'anna@example.com', 'username': 'anna'}, format='json').status_code, 200
        )
        self.assertEqual(
            self.client.post(url, {'email': 'anna@example.com', 'username': 'bob'}, format='json').status_code, 404
        )
