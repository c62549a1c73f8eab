from django.contrib.auth import authenticate
from django.test import RequestFactory, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.testing import PASSWORD, access_token, make_user
from .authentication import CustomJWTAuthentication
from .exceptions import Conflict, InsufficientStock, ServiceError, error_message
from .tokens import CustomRefreshToken, blacklist_token, is_blacklisted


class EmailBackendTest(TestCase):

    def setUp(self):
        self.user = make_user('Anna@Example.com')

    def test_authenticate_is_case_insensitive(self):
        user = authenticate(None, email='anna@example.com', password=PASSWORD)
        self.assertEqual(user.pk, self.user.pk)

    def test_wrong_credentials(self):
        self.assertIsNone(authenticate(None, email='anna@example.com', password='wrong'))
        self.assertIsNone(authenticate(None, email='ghost@example.com', password=PASSWORD))


class TokenTest(TestCase):

    def setUp(self):
        self.user = make_user(admin=True)

    def test_custom_claims(self):
        token = CustomRefreshToken.for_user(self.user)
        access = token.access_token
        self.assertEqual(access['user_id'], self.user.user_id)
        self.assertEqual(access['email'], self.user.email)
        self.assertEqual(access['roles'], ['admin', 'user'])

    def test_blacklisted_token_is_rejected(self):
        access = CustomRefreshToken.for_user(self.user).access_token
        request = RequestFactory().get('/', HTTP_AUTHORIZATION=f'Bearer {access}')
        self.assertIsNotNone(CustomJWTAuthentication().authenticate(request))

        blacklist_token(access)

        self.assertTrue(is_blacklisted(access['jti']))
        self.assertIsNone(CustomJWTAuthentication().authenticate(request))

    def test_cookie_token(self):
        request = RequestFactory().get('/')
        request.COOKIES['token'] = access_token(self.user)
        user, _ = CustomJWTAuthentication().authenticate(request)
        self.assertEqual(user.pk, self.user.pk)

    def test_garbage_token_is_anonymous(self):
        response = APIClient().get(reverse('api_me'), HTTP_AUTHORIZATION='Bearer not-a-jwt')
        self.assertEqual(response.status_code, 401)


class ErrorFormatTest(TestCase):

    def test_status_codes(self):
        self.assertEqual(Conflict.status_code, 409)
        self.assertEqual(InsufficientStock.status_code, 409)
        self.assertTrue(issubclass(InsufficientStock, Conflict))
        self.assertEqual(ServiceError.status_code, 500)

    def test_error_message_flattens_detail(self):
        self.assertEqual(error_message(Conflict('Занято')), 'Занято')
        self.assertEqual(error_message(Conflict({'email': ['Занято']})), 'email: Занято')

    def test_api_errors_use_error_key(self):
        response = APIClient().get(reverse('api_order', args=[1]))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(set(response.json()), {'error'})
