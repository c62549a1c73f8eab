from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from api.exceptions import BadRequest, InsufficientStock, NotFound
from apps.testing import auth_client, make_product, make_user
from .models import Carts
from .services import CartService


class CartServiceTest(TestCase):
    "Корзина: добавление, объединение позиций, изменение количества"

    def setUp(self):
        self.service = CartService()
        self.user = make_user()
        self.product = make_product(price='10000.00', options=(('Серый', '0.00', 5), ('Кожа', '2500.00', 3)))
        self.grey, self.leather = self.product.options.order_by('option_id')

    def test_add_snapshots_line_price(self):
        "цена строки = (цена товара + надбавка опции) * количество"
        carts = self.service.add_cart_list(self.user, [{'option_id': self.leather.option_id, 'quantity': 2}])
        self.assertEqual(carts[0].price, Decimal('25000.00'))

    def test_add_same_option_merges_lines(self):
        self.service.add_cart_list(self.user, [{'option_id': self.grey.option_id, 'quantity': 1}])
        self.service.add_cart_list(self.user, [{'option_id': self.grey.option_id, 'quantity': 2}])

        carts = Carts.objects.filter(user=self.user)
        self.assertEqual(carts.count(), 1)
        self.assertEqual(carts[0].quantity, 3)
        self.assertEqual(carts[0].price, Decimal('30000.00'))

    def test_add_rejects_non_positive_quantity(self):
        for quantity in (0, -1, 'abc'):
            with self.subTest(quantity=quantity):
                with self.assertRaises(BadRequest):
                    self.service.add_cart_list(self.user, [{'option_id': self.grey.option_id, 'quantity': quantity}])
        self.assertFalse(Carts.objects.exists())

    def test_add_unknown_option(self):
        with self.assertRaises(NotFound):
            self.service.add_cart_list(self.user, [{'option_id': 999, 'quantity': 1}])

    def test_add_more_than_stock(self):
        self.service.add_cart_list(self.user, [{'option_id': self.leather.option_id, 'quantity': 2}])
        with self.assertRaises(InsufficientStock):
            self.service.add_cart_list(self.user, [{'option_id': self.leather.option_id, 'quantity': 2}])
        self.assertEqual(Carts.objects.get(user=self.user).quantity, 2)

    def test_find_all_returns_total(self):
        self.service.add_cart_list(self.user, [
            {'option_id': self.grey.option_id, 'quantity': 1},
            {'option_id': self.leather.option_id, 'quantity': 1},
        ])
        carts, total = self.service.find_all(self.user)
        self.assertEqual(len(carts), 2)
        self.assertEqual(total, Decimal('22500.00'))

    def test_update_quantity_and_remove_with_zero(self):
        grey_line, leather_line = self.service.add_cart_list(self.user, [
            {'option_id': self.grey.option_id, 'quantity': 1},
            {'option_id': self.leather.option_id, 'quantity': 1},
        ])

        self.service.update(self.user, [
            {'cart_id': grey_line.cart_id, 'quantity': 4},
            {'cart_id': leather_line.cart_id, 'quantity': 0},
        ])

        carts, total = self.service.find_all(self.user)
        self.assertEqual([c.cart_id for c in carts], [grey_line.cart_id])
        self.assertEqual(carts[0].quantity, 4)
        self.assertEqual(total, Decimal('40000.00'))

    def test_update_foreign_line(self):
        "чужая позиция корзины не видна"
        other = make_user('other@example.com')
        line = self.service.add_cart_list(other, [{'option_id': self.grey.option_id, 'quantity': 1}])[0]
        with self.assertRaises(NotFound):
            self.service.update(self.user, [{'cart_id': line.cart_id, 'quantity': 2}])
        with self.assertRaises(NotFound):
            self.service.delete(self.user, line.cart_id)

    def test_clear(self):
        self.service.add_cart_list(self.user, [
            {'option_id': self.grey.option_id, 'quantity': 1},
            {'option_id': self.leather.option_id, 'quantity': 1},
        ])
        self.assertEqual(self.service.clear(self.user), 2)
        self.assertEqual(self.service.clear(self.user), 0)


class CartApiTest(TestCase):

    def setUp(self):
        self.user = make_user()
        self.option = make_product().options.get()
        self.client = auth_client(self.user)

    def test_requires_authentication(self):
        self.assertEqual(APIClient().get(reverse('api_carts')).status_code, 401)

    def test_add_and_list(self):
        response = self.client.post(
            reverse('api_carts'),
            {'items': [{'option_id': self.option.option_id, 'quantity': 2}]},
            format='json',
        )
        self.assertEqual(response.status_code, 201)

        response = self.client.get(reverse('api_carts'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['items']), 1)
        self.assertEqual(Decimal(str(response.json()['total'])), Decimal('20000.00'))

    def test_add_over_stock_returns_conflict(self):
        response = self.client.post(
            reverse('api_carts'),
            {'option_id': self.option.option_id, 'quantity': 50},
            format='json',
        )
        self.assertEqual(response.status_code, 409)
        self.assertIn('error', response.json())

    def test_delete_line(self):
        line = CartService().add_cart_list(self.user, [{'option_id': self.option.option_id, 'quantity': 1}])[0]
        response = self.client.delete(reverse('api_cart', args=[line.cart_id]))
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Carts.objects.exists())
