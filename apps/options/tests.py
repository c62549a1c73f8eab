from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from api.exceptions import BadRequest, Conflict, InsufficientStock, NotFound
from apps.orders.models import OrderItems, Orders
from apps.testing import auth_client, make_product, make_user
from .models import Options
from .services import OptionService


class OptionServiceTest(TestCase):
    "Опции товара и операции с остатками"

    def setUp(self):
        self.service = OptionService()
        self.product = make_product(options=(('Серый', '0.00', 5), ('Бежевый', '1500.00', 2)))
        self.grey, self.beige = self.product.options.order_by('option_id')

    def stock(self, option):
        return Options.objects.get(pk=option.pk).stock_quantity

    def test_save_links_option_to_product(self):
        "новая опция привязывается к товару"
        option = self.service.save(self.product.product_id, {'option_name': 'Синий', 'stock_quantity': 3})
        self.assertEqual(option.product_id, self.product.product_id)
        self.assertEqual(self.stock(option), 3)

    def test_save_unknown_product(self):
        with self.assertRaises(NotFound):
            self.service.save(999, {'option_name': 'Синий'})

    def test_find_by_product_id_empty_raises(self):
        "пустой список опций считается ошибкой"
        empty = make_product(name='Стул', options=())
        with self.assertRaises(NotFound):
            self.service.find_by_product_id(empty.product_id)
        self.assertEqual(len(self.service.find_by_product_id(self.product.product_id)), 2)

    def test_find_all_empty_raises(self):
        Options.objects.all().delete()
        with self.assertRaises(NotFound):
            self.service.find_all()

    def test_find_by_id_missing(self):
        with self.assertRaises(NotFound):
            self.service.find_by_id(999)

    def test_update_fields(self):
        option = self.service.update(self.grey.option_id, {'option_name': 'Графит', 'price': '500.00'})
        option.refresh_from_db()
        self.assertEqual(option.option_name, 'Графит')
        self.assertEqual(str(option.price), '500.00')

    def test_update_stock_overwrites(self):
        self.service.update_stock(self.grey.option_id, 42)
        self.assertEqual(self.stock(self.grey), 42)

    def test_update_stock_negative_rejected(self):
        with self.assertRaises(BadRequest):
            self.service.update_stock(self.grey.option_id, -1)
        self.assertEqual(self.stock(self.grey), 5)

    def test_deduct_stock(self):
        option = self.service.deduct_stock(self.grey.option_id, 3)
        self.assertEqual(option.stock_quantity, 2)
        self.assertEqual(self.stock(self.grey), 2)

    def test_deduct_more_than_available_leaves_stock_unchanged(self):
        "остаток не уходит в минус, при ошибке не меняется"
        with self.assertRaises(InsufficientStock):
            self.service.deduct_stock(self.grey.option_id, 6)
        self.assertEqual(self.stock(self.grey), 5)

    def test_insufficient_stock_is_conflict(self):
        with self.assertRaises(Conflict):
            self.service.deduct_stock(self.beige.option_id, 3)

    def test_negative_quantity_rejected(self):
        for method in (self.service.deduct_stock, self.service.restore_stock):
            with self.subTest(method=method.__name__):
                with self.assertRaises(BadRequest):
                    method(self.grey.option_id, -2)
                self.assertEqual(self.stock(self.grey), 5)

    def test_restore_then_deduct_round_trip(self):
        "restore + deduct на одно и то же количество возвращает исходный остаток"
        for quantity in (0, 1, 7, 100):
            with self.subTest(quantity=quantity):
                self.service.restore_stock(self.grey.option_id, quantity)
                self.service.deduct_stock(self.grey.option_id, quantity)
                self.assertEqual(self.stock(self.grey), 5)

    def test_deduct_on_order_is_all_or_nothing(self):
        "если одной позиции не хватает остатка, не списывается ничего"
        user = make_user()
        order = Orders.objects.create(user=user, order_date=timezone.now())
        OrderItems.objects.create(order=order, option=self.grey, quantity=2, price=20000)
        OrderItems.objects.create(order=order, option=self.beige, quantity=5, price=57500)

        with self.assertRaises(InsufficientStock):
            self.service.deduct_stock_on_order(order)

        self.assertEqual(self.stock(self.grey), 5)
        self.assertEqual(self.stock(self.beige), 2)

    def test_restore_on_order_cancel(self):
        user = make_user()
        order = Orders.objects.create(user=user, order_date=timezone.now())
        OrderItems.objects.create(order=order, option=self.grey, quantity=2, price=20000)
        OrderItems.objects.create(order=order, option=self.beige, quantity=1, price=11500)

        self.service.restore_stock_on_order_cancel(order)

        self.assertEqual(self.stock(self.grey), 7)
        self.assertEqual(self.stock(self.beige), 3)

    def test_delete_option_used_in_order(self):
        user = make_user()
        order = Orders.objects.create(user=user, order_date=timezone.now())
        OrderItems.objects.create(order=order, option=self.grey, quantity=1, price=10000)

        with self.assertRaises(Conflict):
            self.service.delete(self.grey.option_id)
        self.service.delete(self.beige.option_id)
        self.assertFalse(Options.objects.filter(pk=self.beige.pk).exists())


class OptionApiTest(TestCase):

    def setUp(self):
        self.product = make_product()
        self.option = self.product.options.get()
        self.admin = make_user('admin@example.com', admin=True)
        self.buyer = make_user('buyer@example.com')

    def test_list_options_of_product(self):
        response = APIClient().get(reverse('api_product_options', args=[self.product.product_id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['option_name'], 'Серый')
        self.assertEqual(response.json()[0]['unit_price'], '10000.00')

    def test_stock_update_requires_admin(self):
        url = reverse('api_option_stock', args=[self.option.option_id])

        self.assertEqual(APIClient().put(url, {'stock_quantity': 9}, format='json').status_code, 401)
        self.assertEqual(auth_client(self.buyer).put(url, {'stock_quantity': 9}, format='json').status_code, 403)

        response = auth_client(self.admin).put(url, {'stock_quantity': 9}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['stock_quantity'], 9)

    def test_negative_stock_rejected(self):
        url = reverse('api_option_stock', args=[self.option.option_id])
        response = auth_client(self.admin).put(url, {'stock_quantity': -3}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_admin_creates_option(self):
        url = reverse('api_product_options', args=[self.product.product_id])
        response = auth_client(self.admin).post(
            url, {'option_name': 'Зелёный', 'price': '700.00', 'stock_quantity': 4}, format='json'
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.product.options.count(), 2)
