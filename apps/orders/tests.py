from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from api.exceptions import BadRequest, Forbidden, InsufficientStock, NotFound, ServiceError
from apps.cart.models import Carts
from apps.cart.services import CartService
from apps.options.models import Options
from apps.options.services import OptionService
from apps.testing import auth_client, make_product, make_user
from .models import OrderChecks, OrderItems, Orders
from .payments import PaymentGateway
from .services import OrderService, PaymentService


class OrderServiceTest(TestCase):
    "Оформление и отмена заказа"

    def setUp(self):
        self.service = OrderService()
        self.user = make_user()
        self.product = make_product(price='10000.00', options=(('Серый', '0.00', 5), ('Кожа', '2500.00', 3)))
        self.grey, self.leather = self.product.options.order_by('option_id')

    def fill_cart(self):
        return CartService().add_cart_list(self.user, [
            {'option_id': self.grey.option_id, 'quantity': 2},
            {'option_id': self.leather.option_id, 'quantity': 1},
        ])

    def stock(self, option):
        return Options.objects.get(pk=option.pk).stock_quantity

    def test_save_copies_cart_rows(self):
        "одна позиция заказа на каждую строку корзины, корзина очищается"
        carts = self.fill_cart()

        order = self.service.save(self.user)

        items = list(order.items.order_by('option_id'))
        self.assertEqual(len(items), len(carts))
        for cart, item in zip(carts, items):
            with self.subTest(option_id=cart.option_id):
                self.assertEqual(item.option_id, cart.option_id)
                self.assertEqual(item.quantity, cart.quantity)
                self.assertEqual(item.price, cart.price)
        self.assertEqual(order.total_price, Decimal('32500.00'))
        self.assertFalse(Carts.objects.filter(user=self.user).exists())

    def test_save_deducts_stock(self):
        self.fill_cart()
        self.service.save(self.user)
        self.assertEqual(self.stock(self.grey), 3)
        self.assertEqual(self.stock(self.leather), 2)

    def test_save_empty_cart(self):
        "пустая корзина: NotFound, ничего не записано"
        with self.assertRaises(NotFound):
            self.service.save(self.user)
        self.assertFalse(Orders.objects.exists())
        self.assertFalse(OrderItems.objects.exists())

    def test_save_keeps_rows_added_after_snapshot(self):
        "строка, которой не было в снимке корзины, не удаляется вместе с ним"
        self.fill_cart()
        grey_only = Carts.objects.filter(user=self.user, option=self.grey).select_related('option', 'option__product')

        with mock.patch.object(CartService, 'lines', return_value=grey_only):
            order = self.service.save(self.user)

        self.assertEqual([item.option_id for item in order.items.all()], [self.grey.option_id])
        self.assertEqual(
            list(Carts.objects.filter(user=self.user).values_list('option_id', flat=True)),
            [self.leather.option_id],
        )
        self.assertEqual(self.stock(self.leather), 3)

    def test_save_rolls_back_on_insufficient_stock(self):
        self.fill_cart()
        # Остаток уменьшился после того, как товар положили в корзину
        OptionService().update_stock(self.leather.option_id, 0)

        with self.assertRaises(InsufficientStock):
            self.service.save(self.user)

        self.assertFalse(Orders.objects.exists())
        self.assertEqual(Carts.objects.filter(user=self.user).count(), 2)
        self.assertEqual(self.stock(self.grey), 5)

    def test_find_all_by_user_newest_first(self):
        self.fill_cart()
        first = self.service.save(self.user)
        CartService().add_cart_list(self.user, [{'option_id': self.grey.option_id, 'quantity': 1}])
        second = self.service.save(self.user)

        orders = self.service.find_all_by_user(self.user)
        self.assertEqual([o.order_id for o in orders], [second.order_id, first.order_id])
        self.assertEqual(self.service.find_all_by_user(make_user('other@example.com')), [])

    def test_delete_restores_stock(self):
        self.fill_cart()
        order = self.service.save(self.user)

        self.service.delete(order.order_id)

        self.assertFalse(Orders.objects.exists())
        self.assertFalse(OrderItems.objects.exists())
        self.assertEqual(self.stock(self.grey), 5)
        self.assertEqual(self.stock(self.leather), 3)

    def test_delete_missing_order(self):
        with self.assertRaises(NotFound):
            self.service.delete(999)

    def test_delete_failure_leaves_no_partial_state(self):
        "сбой посреди отмены откатывает уже вернувшиеся остатки"
        self.fill_cart()
        order = self.service.save(self.user)
        original = OptionService.restore_stock
        calls = []

        def flaky_restore(service, option_id, quantity):
            calls.append(option_id)
            if len(calls) == 2:
                raise DatabaseError('disk I/O error')
            return original(service, option_id, quantity)

        with mock.patch.object(OptionService, 'restore_stock', autospec=True, side_effect=flaky_restore):
            with self.assertRaises(ServiceError) as ctx:
                self.service.delete(order.order_id)

        self.assertIn('disk I/O error', str(ctx.exception.detail))
        self.assertEqual(len(calls), 2)
        self.assertTrue(Orders.objects.filter(pk=order.pk).exists())
        self.assertEqual(OrderItems.objects.filter(order_id=order.pk).count(), 2)
        self.assertEqual(self.stock(self.grey), 3)
        self.assertEqual(self.stock(self.leather), 2)


class PaymentServiceTest(TestCase):

    def setUp(self):
        self.user = make_user()
        option = make_product(price='4000.00').options.get()
        CartService().add_cart_list(self.user, [{'option_id': option.option_id, 'quantity': 2}])
        self.order = OrderService().save(self.user)

    def test_confirm_in_mock_mode(self):
        service = PaymentService(gateway=PaymentGateway(mock=True))
        check = service.confirm(self.user, self.order.order_id, 'pay-1')

        self.assertEqual(check.status, OrderChecks.STATUS_PAID)
        self.assertEqual(check.amount, Decimal('8000.00'))
        self.assertEqual(check.order_id, self.order.order_id)
        self.assertEqual(service.find_order_check(check.check_id).payment_id, 'pay-1')

    def test_confirm_twice_returns_same_check(self):
        service = PaymentService(gateway=PaymentGateway(mock=True))
        first = service.confirm(self.user, self.order.order_id, 'pay-1')
        second = service.confirm(self.user, self.order.order_id, 'pay-1')
        self.assertEqual(first.check_id, second.check_id)
        self.assertEqual(OrderChecks.objects.count(), 1)

    def test_confirm_foreign_order(self):
        with self.assertRaises(Forbidden):
            PaymentService().confirm(make_user('other@example.com'), self.order.order_id, 'pay-1')

    def test_amount_mismatch(self):
        gateway = mock.Mock()
        gateway.fetch_payment.return_value = {
            'payment_id': 'pay-1', 'status': 'succeeded', 'amount': Decimal('10.00'), 'paid': True,
        }
        with self.assertRaises(BadRequest):
            PaymentService(gateway=gateway).confirm(self.user, self.order.order_id, 'pay-1')
        self.assertFalse(OrderChecks.objects.exists())

    def test_unpaid_payment(self):
        gateway = mock.Mock()
        gateway.fetch_payment.return_value = {
            'payment_id': 'pay-1', 'status': 'pending', 'amount': Decimal('8000.00'), 'paid': False,
        }
        with self.assertRaises(BadRequest):
            PaymentService(gateway=gateway).confirm(self.user, self.order.order_id, 'pay-1')

    def test_payment_confirmed_for_other_order_meanwhile(self):
        "платёж, успевший привязаться к другому заказу, не возвращается как свой"
        option = Options.objects.get(pk=self.order.items.get().option_id)
        CartService().add_cart_list(self.user, [{'option_id': option.option_id, 'quantity': 1}])
        other_order = OrderService().save(self.user)

        def concurrent_confirm(payment_id, expected_amount=None):
            OrderChecks.objects.create(
                order=other_order, user=self.user, payment_id=payment_id,
                amount=other_order.total_price, status=OrderChecks.STATUS_PAID,
            )
            return {'payment_id': payment_id, 'status': 'succeeded', 'amount': expected_amount, 'paid': True}

        gateway = mock.Mock()
        gateway.fetch_payment.side_effect = concurrent_confirm

        with self.assertRaises(BadRequest):
            PaymentService(gateway=gateway).confirm(self.user, self.order.order_id, 'pay-1')
        self.assertEqual(OrderChecks.objects.get(payment_id='pay-1').order_id, other_order.order_id)

    def test_find_missing_check(self):
        with self.assertRaises(NotFound):
            PaymentService().find_order_check(999)


class PaymentGatewayTest(TestCase):

    @mock.patch('apps.orders.payments.requests.get')
    def test_real_mode_parses_response(self, get):
        get.return_value = mock.Mock(status_code=200)
        get.return_value.json.return_value = {
            'id': 'pay-1', 'status': 'succeeded', 'amount': {'value': '8000.00', 'currency': 'RUB'},
        }
        gateway = PaymentGateway(mock=False, api_url='https://pay.example.com/v3', account_id='1', secret_key='s')

        payment = gateway.fetch_payment('pay-1')

        self.assertTrue(payment['paid'])
        self.assertEqual(payment['amount'], Decimal('8000.00'))
        self.assertEqual(get.call_args[0][0], 'https://pay.example.com/v3/payments/pay-1')
        self.assertEqual(get.call_args[1]['timeout'], 10)

    @mock.patch('apps.orders.payments.requests.get')
    def test_real_mode_error_status(self, get):
        get.return_value = mock.Mock(status_code=404, text='not found')
        gateway = PaymentGateway(mock=False, api_url='https://pay.example.com/v3', account_id='1', secret_key='s')
        with self.assertRaises(ServiceError):
            gateway.fetch_payment('pay-1')


class OrderApiTest(TestCase):

    def setUp(self):
        self.user = make_user()
        self.option = make_product().options.get()
        self.client = auth_client(self.user)

    def place_order(self):
        CartService().add_cart_list(self.user, [{'option_id': self.option.option_id, 'quantity': 1}])
        return self.client.post(reverse('api_orders'))

    def test_place_order(self):
        response = self.place_order()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.json()['items']), 1)

    def test_place_order_from_empty_cart(self):
        response = self.client.post(reverse('api_orders'))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'error': 'Корзина пуста'})

    def test_receipt_pdf(self):
        order_id = self.place_order().json()['order_id']
        response = self.client.get(reverse('api_order_receipt', args=[order_id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_foreign_order_forbidden(self):
        order_id = self.place_order().json()['order_id']
        other = auth_client(make_user('other@example.com'))
        self.assertEqual(other.get(reverse('api_order', args=[order_id])).status_code, 403)
        self.assertEqual(other.delete(reverse('api_order', args=[order_id])).status_code, 403)
        self.assertEqual(other.get(reverse('api_order_receipt', args=[order_id])).status_code, 403)

    def test_cancel_order(self):
        order_id = self.place_order().json()['order_id']
        response = self.client.delete(reverse('api_order', args=[order_id]))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(Options.objects.get(pk=self.option.pk).stock_quantity, 5)

    def test_confirm_payment(self):
        order_id = self.place_order().json()['order_id']
        response = self.client.post(
            reverse('api_payment_confirm'), {'order_id': order_id, 'payment_id': 'pay-77'}, format='json'
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status'], 'paid')
