import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import APIException

from api.exceptions import BadRequest, Forbidden, InsufficientStock, NotFound, ServiceError
from apps.cart.services import CartService
from apps.options.services import OptionService
from .models import OrderChecks, OrderItems, Orders
from .payments import PaymentGateway

logger = logging.getLogger(__name__)


class OrderService:
    """
    Lifecycle: cart rows -> placed order (items persisted, stock deducted, cart cleared)
    -> cancelled (stock restored, order and items deleted).
    """

    def __init__(self, option_service=None, cart_service=None):
        self.option_service = option_service or OptionService()
        self.cart_service = cart_service or CartService(option_service=self.option_service)

    def save(self, user):
        try:
            with transaction.atomic():
                # Заказ собирается только из заблокированных строк, их же и удаляем
                carts = list(self.cart_service.lines(user, for_update=True))
                if not carts:
                    raise NotFound('Корзина пуста')

                order = Orders.objects.create(user=user, order_date=timezone.now())

                total = 0
                for cart in carts:
                    OrderItems.objects.create(
                        order=order,
                        option_id=cart.option_id,
                        quantity=cart.quantity,
                        price=cart.price,
                    )
                    total += cart.price

                order.total_price = total
                order.save(update_fields=['total_price'])

                self.option_service.deduct_stock_on_order(order)
                self.cart_service.clear(user, cart_ids=[cart.cart_id for cart in carts])
        except InsufficientStock:
            logger.warning(f'[ORDER] user={user.user_id}: недостаточно товара, заказ отменён')
            raise
        except APIException:
            raise
        except Exception as e:
            logger.error(f"[ORDER] user={user.user_id}: {e}")
            raise ServiceError(f'Ошибка при создании заказа: {e}')

        logger.info(f'[ORDER] Создан заказ {order.order_id}: {len(carts)} позиций, сумма {order.total_price}')
        return order

    def find_by_id(self, order_id):
        try:
            return (
                Orders.objects.select_related('user')
                .prefetch_related('items__option__product')
                .get(order_id=order_id)
            )
        except Orders.DoesNotExist:
            raise NotFound(f'Заказ не найден. ID заказа: {order_id}')

    def find_all_by_user(self, user):
        return list(
            Orders.objects.filter(user=user)
            .prefetch_related('items__option__product')
            .order_by('-order_date', '-order_id')
        )

    def delete(self, order_id):
        order = self.find_by_id(order_id)

        try:
            with transaction.atomic():
                self.option_service.restore_stock_on_order_cancel(order)
                order.items.all().delete()
                order.delete()
        except Exception as e:
            logger.error(f'[ORDER] Отмена заказа {order_id} не удалась: {e}')
            raise ServiceError(f'Ошибка при отмене заказа {order_id}: {e}')

        logger.info(f'[ORDER] Заказ {order_id} отменён, остатки возвращены')


class PaymentService:
    """Подтверждение оплаты заказа и чеки (OrderChecks)"""

    def __init__(self, order_service=None, gateway=None):
        self.order_service = order_service or OrderService()
        self.gateway = gateway or PaymentGateway()

    def confirm(self, user, order_id, payment_id):
        if not payment_id:
            raise BadRequest('Не указан ID платежа')

        order = self.order_service.find_by_id(order_id)
        if order.user_id != user.user_id:
            raise Forbidden('Заказ принадлежит другому пользователю')

        existing = OrderChecks.objects.filter(payment_id=payment_id).first()
        if existing:
            if existing.order_id != order.order_id:
                raise BadRequest(f'Платёж {payment_id} уже привязан к другому заказу')
            return existing

        payment = self.gateway.fetch_payment(payment_id, expected_amount=order.total_price)
        if not payment['paid']:
            raise BadRequest(f"Платёж не завершён (статус: {payment['status']})")
        if payment['amount'] != order.total_price:
            raise BadRequest(
                f"Сумма платежа {payment['amount']} не совпадает с суммой заказа {order.total_price}"
            )

        check, created = OrderChecks.objects.get_or_create(
            payment_id=payment_id,
            defaults={
                'order': order,
                'user': user,
                'amount': order.total_price,
                'status': OrderChecks.STATUS_PAID,
            },
        )
        if check.order_id != order.order_id:
            # Тот же платёж успел подтвердиться для другого заказа
            raise BadRequest(f'Платёж {payment_id} уже привязан к другому заказу')
        if created:
            logger.info(f'[PAYMENT] Заказ {order_id} оплачен, чек {check.check_id}')
        return check

    def find_order_check(self, check_id):
        try:
            return OrderChecks.objects.select_related('order', 'user').get(check_id=check_id)
        except OrderChecks.DoesNotExist:
            raise NotFound(f'Чек не найден. ID чека: {check_id}')
