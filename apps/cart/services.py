import logging
from decimal import Decimal

from django.db import transaction

from api.exceptions import BadRequest, InsufficientStock, NotFound
from apps.options.services import OptionService
from .models import Carts

logger = logging.getLogger(__name__)


class CartService:

    def __init__(self, option_service=None):
        self.option_service = option_service or OptionService()

    @staticmethod
    def _quantity(item, allow_zero=False):
        try:
            quantity = int(item.get('quantity'))
        except (TypeError, ValueError):
            raise BadRequest(f"Некорректное количество: {item.get('quantity')}")
        if quantity < 0 or (quantity == 0 and not allow_zero):
            raise BadRequest(f'Количество должно быть больше нуля: {quantity}')
        return quantity

    @staticmethod
    def _apply_quantity(cart, quantity):
        option = cart.option
        if quantity > option.stock_quantity:
            raise InsufficientStock(
                f'Недостаточно товара на складе. ID опции: {option.option_id} '
                f'(доступно: {option.stock_quantity}, в корзине: {quantity})'
            )
        cart.quantity = quantity
        cart.price = option.unit_price * quantity

    def lines(self, user, for_update=False):
        carts = (
            Carts.objects.filter(user=user)
            .select_related('option', 'option__product')
            .order_by('cart_id')
        )
        if for_update:
            carts = carts.select_for_update(of=('self',))
        return carts

    @transaction.atomic
    def add_cart_list(self, user, items):
        """
        Добавляет позиции в корзину. Позиция с той же опцией объединяется с существующей.
        items: [{"option_id": 1, "quantity": 2}, ...]
        """
        if not items:
            raise BadRequest('Список товаров пуст')

        carts = []
        for item in items:
            quantity = self._quantity(item)
            option = self.option_service.find_by_id(item.get('option_id'))

            cart = Carts.objects.filter(user=user, option=option).first()
            if cart is None:
                cart = Carts(user=user, option=option, quantity=0)
            cart.option = option

            self._apply_quantity(cart, cart.quantity + quantity)
            cart.save()
            carts.append(cart)
            logger.info(f'[CART] user={user.user_id} option={option.option_id} quantity={cart.quantity}')

        return carts

    def find_all(self, user):
        carts = list(self.lines(user))
        total = sum((cart.price for cart in carts), Decimal('0'))
        return carts, total

    @transaction.atomic
    def update(self, user, items):
        """items: [{"cart_id": 1, "quantity": 3}, ...]; количество 0 удаляет позицию"""
        updated = []
        for item in items:
            quantity = self._quantity(item, allow_zero=True)
            cart = self.lines(user).filter(cart_id=item.get('cart_id')).first()
            if cart is None:
                raise NotFound(f"Позиция корзины не найдена. ID: {item.get('cart_id')}")

            if quantity == 0:
                cart.delete()
                continue

            self._apply_quantity(cart, quantity)
            cart.save(update_fields=['quantity', 'price'])
            updated.append(cart)

        return updated

    @transaction.atomic
    def delete(self, user, cart_id):
        deleted, _ = Carts.objects.filter(user=user, cart_id=cart_id).delete()
        if not deleted:
            raise NotFound(f'Позиция корзины не найдена. ID: {cart_id}')

    @transaction.atomic
    def clear(self, user, cart_ids=None):
        """Без cart_ids удаляет всю корзину пользователя"""
        carts = Carts.objects.filter(user=user)
        if cart_ids is not None:
            carts = carts.filter(cart_id__in=cart_ids)
        deleted, _ = carts.delete()
        return deleted
