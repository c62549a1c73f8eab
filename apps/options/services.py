import logging

from django.db import transaction
from django.db.models import F, ProtectedError

from api.exceptions import BadRequest, Conflict, InsufficientStock, NotFound
from apps.products.models import Products
from .models import Options

logger = logging.getLogger(__name__)

OPTION_FIELDS = ('option_name', 'price', 'stock_quantity')


class OptionService:
    """Per-product purchasable variants. The only code that mutates Options.stock_quantity."""

    def _get(self, option_id, for_update=False):
        if for_update:
            queryset = Options.objects.select_for_update()
        else:
            queryset = Options.objects.select_related('product')
        try:
            return queryset.get(option_id=option_id)
        except Options.DoesNotExist:
            raise NotFound(f'Опция не найдена. ID опции: {option_id}')

    @staticmethod
    def _check_quantity(quantity):
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise BadRequest(f'Некорректное количество: {quantity}')
        if quantity < 0:
            raise BadRequest(f'Некорректное количество: {quantity}')
        return quantity

    @transaction.atomic
    def save(self, product_id, option_data):
        try:
            product = Products.objects.get(product_id=product_id)
        except Products.DoesNotExist:
            raise NotFound(f'Товар не найден. ID товара: {product_id}')

        values = {field: option_data[field] for field in OPTION_FIELDS if field in option_data}
        self._check_quantity(values.get('stock_quantity', 0))

        option = Options.objects.create(product=product, **values)
        logger.info(f'[OPTION] Создана опция {option.option_id} для товара {product_id}')
        return option

    def find_by_id(self, option_id):
        return self._get(option_id)

    def find_by_product_id(self, product_id):
        options = list(Options.objects.filter(product_id=product_id))
        # Пустой список считается ошибкой
        if not options:
            raise NotFound(f'У товара нет опций. ID товара: {product_id}')
        return options

    def find_all(self):
        options = list(Options.objects.select_related('product'))
        if not options:
            raise NotFound('Опции не найдены')
        return options

    @transaction.atomic
    def update(self, option_id, fields):
        option = self._get(option_id, for_update=True)
        if 'stock_quantity' in fields:
            self._check_quantity(fields['stock_quantity'])

        for field in OPTION_FIELDS:
            if field in fields:
                setattr(option, field, fields[field])
        option.save()
        return option

    @transaction.atomic
    def delete(self, option_id):
        option = self._get(option_id, for_update=True)
        try:
            option.delete()
        except ProtectedError:
            raise Conflict(f'Опция {option_id} используется в заказах и не может быть удалена')
        logger.info(f'[OPTION] Удалена опция {option_id}')

    @transaction.atomic
    def update_stock(self, option_id, new_quantity):
        new_quantity = self._check_quantity(new_quantity)
        option = self._get(option_id, for_update=True)
        option.stock_quantity = new_quantity
        option.save(update_fields=['stock_quantity'])
        logger.info(f'[STOCK] Опция {option_id}: остаток установлен в {new_quantity}')
        return option

    @transaction.atomic
    def deduct_stock(self, option_id, quantity):
        quantity = self._check_quantity(quantity)
        option = self._get(option_id, for_update=True)

        # Условный UPDATE: строка меняется, только если остатка хватает
        updated = Options.objects.filter(
            option_id=option_id,
            stock_quantity__gte=quantity,
        ).update(stock_quantity=F('stock_quantity') - quantity)

        if updated == 0:
            logger.warning(f'[STOCK] Опция {option_id}: запрошено {quantity}, доступно {option.stock_quantity}')
            raise InsufficientStock(
                f'Недостаточно товара на складе. ID опции: {option_id} '
                f'(доступно: {option.stock_quantity}, запрошено: {quantity})'
            )

        option.refresh_from_db(fields=['stock_quantity'])
        logger.info(f'[STOCK] Опция {option_id}: списано {quantity}, осталось {option.stock_quantity}')
        return option

    @transaction.atomic
    def restore_stock(self, option_id, quantity):
        quantity = self._check_quantity(quantity)
        option = self._get(option_id, for_update=True)

        Options.objects.filter(option_id=option_id).update(stock_quantity=F('stock_quantity') + quantity)

        option.refresh_from_db(fields=['stock_quantity'])
        logger.info(f'[STOCK] Опция {option_id}: возвращено {quantity}, стало {option.stock_quantity}')
        return option

    @transaction.atomic
    def deduct_stock_on_order(self, order):
        """Списывает остатки по всем позициям заказа: либо все, либо ни одной"""
        # Блокируем опции всегда в одном порядке
        for item in order.items.order_by('option_id'):
            self.deduct_stock(item.option_id, item.quantity)

    @transaction.atomic
    def restore_stock_on_order_cancel(self, order):
        """Возвращает остатки по всем позициям отменённого заказа"""
        for item in order.items.order_by('option_id'):
            self.restore_stock(item.option_id, item.quantity)
