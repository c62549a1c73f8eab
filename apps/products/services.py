import logging

from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import ProtectedError

from api.exceptions import BadRequest, Conflict, NotFound
from .models import Categories, Products

logger = logging.getLogger(__name__)


class CategoryService:

    def _get(self, category_id):
        try:
            return Categories.objects.get(category_id=category_id)
        except Categories.DoesNotExist:
            raise NotFound(f'Категория не найдена. ID категории: {category_id}')

    def _parent_from(self, data):
        parent_id = data.get('parent_id')
        if parent_id in (None, ''):
            return None
        return self._get(parent_id)

    @transaction.atomic
    def save(self, data):
        category = Categories.objects.create(
            category_name=data['category_name'],
            parent=self._parent_from(data),
        )
        logger.info(f'[CATEGORY] Создана категория {category.category_id} ({category.category_name})')
        return category

    def find_by_id(self, category_id):
        return self._get(category_id)

    def find_all(self):
        return list(Categories.objects.all())

    def find_all_super(self):
        """Категории верхнего уровня (без родителя)"""
        return list(Categories.objects.filter(parent__isnull=True))

    def find_all_son(self, parent_id):
        """Прямые потомки категории"""
        return list(Categories.objects.filter(parent_id=parent_id))

    def find_tree(self):
        """
        Three-level walk used by the menu page: top-level categories, their children,
        and the children of those.
        """
        supers = self.find_all_super()

        parents = []
        for category in supers:
            parents.extend(self.find_all_son(category.category_id))

        sons = []
        for category in parents:
            sons.extend(self.find_all_son(category.category_id))

        return supers, parents, sons

    def descendant_ids(self, category_id):
        """id категории и всех её потомков (обход в ширину)"""
        ids = [category_id]
        frontier = [category_id]
        while frontier:
            frontier = list(
                Categories.objects.filter(parent_id__in=frontier)
                .exclude(category_id__in=ids)
                .values_list('category_id', flat=True)
            )
            ids.extend(frontier)
        return ids

    @transaction.atomic
    def update(self, category_id, data):
        category = self._get(category_id)

        if 'category_name' in data:
            category.category_name = data['category_name']
        if 'parent_id' in data:
            parent = self._parent_from(data)
            if parent and parent.category_id in self.descendant_ids(category.category_id):
                raise BadRequest('Категория не может быть вложена сама в себя')
            category.parent = parent

        category.save()
        return category

    @transaction.atomic
    def delete(self, category_id):
        category = self._get(category_id)
        category.delete()
        logger.info(f'[CATEGORY] Удалена категория {category_id}')


class ProductService:
    PRODUCT_FIELDS = ('product_name', 'description', 'price')

    def __init__(self, category_service=None):
        self.category_service = category_service or CategoryService()

    def _get(self, product_id):
        try:
            return (
                Products.objects.select_related('category')
                .prefetch_related('options')
                .get(product_id=product_id)
            )
        except Products.DoesNotExist:
            raise NotFound(f'Товар не найден. ID товара: {product_id}')

    def _category_from(self, data):
        category_id = data.get('category_id')
        if category_id in (None, ''):
            return None
        return self.category_service.find_by_id(category_id)

    @transaction.atomic
    def save(self, data):
        values = {field: data[field] for field in self.PRODUCT_FIELDS if field in data}
        product = Products.objects.create(category=self._category_from(data), **values)
        logger.info(f'[PRODUCT] Создан товар {product.product_id} ({product.product_name})')
        return product

    def find_by_id(self, product_id):
        return self._get(product_id)

    def find_all(self, page=1, size=20):
        queryset = Products.objects.select_related('category').order_by('-created_at', '-product_id')
        return Paginator(queryset, size).get_page(page)

    def find_by_category(self, category_id):
        self.category_service.find_by_id(category_id)
        ids = self.category_service.descendant_ids(category_id)
        return list(
            Products.objects.filter(category_id__in=ids)
            .select_related('category')
            .order_by('-created_at', '-product_id')
        )

    @transaction.atomic
    def update(self, product_id, data):
        product = self._get(product_id)
        for field in self.PRODUCT_FIELDS:
            if field in data:
                setattr(product, field, data[field])
        if 'category_id' in data:
            product.category = self._category_from(data)
        product.save()
        return product

    @transaction.atomic
    def delete(self, product_id):
        product = self._get(product_id)
        try:
            product.delete()
        except ProtectedError:
            raise Conflict(f'Товар {product_id} присутствует в заказах и не может быть удалён')
        logger.info(f'[PRODUCT] Удалён товар {product_id}')
