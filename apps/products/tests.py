from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from api.exceptions import BadRequest, NotFound
from apps.testing import auth_client, make_product, make_user
from .models import Categories, Products
from .services import CategoryService, ProductService


class CategoryServiceTest(TestCase):
    "Дерево категорий"

    def setUp(self):
        self.service = CategoryService()
        self.furniture = self.service.save({'category_name': 'Мебель'})
        self.decor = self.service.save({'category_name': 'Декор'})
        self.sofas = self.service.save({'category_name': 'Диваны', 'parent_id': self.furniture.category_id})
        self.corner = self.service.save({'category_name': 'Угловые', 'parent_id': self.sofas.category_id})

    def test_save_with_unknown_parent(self):
        with self.assertRaises(NotFound):
            self.service.save({'category_name': 'Сироты', 'parent_id': 999})

    def test_super_and_son(self):
        self.assertEqual(
            [c.category_id for c in self.service.find_all_super()],
            [self.furniture.category_id, self.decor.category_id],
        )
        self.assertEqual([c.category_id for c in self.service.find_all_son(self.sofas.category_id)], [self.corner.category_id])
        self.assertEqual(self.service.find_all_son(self.decor.category_id), [])

    def test_find_tree(self):
        supers, parents, sons = self.service.find_tree()
        self.assertEqual(len(supers), 2)
        self.assertEqual([c.category_id for c in parents], [self.sofas.category_id])
        self.assertEqual([c.category_id for c in sons], [self.corner.category_id])

    def test_update_rejects_cycle(self):
        "категория не может стать потомком самой себя"
        for parent in (self.furniture, self.corner):
            with self.subTest(parent=parent.category_name):
                with self.assertRaises(BadRequest):
                    self.service.update(self.furniture.category_id, {'parent_id': parent.category_id})
        self.assertIsNone(Categories.objects.get(pk=self.furniture.pk).parent_id)

    def test_update_moves_category(self):
        self.service.update(self.corner.category_id, {'category_name': 'Угловые диваны', 'parent_id': self.decor.category_id})
        corner = Categories.objects.get(pk=self.corner.pk)
        self.assertEqual(corner.category_name, 'Угловые диваны')
        self.assertEqual(corner.parent_id, self.decor.category_id)

    def test_delete_cascades_to_children(self):
        self.service.delete(self.furniture.category_id)
        self.assertEqual(list(Categories.objects.values_list('category_name', flat=True)), ['Декор'])
        with self.assertRaises(NotFound):
            self.service.delete(self.furniture.category_id)


class ProductServiceTest(TestCase):

    def setUp(self):
        self.categories = CategoryService()
        self.service = ProductService()
        self.furniture = self.categories.save({'category_name': 'Мебель'})
        self.sofas = self.categories.save({'category_name': 'Диваны', 'parent_id': self.furniture.category_id})

    def test_save_and_find(self):
        product = self.service.save({
            'product_name': 'Диван Честер',
            'description': 'Кожаный',
            'price': Decimal('55000.00'),
            'category_id': self.sofas.category_id,
        })
        found = self.service.find_by_id(product.product_id)
        self.assertEqual(found.category.category_name, 'Диваны')

    def test_save_with_unknown_category(self):
        with self.assertRaises(NotFound):
            self.service.save({'product_name': 'Кресло', 'price': Decimal('1.00'), 'category_id': 999})

    def test_find_by_category_includes_descendants(self):
        chair = make_product(name='Стул', category=self.furniture)
        sofa = make_product(name='Диван', category=self.sofas)
        make_product(name='Ваза')

        by_parent = {p.product_id for p in self.service.find_by_category(self.furniture.category_id)}
        by_child = {p.product_id for p in self.service.find_by_category(self.sofas.category_id)}

        self.assertEqual(by_parent, {chair.product_id, sofa.product_id})
        self.assertEqual(by_child, {sofa.product_id})

    def test_find_all_paginates_newest_first(self):
        products = [make_product(name=f'Товар {i}') for i in range(5)]

        page = self.service.find_all(page=1, size=2)

        self.assertEqual(page.paginator.count, 5)
        self.assertEqual(page.paginator.num_pages, 3)
        self.assertEqual([p.product_id for p in page], [products[4].product_id, products[3].product_id])

    def test_update_and_delete(self):
        product = make_product()
        self.service.update(product.product_id, {'price': Decimal('12000.00'), 'category_id': self.sofas.category_id})
        product.refresh_from_db()
        self.assertEqual(product.price, Decimal('12000.00'))
        self.assertEqual(product.category_id, self.sofas.category_id)

        self.service.delete(product.product_id)
        self.assertFalse(Products.objects.exists())
        with self.assertRaises(NotFound):
            self.service.find_by_id(product.product_id)


class CatalogApiTest(TestCase):

    def setUp(self):
        self.admin = make_user('admin@example.com', admin=True)
        self.root = Categories.objects.create(category_name='Мебель')

    def test_anonymous_can_read(self):
        product = make_product(category=self.root)
        client = APIClient()
        self.assertEqual(client.get(reverse('api_products')).json()['count'], 1)
        detail = client.get(reverse('api_product', args=[product.product_id])).json()
        self.assertEqual(len(detail['options']), 1)
        self.assertEqual(client.get(reverse('api_categories_tree')).status_code, 200)

    def test_write_requires_admin(self):
        payload = {'product_name': 'Шкаф', 'price': '30000.00', 'category_id': self.root.category_id}
        self.assertEqual(APIClient().post(reverse('api_products'), payload, format='json').status_code, 401)
        self.assertEqual(
            auth_client(make_user('buyer@example.com')).post(reverse('api_products'), payload, format='json').status_code,
            403,
        )
        response = auth_client(self.admin).post(reverse('api_products'), payload, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['category_name'], 'Мебель')

    def test_category_children_and_products(self):
        child = Categories.objects.create(category_name='Столы', parent=self.root)
        make_product(name='Стол', category=child)
        client = APIClient()

        children = client.get(reverse('api_category_children', args=[self.root.category_id])).json()
        products = client.get(reverse('api_category_products', args=[self.root.category_id])).json()

        self.assertEqual([c['category_name'] for c in children], ['Столы'])
        self.assertEqual([p['product_name'] for p in products], ['Стол'])

    def test_missing_product(self):
        response = APIClient().get(reverse('api_product', args=[999]))
        self.assertEqual(response.status_code, 404)
        self.assertIn('error', response.json())
