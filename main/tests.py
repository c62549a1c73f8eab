from django.test import TestCase, Client
from django.urls import reverse

from apps.products.models import Categories
from apps.reviews.services import CommentService
from apps.testing import access_token, make_product, make_user


class URLResolutionTest(TestCase):
    "Тест проверки правильности разрешения URL-адресов"

    def test_url_name_resolution(self):
        "все указанные имена URL-адресов должны разрешаться корректно"
        url_names = [
            'home',
            'category_create',
            'category_update',
            'product_add',
            'product_update',
            'cart',
            'order',
            'my_page',
            'login',
            'join',
            'pay_cancel',
            'pay_index',
            'pay_response',
            'admin_page',
            'menu',
        ]

        for url_name in url_names:
            with self.subTest(url_name=url_name):
                self.assertTrue(reverse(url_name).startswith('/'))

    def test_reverse_urls_work(self):
        "Возвращение допустимых URL-адресов по именам"
        self.assertEqual(reverse('home'), '/')
        self.assertEqual(reverse('category_update'), '/category/updateForm/')
        self.assertEqual(reverse('product_show', args=[3]), '/product/show/3/')
        self.assertEqual(reverse('comment_update', args=[5]), '/product_comment/update/5/')
        self.assertEqual(reverse('comment_save', args=[7]), '/product_comment/save/7/')
        self.assertEqual(reverse('my_page'), '/myPage/')


class PageTest(TestCase):
    "Страницы витрины"

    def setUp(self):
        self.client = Client()
        self.user = make_user()
        self.admin = make_user('admin@example.com', admin=True)

    def login_as(self, user):
        self.client.cookies['token'] = access_token(user)

    def test_public_pages_load(self):
        "страницы без авторизации отдаются с нужным шаблоном"
        pages = [
            ('home', 'index.html'),
            ('login', 'login.html'),
            ('join', 'join.html'),
            ('menu', 'menu.html'),
            ('cart', 'cartPage.html'),
            ('order', 'orderPage.html'),
            ('category_create', 'categorycreate.html'),
            ('category_update', 'categoryUpdate.html'),
            ('pay_cancel', 'paycancel.html'),
            ('pay_index', 'payindex.html'),
            ('pay_response', 'payresponse.html'),
        ]
        for url_name, template in pages:
            with self.subTest(page=url_name):
                response = self.client.get(reverse(url_name))
                self.assertEqual(response.status_code, 200)
                self.assertTemplateUsed(response, template)

    def test_menu_context(self):
        root = Categories.objects.create(category_name='Мебель')
        child = Categories.objects.create(category_name='Диваны', parent=root)
        grandchild = Categories.objects.create(category_name='Угловые', parent=child)

        response = self.client.get(reverse('menu'))

        self.assertEqual(list(response.context['categories']), [root])
        self.assertEqual(list(response.context['parents']), [child])
        self.assertEqual(list(response.context['sons']), [grandchild])
        self.assertContains(response, 'Угловые')

    def test_product_page(self):
        product = make_product(name='Диван Честер')
        option = product.options.get()
        CommentService().save(self.user.user_id, option.option_id, 'Очень мягкий')

        response = self.client.get(reverse('product_show', args=[product.product_id]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['product'].product_id, product.product_id)
        self.assertEqual(len(response.context['comments']), 1)
        self.assertContains(response, 'Очень мягкий')

    def test_product_page_without_options(self):
        product = make_product(name='Кресло', options=())
        response = self.client.get(reverse('product_show', args=[product.product_id]))
        self.assertIsNone(response.context['comments'])

    def test_missing_product_renders_error_page(self):
        response = self.client.get(reverse('product_show', args=[999]))
        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, 'error.html')

    def test_category_page(self):
        category = Categories.objects.create(category_name='Шкафы')
        make_product(name='Шкаф-купе', category=category)
        response = self.client.get(reverse('category_show', args=[category.category_id]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Шкаф-купе')

    def test_my_page_requires_login(self):
        response = self.client.get(reverse('my_page'))
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)

        self.login_as(self.user)
        response = self.client.get(reverse('my_page'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['user'].user_id, self.user.user_id)

    def test_admin_pages_require_admin_role(self):
        for url_name in ('admin_page', 'product_add', 'product_update'):
            with self.subTest(page=url_name):
                self.client.cookies.clear()
                self.assertEqual(self.client.get(reverse(url_name)).status_code, 302)

                self.login_as(self.user)
                self.assertEqual(self.client.get(reverse(url_name)).status_code, 403)

                self.login_as(self.admin)
                self.assertEqual(self.client.get(reverse(url_name)).status_code, 200)

    def test_cart_page_for_logged_in_user(self):
        self.login_as(self.user)
        response = self.client.get(reverse('cart'))
        self.assertEqual(response.context['carts'], [])
        self.assertEqual(response.context['total'], 0)
