import os
import shutil
import tempfile
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from api.exceptions import BadRequest, Forbidden, NotFound, ServiceError
from apps.cart.services import CartService
from apps.orders.services import OrderService, PaymentService
from apps.testing import auth_client, make_product, make_user
from .models import CommentFiles, Comments
from .services import CommentService


class UploadDirMixin:

    def setUp(self):
        super().setUp()
        self.upload_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.upload_dir, ignore_errors=True)
        settings_override = override_settings(UPLOAD_PATH=os.path.join(self.upload_dir, 'comments'))
        settings_override.enable()
        self.addCleanup(settings_override.disable)

    def stored_files(self):
        path = os.path.join(self.upload_dir, 'comments')
        return sorted(os.listdir(path)) if os.path.isdir(path) else []


class CommentServiceTest(UploadDirMixin, TestCase):
    "Отзывы и вложения"

    def setUp(self):
        super().setUp()
        self.service = CommentService()
        self.user = make_user()
        self.product = make_product(options=(('Серый', '0.00', 5), ('Кожа', '2500.00', 3)))
        self.grey, self.leather = self.product.options.order_by('option_id')

    def test_save_writes_files(self):
        "файл сохраняется как <uuid><имя>, метаданные пишутся в comment_files"
        photo = SimpleUploadedFile('sofa.jpg', b'\xff\xd8\xff' * 100, content_type='image/jpeg')

        comment = self.service.save(self.user.user_id, self.grey.option_id, 'Удобный диван', [photo])

        stored = CommentFiles.objects.get(comment=comment)
        self.assertEqual(stored.file_name, 'sofa.jpg')
        self.assertEqual(stored.file_type, '.jpg')
        self.assertEqual(stored.file_size, 300)
        self.assertEqual(os.path.basename(stored.file_path), f'{stored.uuid}sofa.jpg')
        self.assertEqual(self.stored_files(), [f'{stored.uuid}sofa.jpg'])
        with open(stored.file_path, 'rb') as f:
            self.assertEqual(f.read(), b'\xff\xd8\xff' * 100)

    def test_save_skips_empty_files(self):
        empty = SimpleUploadedFile('empty.txt', b'')
        comment = self.service.save(self.user.user_id, self.grey.option_id, 'Без фото', [empty])
        self.assertFalse(comment.files.exists())
        self.assertEqual(self.stored_files(), [])

    def test_save_file_without_extension(self):
        comment = self.service.save(
            self.user.user_id, self.grey.option_id, 'Инструкция', [SimpleUploadedFile('README', b'text')]
        )
        self.assertEqual(comment.files.get().file_type, '')

    def test_save_unknown_option_passes_not_found(self):
        with self.assertRaises(NotFound):
            self.service.save(self.user.user_id, 999, 'Отзыв', [])
        with self.assertRaises(NotFound):
            self.service.save(999, self.grey.option_id, 'Отзыв', [])
        self.assertFalse(Comments.objects.exists())

    def test_failed_save_removes_written_files(self):
        "при ошибке после записи на диск файлы удаляются, строки откатываются"
        files = [
            SimpleUploadedFile('a.png', b'aaaa'),
            SimpleUploadedFile('b.png', b'bbbb'),
        ]
        with mock.patch(
            'apps.reviews.services.CommentFiles.objects.create',
            side_effect=[mock.DEFAULT, DatabaseError('database is locked')],
            wraps=CommentFiles.objects.create,
        ):
            with self.assertRaises(ServiceError):
                self.service.save(self.user.user_id, self.grey.option_id, 'Отзыв', files)

        self.assertEqual(self.stored_files(), [])
        self.assertFalse(Comments.objects.exists())
        self.assertFalse(CommentFiles.objects.exists())

    def test_comment_list_without_options(self):
        product = make_product(name='Стул', options=())
        self.assertIsNone(self.service.comment_list(product.product_id))

    def test_comment_list_without_comments(self):
        self.assertEqual(self.service.comment_list(self.product.product_id), [])

    def test_comment_list_newest_first(self):
        first = self.service.save(self.user.user_id, self.grey.option_id, 'Первый')
        second = self.service.save(self.user.user_id, self.leather.option_id, 'Второй')
        third = self.service.save(self.user.user_id, self.grey.option_id, 'Третий')
        other_option = make_product(name='Шкаф').options.get()
        self.service.save(self.user.user_id, other_option.option_id, 'Про шкаф')

        comments = self.service.comment_list(self.product.product_id)
        self.assertEqual(
            [c.comment_id for c in comments],
            [third.comment_id, second.comment_id, first.comment_id],
        )

    def test_update_only_by_author(self):
        comment = self.service.save(self.user.user_id, self.grey.option_id, 'Было')
        with self.assertRaises(Forbidden):
            self.service.update(comment.comment_id, make_user('other@example.com'), 'Стало')

        self.service.update(comment.comment_id, self.user, 'Стало')
        self.assertEqual(Comments.objects.get(pk=comment.pk).content, 'Стало')

    def test_delete_removes_files_after_commit(self):
        comment = self.service.save(
            self.user.user_id, self.grey.option_id, 'С фото', [SimpleUploadedFile('x.jpg', b'xx')]
        )
        with self.assertRaises(Forbidden):
            self.service.delete(comment.comment_id, make_user('other@example.com'))

        with self.captureOnCommitCallbacks(execute=True):
            self.service.delete(comment.comment_id, self.user)

        self.assertFalse(Comments.objects.exists())
        self.assertEqual(self.stored_files(), [])

    def test_find_missing_comment(self):
        with self.assertRaises(NotFound):
            self.service.find_by_id(999)

    def test_save_with_order_check(self):
        CartService().add_cart_list(self.user, [{'option_id': self.grey.option_id, 'quantity': 1}])
        order = OrderService().save(self.user)
        check = PaymentService().confirm(self.user, order.order_id, 'pay-1')

        comment = self.service.save(self.user.user_id, self.grey.option_id, 'Купил', order_check_id=check.check_id)

        self.assertEqual(comment.order_check_id, check.check_id)
        self.assertEqual(self.service.find_order_check(check.check_id).check_id, check.check_id)
        with self.assertRaises(NotFound):
            self.service.save(self.user.user_id, self.grey.option_id, 'Купил', order_check_id=999)

    def paid_check(self, user, option):
        CartService().add_cart_list(user, [{'option_id': option.option_id, 'quantity': 1}])
        order = OrderService().save(user)
        return PaymentService().confirm(user, order.order_id, f'pay-{order.order_id}')

    def test_save_with_foreign_order_check(self):
        "чужой чек к отзыву не прикрепить"
        check = self.paid_check(self.user, self.grey)
        stranger = make_user('stranger@example.com')
        other_option = make_product(name='Кресло').options.get()

        for option in (self.grey, other_option):
            with self.subTest(option_id=option.option_id):
                with self.assertRaises(Forbidden):
                    self.service.save(stranger.user_id, option.option_id, 'Купил', order_check_id=check.check_id)
        self.assertFalse(Comments.objects.exists())

    def test_save_with_check_for_other_option(self):
        "чек, в заказе которого нет этой опции, не подходит"
        check = self.paid_check(self.user, self.grey)

        with self.assertRaises(BadRequest):
            self.service.save(self.user.user_id, self.leather.option_id, 'Купил', order_check_id=check.check_id)
        self.assertFalse(Comments.objects.exists())

    def test_save_long_extension_is_cut(self):
        name = 'scan.' + 'x' * 40
        upload = SimpleUploadedFile(name, b'data')

        comment = self.service.save(self.user.user_id, self.grey.option_id, 'Скан', [upload])

        stored = CommentFiles.objects.get(comment=comment)
        self.assertEqual(stored.file_name, name)
        self.assertEqual(stored.file_type, ('.' + 'x' * 40)[:20])


class CommentApiTest(UploadDirMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.user = make_user()
        self.product = make_product()
        self.option = self.product.options.get()

    def test_multipart_upload(self):
        response = auth_client(self.user).post(
            reverse('api_comments'),
            {
                'option_id': self.option.option_id,
                'content': 'Отличный диван',
                'files': [SimpleUploadedFile('photo.png', b'png-bytes')],
            },
            format='multipart',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['files'][0]['file_name'], 'photo.png')
        self.assertEqual(len(self.stored_files()), 1)

    def test_anonymous_cannot_post(self):
        response = APIClient().post(reverse('api_comments'), {'option_id': self.option.option_id, 'content': 'x'})
        self.assertEqual(response.status_code, 401)

    def test_product_comments(self):
        CommentService().save(self.user.user_id, self.option.option_id, 'Хорошо')
        response = auth_client(self.user).get(reverse('api_product_comments', args=[self.product.product_id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['content'], 'Хорошо')

    def test_edit_foreign_comment(self):
        comment = CommentService().save(self.user.user_id, self.option.option_id, 'Хорошо')
        other = auth_client(make_user('other@example.com'))
        response = other.put(reverse('api_comment', args=[comment.comment_id]), {'content': 'Плохо'}, format='json')
        self.assertEqual(response.status_code, 403)
