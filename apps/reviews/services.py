import logging
import os
import uuid

from django.conf import settings
from django.db import transaction

from api.exceptions import BadRequest, Forbidden, NotFound, ServiceError
from apps.options.models import Options
from apps.orders.services import PaymentService
from apps.users.models import Users
from .models import CommentFiles, Comments

logger = logging.getLogger(__name__)

FILE_TYPE_MAX_LENGTH = CommentFiles._meta.get_field('file_type').max_length


def _remove_files(paths):
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error(f'[COMMENT] Не удалось удалить файл {path}: {e}')


class CommentService:
    """
    Отзывы к опциям товара с вложениями.
    Файлы лежат на диске в upload_path под именем <uuid><исходное имя>.
    """

    def __init__(self, upload_path=None, payment_service=None):
        self.upload_path = str(upload_path or settings.UPLOAD_PATH)
        self.payment_service = payment_service or PaymentService()

    def _write_file(self, uploaded):
        os.makedirs(self.upload_path, exist_ok=True)

        original_name = os.path.basename(uploaded.name)
        file_uuid = str(uuid.uuid4())
        path = os.path.join(self.upload_path, f'{file_uuid}{original_name}')

        with open(path, 'wb+') as f:
            for chunk in uploaded.chunks():
                f.write(chunk)

        return {
            'uuid': file_uuid,
            'file_name': original_name,
            'file_type': os.path.splitext(original_name)[1][:FILE_TYPE_MAX_LENGTH],
            'file_size': uploaded.size,
            'file_path': path,
        }

    def save(self, user_id, option_id, content, files=None, order_check_id=None):
        try:
            user = Users.objects.get(user_id=user_id)
        except Users.DoesNotExist:
            raise NotFound(f'Пользователь не найден. ID: {user_id}')
        try:
            option = Options.objects.get(option_id=option_id)
        except Options.DoesNotExist:
            raise NotFound(f'Опция не найдена. ID опции: {option_id}')
        order_check = None
        if order_check_id:
            order_check = self._purchase_check(order_check_id, user, option)

        written = []
        try:
            with transaction.atomic():
                comment = Comments.objects.create(
                    option=option,
                    user=user,
                    order_check=order_check,
                    content=content,
                )
                for uploaded in files or []:
                    if not uploaded or not uploaded.size:
                        continue
                    meta = self._write_file(uploaded)
                    written.append(meta['file_path'])
                    CommentFiles.objects.create(comment=comment, **meta)
        except Exception as e:
            _remove_files(written)
            logger.error(f'[COMMENT] Ошибка сохранения отзыва (user={user_id}, option={option_id}): {e}')
            raise ServiceError(f'Ошибка при сохранении отзыва: {e}')

        logger.info(f'[COMMENT] Отзыв {comment.comment_id} сохранён, файлов: {len(written)}')
        return comment

    def _purchase_check(self, check_id, user, option):
        """Чек должен быть чеком автора отзыва, а его заказ содержать эту опцию"""
        order_check = self.payment_service.find_order_check(check_id)
        if order_check.user_id != user.user_id:
            raise Forbidden('Чек принадлежит другому пользователю')
        order = order_check.order
        if order is None or not order.items.filter(option_id=option.option_id).exists():
            raise BadRequest(f'В заказе {order_check.order_id} нет опции {option.option_id}')
        return order_check

    def comment_list(self, product_id):
        """None, если у товара нет опций; иначе отзывы по всем опциям, новые сверху"""
        option_ids = list(Options.objects.filter(product_id=product_id).values_list('option_id', flat=True))
        if not option_ids:
            return None

        return list(
            Comments.objects.filter(option_id__in=option_ids)
            .select_related('user', 'option')
            .prefetch_related('files')
            .order_by('-created_at', '-comment_id')
        )

    def find_by_id(self, comment_id):
        try:
            return (
                Comments.objects.select_related('user', 'option__product')
                .prefetch_related('files')
                .get(comment_id=comment_id)
            )
        except Comments.DoesNotExist:
            raise NotFound(f'Отзыв не найден. ID: {comment_id}')

    def _owned(self, comment_id, user):
        comment = self.find_by_id(comment_id)
        if comment.user_id != user.user_id:
            raise Forbidden('Нельзя изменять чужой отзыв')
        return comment

    @transaction.atomic
    def update(self, comment_id, user, content):
        comment = self._owned(comment_id, user)
        comment.content = content
        comment.save(update_fields=['content', 'updated_at'])
        return comment

    @transaction.atomic
    def delete(self, comment_id, user):
        comment = self._owned(comment_id, user)
        paths = [f.file_path for f in comment.files.all()]

        comment.delete()
        # Файлы удаляем только после фиксации транзакции
        transaction.on_commit(lambda: _remove_files(paths))
        logger.info(f'[COMMENT] Отзыв {comment_id} удалён')

    def find_order_check(self, check_id):
        return self.payment_service.find_order_check(check_id)
