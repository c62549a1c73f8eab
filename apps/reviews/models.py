from django.db import models
from apps.users.models import Users
from apps.options.models import Options
from apps.orders.models import OrderChecks


class Comments(models.Model):
    comment_id = models.AutoField(primary_key=True)
    option = models.ForeignKey(Options, models.CASCADE, related_name='comments')
    user = models.ForeignKey(Users, models.CASCADE, related_name='comments')
    order_check = models.ForeignKey(OrderChecks, models.SET_NULL, blank=True, null=True)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comments'


class CommentFiles(models.Model):
    file_id = models.AutoField(primary_key=True)
    comment = models.ForeignKey(Comments, models.CASCADE, related_name='files')
    uuid = models.CharField(max_length=36)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=20, blank=True)
    file_size = models.BigIntegerField()
    file_path = models.CharField(max_length=500)

    class Meta:
        db_table = 'comment_files'
        ordering = ['file_id']
