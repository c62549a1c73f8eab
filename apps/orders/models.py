from django.db import models
from apps.users.models import Users
from apps.options.models import Options


class Orders(models.Model):
    order_id = models.AutoField(primary_key=True)
    user = models.ForeignKey(Users, models.CASCADE, related_name='orders')
    order_date = models.DateTimeField()
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        db_table = 'orders'

    def __str__(self):
        return f'Order #{self.order_id}'


class OrderItems(models.Model):
    item_id = models.AutoField(primary_key=True)
    order = models.ForeignKey(Orders, models.CASCADE, related_name='items')
    # Опция только упоминается позицией заказа, но не принадлежит ей
    option = models.ForeignKey(Options, models.PROTECT)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'order_items'
        ordering = ['item_id']


class OrderChecks(models.Model):
    STATUS_PAID = 'paid'

    check_id = models.AutoField(primary_key=True)
    order = models.ForeignKey(Orders, models.SET_NULL, blank=True, null=True, related_name='checks')
    user = models.ForeignKey(Users, models.CASCADE)
    payment_id = models.CharField(unique=True, max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_checks'
