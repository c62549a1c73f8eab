from django.db import models
from apps.users.models import Users
from apps.options.models import Options


class Carts(models.Model):
    cart_id = models.AutoField(primary_key=True)
    user = models.ForeignKey(Users, on_delete=models.CASCADE, related_name='carts')
    option = models.ForeignKey(Options, on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField()
    # Снимок цены строки: (цена товара + надбавка опции) * количество
    price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'carts'
        ordering = ['cart_id']
