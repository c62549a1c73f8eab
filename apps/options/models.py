from django.db import models
from apps.products.models import Products


class Options(models.Model):
    option_id = models.AutoField(primary_key=True)
    product = models.ForeignKey(Products, models.CASCADE, related_name='options')
    option_name = models.CharField(max_length=100)
    # Остаток не может уйти в минус: PositiveIntegerField даёт CHECK (>= 0) на уровне БД
    stock_quantity = models.PositiveIntegerField(default=0)
    # Надбавка к цене товара
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    class Meta:
        db_table = 'options'
        ordering = ['option_id']

    def __str__(self):
        return f'{self.product.product_name} / {self.option_name}'

    @property
    def unit_price(self):
        return self.product.price + self.price
