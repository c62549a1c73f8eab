from rest_framework import serializers
from .models import Options


class OptionSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Options
        fields = ('option_id', 'product_id', 'option_name', 'stock_quantity', 'price', 'unit_price')


class StockSerializer(serializers.Serializer):
    stock_quantity = serializers.IntegerField(min_value=0)
