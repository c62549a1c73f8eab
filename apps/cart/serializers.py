from rest_framework import serializers
from .models import Carts


class CartSerializer(serializers.ModelSerializer):
    option_id = serializers.IntegerField(read_only=True)
    option_name = serializers.CharField(source='option.option_name', read_only=True)
    product_id = serializers.IntegerField(source='option.product_id', read_only=True)
    product_name = serializers.CharField(source='option.product.product_name', read_only=True)

    class Meta:
        model = Carts
        fields = ('cart_id', 'option_id', 'option_name', 'product_id', 'product_name', 'quantity', 'price')


class CartAddItemSerializer(serializers.Serializer):
    option_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class CartUpdateItemSerializer(serializers.Serializer):
    cart_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)
