from rest_framework import serializers
from .models import OrderChecks, OrderItems, Orders


class OrderItemSerializer(serializers.ModelSerializer):
    option_id = serializers.IntegerField(read_only=True)
    option_name = serializers.CharField(source='option.option_name', read_only=True)
    product_name = serializers.CharField(source='option.product.product_name', read_only=True)

    class Meta:
        model = OrderItems
        fields = ('item_id', 'option_id', 'option_name', 'product_name', 'quantity', 'price')


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Orders
        fields = ('order_id', 'user_id', 'order_date', 'total_price', 'items')


class OrderCheckSerializer(serializers.ModelSerializer):
    order_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderChecks
        fields = ('check_id', 'order_id', 'user_id', 'payment_id', 'amount', 'status', 'created_at')


class PaymentConfirmSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    payment_id = serializers.CharField(max_length=100)
