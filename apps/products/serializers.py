from rest_framework import serializers
from apps.options.serializers import OptionSerializer
from .models import Categories, Products


class CategorySerializer(serializers.ModelSerializer):
    parent_id = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = Categories
        fields = ('category_id', 'category_name', 'parent_id')


class CategoryTreeSerializer(serializers.ModelSerializer):
    children = serializers.SerializerMethodField()

    class Meta:
        model = Categories
        fields = ('category_id', 'category_name', 'children')

    def get_children(self, obj):
        return CategoryTreeSerializer(obj.children.all(), many=True).data


class ProductSerializer(serializers.ModelSerializer):
    category_id = serializers.IntegerField(required=False, allow_null=True)
    category_name = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Products
        fields = (
            'product_id', 'product_name', 'description', 'price',
            'category_id', 'category_name', 'created_at', 'updated_at',
        )
        read_only_fields = ('created_at', 'updated_at')

    def get_category_name(self, obj):
        return obj.category.category_name if obj.category else None


class ProductDetailSerializer(ProductSerializer):
    options = OptionSerializer(many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ('options',)
