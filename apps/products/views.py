# apps/products/views.py
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import IsAdminOrReadOnly
from .serializers import CategorySerializer, CategoryTreeSerializer, ProductDetailSerializer, ProductSerializer
from .services import CategoryService, ProductService


def _int_param(request, name, default):
    try:
        return max(int(request.query_params.get(name, default)), 1)
    except (TypeError, ValueError):
        return default


# === КАТЕГОРИИ ===
class CategoryListView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        return Response(CategorySerializer(CategoryService().find_all(), many=True).data)

    def post(self, request):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = CategoryService().save(serializer.validated_data)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


class CategorySuperView(APIView):
    def get(self, request):
        return Response(CategorySerializer(CategoryService().find_all_super(), many=True).data)


class CategoryTreeView(APIView):
    def get(self, request):
        supers = CategoryService().find_all_super()
        return Response(CategoryTreeSerializer(supers, many=True).data)


class CategoryDetailView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request, category_id):
        return Response(CategorySerializer(CategoryService().find_by_id(category_id)).data)

    def put(self, request, category_id):
        serializer = CategorySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = CategoryService().update(category_id, serializer.validated_data)
        return Response(CategorySerializer(category).data)

    patch = put

    def delete(self, request, category_id):
        CategoryService().delete(category_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CategoryChildrenView(APIView):
    def get(self, request, category_id):
        service = CategoryService()
        service.find_by_id(category_id)
        return Response(CategorySerializer(service.find_all_son(category_id), many=True).data)


class CategoryProductsView(APIView):
    def get(self, request, category_id):
        products = ProductService().find_by_category(category_id)
        return Response(ProductSerializer(products, many=True).data)


# === ТОВАРЫ ===
class ProductListView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        page = ProductService().find_all(_int_param(request, 'page', 1), _int_param(request, 'size', 20))
        return Response({
            'count': page.paginator.count,
            'page': page.number,
            'pages': page.paginator.num_pages,
            'results': ProductSerializer(page.object_list, many=True).data,
        })

    def post(self, request):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService().save(serializer.validated_data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request, product_id):
        return Response(ProductDetailSerializer(ProductService().find_by_id(product_id)).data)

    def put(self, request, product_id):
        serializer = ProductSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = ProductService().update(product_id, serializer.validated_data)
        return Response(ProductSerializer(product).data)

    patch = put

    def delete(self, request, product_id):
        ProductService().delete(product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
