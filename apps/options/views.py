from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import IsAdmin, IsAdminOrReadOnly
from .serializers import OptionSerializer, StockSerializer
from .services import OptionService


class ProductOptionsView(APIView):
    """GET - опции товара, POST - новая опция (admin)"""
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request, product_id):
        return Response(OptionSerializer(OptionService().find_by_product_id(product_id), many=True).data)

    def post(self, request, product_id):
        serializer = OptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        option = OptionService().save(product_id, serializer.validated_data)
        return Response(OptionSerializer(option).data, status=status.HTTP_201_CREATED)


class OptionListView(APIView):
    def get(self, request):
        return Response(OptionSerializer(OptionService().find_all(), many=True).data)


class OptionDetailView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request, option_id):
        return Response(OptionSerializer(OptionService().find_by_id(option_id)).data)

    def put(self, request, option_id):
        serializer = OptionSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        option = OptionService().update(option_id, serializer.validated_data)
        return Response(OptionSerializer(option).data)

    patch = put

    def delete(self, request, option_id):
        OptionService().delete(option_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OptionStockView(APIView):
    """Перезапись остатка (admin)"""
    permission_classes = [IsAdmin]

    def put(self, request, option_id):
        serializer = StockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        option = OptionService().update_stock(option_id, serializer.validated_data['stock_quantity'])
        return Response(OptionSerializer(option).data)
