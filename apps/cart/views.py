from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import BadRequest
from .serializers import CartAddItemSerializer, CartSerializer, CartUpdateItemSerializer
from .services import CartService


def _items(request):
    # Принимаем как {"items": [...]}, так и один объект
    data = request.data
    if isinstance(data, list):
        return data
    if 'items' in data:
        return data['items']
    return [data]


class CartListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        carts, total = CartService().find_all(request.user)
        return Response({'items': CartSerializer(carts, many=True).data, 'total': total})

    def post(self, request):
        serializer = CartAddItemSerializer(data=_items(request), many=True)
        serializer.is_valid(raise_exception=True)
        carts = CartService().add_cart_list(request.user, serializer.validated_data)
        return Response(CartSerializer(carts, many=True).data, status=status.HTTP_201_CREATED)

    def delete(self, request):
        removed = CartService().clear(request.user)
        return Response({'removed': removed})


class CartUpdateView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = CartUpdateItemSerializer(data=_items(request), many=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            raise BadRequest('Список позиций пуст')
        carts = CartService().update(request.user, serializer.validated_data)
        return Response(CartSerializer(carts, many=True).data)

    patch = put


class CartDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, cart_id):
        CartService().delete(request.user, cart_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
