# apps/orders/views.py
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import Forbidden
from .pdf_service import OrderReceiptGenerator
from .serializers import OrderCheckSerializer, OrderSerializer, PaymentConfirmSerializer
from .services import OrderService, PaymentService


def _owned_order(request, order_id):
    order = OrderService().find_by_id(order_id)
    if order.user_id != request.user.user_id and not request.user.is_admin:
        raise Forbidden('Заказ принадлежит другому пользователю')
    return order


class OrderListView(APIView):
    """GET - заказы текущего пользователя, POST - оформить заказ из корзины"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        orders = OrderService().find_all_by_user(request.user)
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request):
        order = OrderService().save(request.user)
        order = OrderService().find_by_id(order.order_id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        return Response(OrderSerializer(_owned_order(request, order_id)).data)

    def delete(self, request, order_id):
        _owned_order(request, order_id)
        OrderService().delete(order_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderReceiptView(APIView):
    """PDF чек по заказу"""
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        order = _owned_order(request, order_id)
        pdf = OrderReceiptGenerator().generate(order)

        response = HttpResponse(pdf, content_type='application/pdf')
        disposition = 'attachment' if request.query_params.get('download') else 'inline'
        response['Content-Disposition'] = f'{disposition}; filename="order_{order.order_id}.pdf"'
        return response


class PaymentConfirmView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check = PaymentService().confirm(
            request.user,
            serializer.validated_data['order_id'],
            serializer.validated_data['payment_id'],
        )
        return Response(OrderCheckSerializer(check).data, status=status.HTTP_201_CREATED)


class OrderCheckDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, check_id):
        check = PaymentService().find_order_check(check_id)
        if check.user_id != request.user.user_id and not request.user.is_admin:
            raise Forbidden('Чек принадлежит другому пользователю')
        return Response(OrderCheckSerializer(check).data)
