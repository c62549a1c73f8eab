from django.contrib import admin
from .models import OrderChecks, OrderItems, Orders


class OrderItemsInline(admin.TabularInline):
    model = OrderItems
    extra = 0
    readonly_fields = ['option', 'quantity', 'price']
    can_delete = False


@admin.register(Orders)
class OrdersAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'user', 'order_date', 'total_price']
    list_filter = ['order_date']
    search_fields = ['order_id', 'user__email']
    ordering = ['-order_date']
    inlines = [OrderItemsInline]


@admin.register(OrderChecks)
class OrderChecksAdmin(admin.ModelAdmin):
    list_display = ['check_id', 'order', 'user', 'payment_id', 'amount', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['payment_id', 'user__email']
