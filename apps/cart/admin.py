from django.contrib import admin
from .models import Carts


@admin.register(Carts)
class CartsAdmin(admin.ModelAdmin):
    list_display = ['cart_id', 'user', 'option', 'quantity', 'price']
    search_fields = ['user__email']
    list_select_related = ['user', 'option']
