import logging

from django.contrib import admin
from .models import Options
from .services import OptionService

logger = logging.getLogger(__name__)


@admin.register(Options)
class OptionsAdmin(admin.ModelAdmin):
    list_display = ['option_id', 'product', 'option_name', 'price', 'stock_quantity']
    list_filter = ['product__category']
    search_fields = ['option_name', 'product__product_name']
    list_select_related = ['product']

    def save_model(self, request, obj, form, change):
        """Остаток меняется только через OptionService"""
        if change and 'stock_quantity' in form.changed_data:
            new_quantity = obj.stock_quantity
            obj.stock_quantity = Options.objects.get(pk=obj.pk).stock_quantity
            super().save_model(request, obj, form, change)
            OptionService().update_stock(obj.option_id, new_quantity)
            logger.info(f"[ADMIN] {request.user}: остаток опции {obj.option_id} -> {new_quantity}")
            return
        super().save_model(request, obj, form, change)
