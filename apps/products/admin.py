from django.contrib import admin
from .models import Categories, Products


@admin.register(Categories)
class CategoriesAdmin(admin.ModelAdmin):
    list_display = ['category_id', 'category_name', 'parent']
    search_fields = ['category_name']
    list_filter = ['parent']


@admin.register(Products)
class ProductsAdmin(admin.ModelAdmin):
    list_display = ['product_id', 'product_name', 'category', 'price', 'created_at']
    list_filter = ['category']
    search_fields = ['product_name', 'description']
    ordering = ['-created_at']
