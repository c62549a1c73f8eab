from django.contrib import admin
from .models import Roles, Users


@admin.register(Roles)
class RolesAdmin(admin.ModelAdmin):
    list_display = ['role_id', 'role_name']


@admin.register(Users)
class UsersAdmin(admin.ModelAdmin):
    list_display = ['user_id', 'email', 'username', 'phone_number', 'created_at']
    search_fields = ['email', 'username']
    filter_horizontal = ['roles']
    exclude = ['password_hash', 'refresh_token']
