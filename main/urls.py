# main/urls.py
from django.urls import path

from . import views

urlpatterns = [
    path('', views.home, name='home'),

    # Каталог
    path('categorycreate/', views.category_create, name='category_create'),
    path('category/updateForm/', views.category_update, name='category_update'),
    path('category/show/<int:category_id>/', views.category_show, name='category_show'),
    path('product/show/<int:product_id>/', views.product_show, name='product_show'),
    path('product/add/', views.product_add, name='product_add'),
    path('product/update/', views.product_update, name='product_update'),
    path('menu/', views.menu, name='menu'),

    # Корзина и заказы
    path('cart/', views.cart, name='cart'),
    path('order/', views.order, name='order'),

    # Отзывы
    path('product_comment/update/<int:comment_id>/', views.comment_update, name='comment_update'),
    path('product_comment/save/<int:check_id>/', views.comment_save, name='comment_save'),

    # Пользователь
    path('login/', views.login, name='login'),
    path('join/', views.join, name='join'),
    path('myPage/', views.my_page, name='my_page'),
    path('adminPage/', views.admin_page, name='admin_page'),

    # Оплата
    path('payments/cancel/', views.pay_cancel, name='pay_cancel'),
    path('payments/index/', views.pay_index, name='pay_index'),
    path('payments/response/', views.pay_response, name='pay_response'),
]
