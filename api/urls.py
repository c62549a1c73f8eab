# api/urls.py
from django.urls import path

from apps.cart.views import CartDetailView, CartListView, CartUpdateView
from apps.options.views import OptionDetailView, OptionListView, OptionStockView, ProductOptionsView
from apps.orders.views import (
    OrderCheckDetailView,
    OrderDetailView,
    OrderListView,
    OrderReceiptView,
    PaymentConfirmView,
)
from apps.products.views import (
    CategoryChildrenView,
    CategoryDetailView,
    CategoryListView,
    CategoryProductsView,
    CategorySuperView,
    CategoryTreeView,
    ProductDetailView,
    ProductListView,
)
from apps.reviews.views import CommentCreateView, CommentDetailView, ProductCommentsView
from . import views

urlpatterns = [
    # Auth
    path('join/', views.JoinView.as_view(), name='api_join'),
    path('join/admin/', views.JoinAdminView.as_view(), name='api_join_admin'),
    path('login/', views.LoginView.as_view(), name='api_login'),
    path('logout/', views.LogoutView.as_view(), name='api_logout'),
    path('token/refresh/', views.TokenRefreshView.as_view(), name='token_refresh'),
    path('users/check-email/', views.CheckEmailView.as_view(), name='api_check_email'),
    path('users/info/', views.UserInfoView.as_view(), name='api_user_info'),
    path('users/me/', views.MeView.as_view(), name='api_me'),

    # Каталог
    path('categories/', CategoryListView.as_view(), name='api_categories'),
    path('categories/super/', CategorySuperView.as_view(), name='api_categories_super'),
    path('categories/tree/', CategoryTreeView.as_view(), name='api_categories_tree'),
    path('categories/<int:category_id>/', CategoryDetailView.as_view(), name='api_category'),
    path('categories/<int:category_id>/children/', CategoryChildrenView.as_view(), name='api_category_children'),
    path('categories/<int:category_id>/products/', CategoryProductsView.as_view(), name='api_category_products'),
    path('products/', ProductListView.as_view(), name='api_products'),
    path('products/<int:product_id>/', ProductDetailView.as_view(), name='api_product'),

    # Опции и остатки
    path('products/<int:product_id>/options/', ProductOptionsView.as_view(), name='api_product_options'),
    path('options/', OptionListView.as_view(), name='api_options'),
    path('options/<int:option_id>/', OptionDetailView.as_view(), name='api_option'),
    path('options/<int:option_id>/stock/', OptionStockView.as_view(), name='api_option_stock'),

    # Корзина
    path('carts/', CartListView.as_view(), name='api_carts'),
    path('carts/update/', CartUpdateView.as_view(), name='api_carts_update'),
    path('carts/<int:cart_id>/', CartDetailView.as_view(), name='api_cart'),

    # Заказы и оплата
    path('orders/', OrderListView.as_view(), name='api_orders'),
    path('orders/<int:order_id>/', OrderDetailView.as_view(), name='api_order'),
    path('orders/<int:order_id>/receipt/', OrderReceiptView.as_view(), name='api_order_receipt'),
    path('payments/confirm/', PaymentConfirmView.as_view(), name='api_payment_confirm'),
    path('order-checks/<int:check_id>/', OrderCheckDetailView.as_view(), name='api_order_check'),

    # Отзывы
    path('comments/', CommentCreateView.as_view(), name='api_comments'),
    path('comments/<int:comment_id>/', CommentDetailView.as_view(), name='api_comment'),
    path('products/<int:product_id>/comments/', ProductCommentsView.as_view(), name='api_product_comments'),
]
