# main/views.py
from django.shortcuts import render

from apps.cart.services import CartService
from apps.orders.services import OrderService
from apps.products.services import CategoryService, ProductService
from apps.reviews.services import CommentService
from apps.users.decorators import get_user_from_request, require_auth, require_role


def home(request):
    return render(request, 'index.html')


def category_create(request):
    return render(request, 'categorycreate.html', {'categories': CategoryService().find_all_super()})


def category_update(request):
    return render(request, 'categoryUpdate.html', {'categories': CategoryService().find_all()})


def product_show(request, product_id):
    product = ProductService().find_by_id(product_id)
    comments = CommentService().comment_list(product_id)
    return render(request, 'productPage.html', {
        'product': product,
        'options': product.options.all(),
        'comments': comments,
    })


def category_show(request, category_id):
    category = CategoryService().find_by_id(category_id)
    products = ProductService().find_by_category(category_id)
    return render(request, 'productCategoryPage.html', {'category': category, 'products': products})


@require_role('admin')
def product_add(request):
    return render(request, 'productCreate.html', {'categories': CategoryService().find_all()})


@require_role('admin')
def product_update(request):
    return render(request, 'productUpdate.html')


def cart(request):
    context = {}
    user = get_user_from_request(request)
    if user:
        carts, total = CartService().find_all(user)
        context = {'carts': carts, 'total': total}
    return render(request, 'cartPage.html', context)


def order(request):
    context = {}
    user = get_user_from_request(request)
    if user:
        context['orders'] = OrderService().find_all_by_user(user)
    return render(request, 'orderPage.html', context)


@require_auth
def my_page(request):
    return render(request, 'myPage.html', {'user': request.current_user})


@require_auth
def comment_update(request, comment_id):
    comment = CommentService().find_by_id(comment_id)
    return render(request, 'commentUpdate.html', {'comment': comment})


@require_auth
def comment_save(request, check_id):
    order_check = CommentService().find_order_check(check_id)
    return render(request, 'productReview.html', {'orderCheck': order_check})


def login(request):
    return render(request, 'login.html')


def join(request):
    return render(request, 'join.html')


def pay_cancel(request):
    return render(request, 'paycancel.html')


def pay_index(request):
    return render(request, 'payindex.html')


def pay_response(request):
    return render(request, 'payresponse.html')


@require_role('admin')
def admin_page(request):
    return render(request, 'adminPage.html')


def menu(request):
    categories, parents, sons = CategoryService().find_tree()
    return render(request, 'menu.html', {
        'categories': categories,
        'parents': parents,
        'sons': sons,
    })
