from faker import Faker
from locust import task, TaskSet, SequentialTaskSet, HttpUser, constant_throughput
import random

fake = Faker("ru_RU")


def _register_and_login(client):
    """Регистрирует нового покупателя и логинится; токен остаётся в cookie `token`"""
    password = fake.password(length=11)
    email = f"{fake.user_name()}{random.randint(1000, 9999)}@gmail.com"

    client.post("/api/join/", json={
        "email": email,
        "password": password,
        "username": fake.first_name(),
        "phone_number": f"+7{random.randint(900, 999)}{random.randint(1000000, 9999999)}",
    })
    response = client.post("/api/login/", json={"email": email, "password": password})
    if response.status_code == 200:
        client.headers.update({"Authorization": response.json()["access"]})


def _product_ids(client):
    response = client.get("/api/products/?size=50", name="/api/products/")
    if response.status_code != 200:
        return []
    return [p["product_id"] for p in response.json()["results"]]


class BuyersRegTest(SequentialTaskSet):  # последовательная регистрация
    def on_start(self):
        self.client.get("/join/")

    @task(1)
    def register_user(self):
        _register_and_login(self.client)

    @task(12)
    def view_home(self):
        self.client.get("/")


class ProductViewTest(TaskSet):

    def on_start(self):
        self.product_ids = _product_ids(self.client)

    @task(8)
    def view_menu(self):
        self.client.get("/menu/")

    @task(6)
    def view_homepage(self):
        self.client.get("/")

    @task(5)
    def view_product(self):
        if self.product_ids:
            product_id = random.choice(self.product_ids)
            self.client.get(f"/product/show/{product_id}/", name="/product/show/[id]/")
            self.client.get(f"/api/products/{product_id}/comments/", name="/api/products/[id]/comments/")


class CustomerOrderTest(SequentialTaskSet):
    """Покупатель: корзина -> заказ -> оплата"""

    def on_start(self):
        _register_and_login(self.client)
        self.product_ids = _product_ids(self.client)

    @task
    def add_to_cart(self):
        if not self.product_ids:
            return
        product_id = random.choice(self.product_ids)
        response = self.client.get(f"/api/products/{product_id}/options/", name="/api/products/[id]/options/")
        if response.status_code != 200:
            return
        in_stock = [o for o in response.json() if o["stock_quantity"] > 0]
        if in_stock:
            self.client.post("/api/carts/", json={
                "items": [{"option_id": random.choice(in_stock)["option_id"], "quantity": 1}],
            })

    @task
    def view_cart(self):
        self.client.get("/cart/")

    @task
    def place_order(self):
        with self.client.post("/api/orders/", catch_response=True) as response:
            # Пустая корзина или закончившийся товар для нагрузочного теста не ошибка
            if response.status_code in (404, 409):
                response.success()
                return
        if response.status_code == 201:
            self.client.post("/api/payments/confirm/", json={
                "order_id": response.json()["order_id"],
                "payment_id": fake.uuid4(),
            })


class WebsiteUser(HttpUser):
    wait_time = constant_throughput(2)

    tasks = {
        ProductViewTest: 5,
        CustomerOrderTest: 3,
        BuyersRegTest: 2
    }
