from django.urls import include, path

urlpatterns = [
    path("cart/", include("apps.carts.urls")),
    path("orders/", include("apps.orders.urls")),
]
