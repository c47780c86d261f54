from django.urls import path

from .views import CartItemView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="api-cart"),
    path("items/<int:product_id>/", CartItemView.as_view(), name="api-cart-item"),
]
