from django.db import models
from django.utils import timezone

from apps.catalog.models import Product
from apps.users.models import User


class Cart(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"Cart {self.id} for {self.user_id}"


class CartEntry(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="entries")
    product = models.ForeignKey(Product, on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField()

    class Meta:
        db_table = "cart_entries"
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"], name="cart_entry_unique_product"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="cart_entry_quantity_gte_1"
            ),
        ]
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.product_id} in cart {self.cart_id}"
