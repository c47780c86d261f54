from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.carts.models import Cart
from apps.catalog.models import Category, Company, Product
from apps.common.management.commands.seed_categories import CATEGORIES
from apps.users.models import User


class SeedCommandTests(TestCase):
    def test_seed_categories_is_idempotent(self):
        call_command("seed_categories", stdout=StringIO())
        call_command("seed_categories", stdout=StringIO())
        self.assertEqual(Category.objects.count(), len(CATEGORIES))
        self.assertTrue(Category.objects.filter(name="Cafetería").exists())

    def test_seed_beanquick_creates_vendors_and_client(self):
        out = StringIO()
        call_command("seed_beanquick", stdout=out)
        call_command("seed_beanquick", stdout=StringIO())
        self.assertIn("BeanQuick seed completed", out.getvalue())
        self.assertEqual(Company.objects.count(), 3)
        self.assertEqual(Product.objects.count(), 8)
        client = User.objects.get(username="cliente")
        self.assertTrue(client.is_client)
        self.assertTrue(Cart.objects.filter(user=client).exists())
        self.assertFalse(User.objects.get(username="parque").is_client)
