from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import Cart, CartEntry
from apps.catalog.models import Category, Company, Product
from apps.common.management.commands.seed_categories import seed_categories
from apps.orders.models import Order
from apps.users.models import User

COMPANIES = [
    {
        "name": "Café del Parque",
        "logo": "logos/cafe-del-parque.png",
        "owner": "parque",
        "products": [
            ("Café americano", "3.50", "Cafetería"),
            ("Capuchino", "4.20", "Cafetería"),
            ("Croissant de mantequilla", "2.80", "Panadería"),
        ],
    },
    {
        "name": "Jugos La Huerta",
        "logo": "logos/la-huerta.png",
        "owner": "huerta",
        "products": [
            ("Jugo de mango", "3.00", "Jugos Naturales"),
            ("Malteada de fresa", "4.50", "Malteadas"),
            ("Bowl de frutas", "5.25", "Saludable"),
        ],
    },
    {
        "name": "Dulce Antojo",
        "logo": "",
        "owner": "antojo",
        "products": [
            ("Torta de chocolate", "3.75", "Postres"),
            ("Empanada", "1.90", "Fritos y Snacks"),
        ],
    },
]

USERS = [
    {"username": "cliente", "email": "cliente@beanquick.test", "role": User.Role.CLIENT,
     "firstname": "Camila", "lastname": "Rojas"},
    {"username": "parque", "email": "parque@beanquick.test", "role": User.Role.COMPANY,
     "firstname": "Andrés", "lastname": "Parque"},
    {"username": "huerta", "email": "huerta@beanquick.test", "role": User.Role.COMPANY,
     "firstname": "Lucía", "lastname": "Huerta"},
    {"username": "antojo", "email": "antojo@beanquick.test", "role": User.Role.COMPANY,
     "firstname": "Mateo", "lastname": "Antojo"},
]

DEMO_PASSWORD = "BeanQuick123"


class Command(BaseCommand):
    help = "Seed demo vendors, products and accounts for local development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing demo data before seeding"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            CartEntry.objects.all().delete()
            Cart.objects.all().delete()
            Order.objects.all().delete()
            Product.objects.all().delete()
            Company.objects.all().delete()
            User.objects.filter(username__in=[u["username"] for u in USERS]).delete()

        self.stdout.write("Seeding categories...")
        seed_categories()
        categories = {c.name: c for c in Category.objects.all()}

        self.stdout.write("Seeding users...")
        users = {}
        for payload in USERS:
            attrs = dict(payload)
            username = attrs.pop("username")
            user, _ = User.objects.update_or_create(username=username, defaults=attrs)
            user.set_password(DEMO_PASSWORD)
            user.save()
            users[username] = user

        self.stdout.write("Seeding vendors and products...")
        for vendor in COMPANIES:
            company, _ = Company.objects.update_or_create(
                name=vendor["name"],
                defaults={"logo": vendor["logo"], "owner": users[vendor["owner"]], "is_active": True},
            )
            for name, price, category in vendor["products"]:
                Product.objects.update_or_create(
                    company=company,
                    name=name,
                    defaults={"price": Decimal(price), "category": categories.get(category)},
                )

        Cart.objects.get_or_create(user=users["cliente"])
        self.stdout.write(
            self.style.SUCCESS(f"BeanQuick seed completed. Demo password: {DEMO_PASSWORD}")
        )
