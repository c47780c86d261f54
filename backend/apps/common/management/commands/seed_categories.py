from django.core.management.base import BaseCommand
from django.db import transaction

from apps.catalog.models import Category

CATEGORIES = [
    "Comidas Rápidas",
    "Panadería",
    "Bebidas Frías",
    "Jugos Naturales",
    "Desayunos",
    "Cafetería",
    "Repostería",
    "Almuerzos",
    "Saludable",
    "Postres",
    "Fritos y Snacks",
    "Malteadas",
]


def seed_categories():
    """Create any missing category; existing rows are left as they are."""
    created = 0
    for name in CATEGORIES:
        _, was_created = Category.objects.update_or_create(name=name, defaults={"name": name})
        created += int(was_created)
    return created


class Command(BaseCommand):
    help = "Seed the product categories."

    @transaction.atomic
    def handle(self, *args, **options):
        created = seed_categories()
        self.stdout.write(
            self.style.SUCCESS(
                f"Categories ready ({created} created, {len(CATEGORIES) - created} already present)."
            )
        )
