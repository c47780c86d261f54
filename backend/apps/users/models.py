from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        CLIENT = "client", "Client"
        COMPANY = "company", "Company"
        ADMIN = "admin", "Admin"

    # id, username, email, password, is_active, is_staff, is_superuser are inherited
    firstname = models.CharField(max_length=100, blank=True)
    lastname = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CLIENT)

    @property
    def is_client(self) -> bool:
        return self.role == self.Role.CLIENT and not (self.is_staff or self.is_superuser)

    def __str__(self):
        return self.username
