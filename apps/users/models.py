"""User domain models for TravelEase.

Registration and profile management live outside the booking core; the core
only resolves users by id. The model keeps the attributes travelers carry
across the platform: contact phone and platform role.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, UserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone number. Use the international format without spaces."),
)


class CustomUserManager(UserManager):
    """Manager that normalizes phone numbers and assigns the default role."""

    use_in_migrations = True

    def _create_user(self, username: str, email: str | None, password: str | None, **extra_fields: Any):
        phone = extra_fields.get("phone_number")
        if phone:
            extra_fields["phone_number"] = self.normalize_phone(phone)
        return super()._create_user(username, email, password, **extra_fields)

    def create_user(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.Role.USER)
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.Role.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Traveler or administrator account."""

    class Role(models.TextChoices):
        USER = "USER", _("Traveler")
        ADMIN = "ADMIN", _("Administrator")

    email = models.EmailField(_("Email"), unique=True)
    phone_number = models.CharField(
        _("Phone"),
        max_length=20,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    role = models.CharField(
        _("Role"),
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser
