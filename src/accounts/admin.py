"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import FelicityUser


@admin.register(FelicityUser)
class FelicityUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    list_display = ["username", "email", "role", "participant_type", "organizer_name", "is_active"]
    list_filter = ["role", "participant_type", "is_active", "is_staff"]
    search_fields = ["username", "email", "first_name", "last_name", "organizer_name"]
    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        (
            "Felicity",
            {
                "fields": (
                    "role",
                    "participant_type",
                    "college",
                    "contact_number",
                    "organizer_name",
                    "category",
                    "description",
                    "contact_email",
                )
            },
        ),
    )
