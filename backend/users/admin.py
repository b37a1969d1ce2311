"""
Django admin configuration for users and recovery records.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser, FakeAnswer, SecurityAttempt


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """
    Extends the default UserAdmin with the business profile and plan.
    """

    list_display = ("email", "full_name", "company_name", "plan_type", "is_active")
    list_filter = UserAdmin.list_filter + ("plan_type",)
    search_fields = ("email", "full_name", "company_name")
    ordering = ("email",)

    fieldsets = UserAdmin.fieldsets + (
        (
            "Business profile",
            {"fields": ("full_name", "phone", "company_name", "commercial_phone", "address")},
        ),
        (
            "Plan",
            {"fields": ("plan_type", "plan_expiry_date", "stripe_customer_id")},
        ),
        ("Recovery", {"fields": ("security_question",)}),
    )


@admin.register(SecurityAttempt)
class SecurityAttemptAdmin(admin.ModelAdmin):
    list_display = ("user", "successful", "attempt_time")
    list_filter = ("successful",)


admin.site.register(FakeAnswer)
