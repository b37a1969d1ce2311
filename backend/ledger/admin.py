from django.contrib import admin

from .models import Client, Goal, Transaction


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "email", "phone", "created_at")
    search_fields = ("name", "email", "user__email")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "type", "amount", "category", "client", "user")
    list_filter = ("type",)
    search_fields = ("description", "category", "user__email")
    date_hierarchy = "date"


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("description", "type", "target_amount", "period", "user")
    list_filter = ("type", "period")
