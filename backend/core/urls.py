"""
Root URL configuration for the Saldus API.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/users/", include("users.urls")),
    path("api/billing/", include("billing.urls")),
    path("api/", include("ledger.urls")),
]
