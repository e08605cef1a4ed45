"""
URL configuration for pm_backend project.

The credit endpoints live under `v1/tenants/` and require the identity
headers resolved by `orgs.middleware.IdentityContextMiddleware`.
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def healthz(_request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("healthz/", healthz, name="healthz"),
    path("v1/tenants/", include("tenants.urls")),
    path("v1/tenants/", include("ledger.urls")),
]
