from django.urls import path

from tenants.views import TenantMeAPIView

urlpatterns = [
    path("me", TenantMeAPIView.as_view(), name="tenant-me"),
]
