from django.contrib import admin

from tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("id", "org_id", "unit_id", "user_id", "name", "created_at")
    list_filter = ("org_id",)
    search_fields = ("id", "user_id", "name", "unit_id")
    ordering = ("org_id", "name")
    readonly_fields = ("id", "org_id", "created_at", "updated_at")

    def get_queryset(self, request):
        # Default manager is org-scoped; admin must see all tenants.
        return Tenant.all_objects.all()
