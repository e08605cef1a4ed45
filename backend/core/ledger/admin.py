from django.contrib import admin

from ledger.models import CreditTransaction


@admin.register(CreditTransaction)
class CreditTransactionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "org_id",
        "tenant",
        "unit_id",
        "type",
        "amount",
        "sequence",
        "created_at",
    )
    list_filter = ("type",)
    search_fields = ("org_id", "tenant__id", "unit_id", "memo")
    ordering = ("-created_at", "-sequence")
    readonly_fields = [field.name for field in CreditTransaction._meta.fields]

    def get_queryset(self, request):
        # Default manager is org-scoped; admin must see all entries.
        return CreditTransaction.all_objects.select_related("tenant")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
