"""Admin for lock records (schedlock Django adapter)."""
from django.contrib import admin

from schedlock.adapters.django.models import LockRecord


@admin.register(LockRecord)
class LockRecordAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "lock_until",
        "locked_at",
        "locked_by",
        "is_locked",
    ]
    list_filter = ["locked_by"]
    search_fields = ["name", "locked_by"]
    readonly_fields = ["name", "locked_at", "locked_by"]
    date_hierarchy = "locked_at"
    ordering = ["name"]

    @admin.display(boolean=True, description="Locked")
    def is_locked(self, obj):
        return obj.is_locked

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        # Rows are only created and updated by the lock protocol.
        return False
