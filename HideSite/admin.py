from django.contrib import admin

from .forms import HideSiteOptionsForm
from .models import HideSiteOptions


@admin.register(HideSiteOptions)
class HideSiteOptionsAdmin(admin.ModelAdmin):
    form = HideSiteOptionsForm
    list_display = ["__str__", "redirect_page", "updated_at"]
    readonly_fields = ["updated_at"]
    fieldsets = (
        ("Hiding scope", {
            "fields": ("hide_scope", "materials_mapping"),
        }),
        ("Global hiding", {
            "fields": ("mode", "roles"),
        }),
        ("Redirect", {
            "fields": ("redirect_page", "updated_at"),
        }),
    )

    def has_add_permission(self, request):
        if HideSiteOptions.objects.exists():
            return False
        return super().has_add_permission(request)

    def has_delete_permission(self, request, obj=None):
        return False
