from django.contrib import admin
from .models import RatingRecord, RatingTypeSetting


# ---------------- TYPE SETTING ADMIN ----------------
@admin.register(RatingTypeSetting)
class RatingTypeSettingAdmin(admin.ModelAdmin):
    list_display = ("node_type", "enabled", "updated_at")
    list_editable = ("enabled",)
    list_filter = ("enabled",)
    search_fields = ("node_type",)
    readonly_fields = ("updated_at",)


# ---------------- RATING ADMIN ----------------
@admin.register(RatingRecord)
class RatingRecordAdmin(admin.ModelAdmin):
    list_display = ("nid", "vid", "rating")
    list_filter = ("rating",)
    search_fields = ("nid", "vid")
    ordering = ("nid", "vid")
    readonly_fields = ("nid", "vid", "rating")

    # Records follow the content lifecycle, never edited by hand
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
