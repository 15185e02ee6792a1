from django.contrib import admin
from .models import Node, NodeRevision, NodeType


# ---------------- NODE TYPE ADMIN ----------------
@admin.register(NodeType)
class NodeTypeAdmin(admin.ModelAdmin):
    list_display = ("type", "name")
    search_fields = ("type", "name")


# ---------------- NODE ADMIN ----------------
class NodeRevisionInline(admin.TabularInline):
    model = NodeRevision
    extra = 0
    fields = ("vid", "title", "log", "created_at")
    readonly_fields = ("vid", "title", "log", "created_at")
    can_delete = False


@admin.register(Node)
class NodeAdmin(admin.ModelAdmin):
    list_display = ("nid", "title", "type", "vid", "updated_at")
    list_filter = ("type",)
    search_fields = ("title",)
    ordering = ("-updated_at",)
    readonly_fields = ("vid", "created_at", "updated_at")
    inlines = [NodeRevisionInline]

    def has_add_permission(self, request):
        # Nodes are written through Node.save_revision so revisions stay in step
        return False
