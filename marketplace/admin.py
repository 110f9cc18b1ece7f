from django.contrib import admin
from django.utils.html import format_html

from .models import Project, Review


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ("reviewer", "rating", "comment", "created_at")
    readonly_fields = ("reviewer", "rating", "comment", "created_at")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "category", "price", "status_badge", "is_for_sale", "sold_to", "created_at")
    list_filter = ("status", "category", "is_for_sale", "created_at")
    search_fields = ("title", "description", "owner__email")
    # Review and sale fields change only through the lifecycle and listing services
    readonly_fields = (
        "status",
        "submitted_at",
        "reviewed_by",
        "reviewed_at",
        "rejection_reason",
        "is_for_sale",
        "sold_to",
        "sold_at",
        "created_at",
        "updated_at",
    )
    inlines = [ReviewInline]

    fieldsets = (
        (None, {"fields": ("owner", "title", "description", "category", "price", "delivery_time", "media")}),
        ("Review", {"fields": ("status", "submitted_at", "reviewed_by", "reviewed_at", "rejection_reason")}),
        ("Sale", {"fields": ("is_for_sale", "sold_to", "sold_at")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def status_badge(self, obj):
        colors = {
            "draft": "gray",
            "submitted": "orange",
            "approved": "green",
            "rejected": "red",
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, "black"),
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("project", "reviewer", "rating", "created_at")
    list_filter = ("rating", "created_at")
    search_fields = ("project__title", "reviewer__email", "comment")
    readonly_fields = ("created_at", "updated_at")
