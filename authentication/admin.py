from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from authentication.models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("email", "name", "role", "is_blocked", "is_email_verified", "date_joined")
    list_filter = ("role", "is_blocked", "is_email_verified", "is_staff")
    search_fields = ("email", "name", "username")
    ordering = ("-date_joined",)
    fieldsets = UserAdmin.fieldsets + (("Codemart", {"fields": ("name", "role", "is_email_verified", "is_blocked")}),)
