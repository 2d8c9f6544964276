from django.contrib import admin

from .models import Admin


@admin.register(Admin)
class AdminMembershipAdmin(admin.ModelAdmin):
    list_display = ("email", "uid", "added_at")
    search_fields = ("email", "uid")
