from django.contrib import admin

from .models import Job, Application


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "status")
    list_filter = ("category", "status")
    search_fields = ("title",)


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ("full_name", "job_title", "status", "user_email", "submitted_at")
    list_filter = ("status", "job_title")
    search_fields = ("full_name", "user_email", "user_id")
    readonly_fields = ("submitted_at",)
