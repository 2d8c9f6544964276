from django.contrib import admin

from .models import Team, Volunteer, Task


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = ("full_name", "email", "team", "is_lead")
    list_filter = ("team", "is_lead")
    search_fields = ("full_name", "email", "uid")


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "assignee_name", "team", "due_date", "created_at")
    list_filter = ("status", "team")
    search_fields = ("title", "assignee_name", "creator_name")
