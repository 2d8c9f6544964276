from django.contrib import admin

from .models import AgendaTrack, AgendaItem


@admin.register(AgendaTrack)
class AgendaTrackAdmin(admin.ModelAdmin):
    list_display = ("name",)


@admin.register(AgendaItem)
class AgendaItemAdmin(admin.ModelAdmin):
    list_display = ("start_time", "end_time", "title", "speaker", "track_name", "category")
    list_filter = ("track", "category")
    search_fields = ("title", "speaker")
    readonly_fields = ("track_name",)
