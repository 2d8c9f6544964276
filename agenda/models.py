# agenda/models.py
from django.db import models


class AgendaTrack(models.Model):
    name = models.CharField(max_length=120)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class AgendaItem(models.Model):
    CATEGORY_CLOUD = "Cloud"
    CATEGORY_AI = "AI"
    CATEGORY_WEB = "Web"
    CATEGORY_MOBILE = "Mobile"
    CATEGORY_FIREBASE = "Firebase"
    CATEGORY_OTHER = "Other"

    CATEGORY_CHOICES = [
        (CATEGORY_CLOUD, "Cloud"),
        (CATEGORY_AI, "AI"),
        (CATEGORY_WEB, "Web"),
        (CATEGORY_MOBILE, "Mobile"),
        (CATEGORY_FIREBASE, "Firebase"),
        (CATEGORY_OTHER, "Other"),
    ]

    title = models.CharField(max_length=255)
    speaker = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    # A referenced track cannot be deleted
    track = models.ForeignKey(AgendaTrack, on_delete=models.PROTECT, related_name="items")
    track_name = models.CharField(max_length=120)

    # Zero-padded "HH:MM"; string order is time order
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, blank=True)

    class Meta:
        ordering = ["start_time", "id"]
        indexes = [
            models.Index(fields=["start_time"], name="agenda_start_idx"),
        ]

    def __str__(self):
        return f"{self.start_time} {self.title}"
