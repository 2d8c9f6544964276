# jobs/models.py
from django.db import models


class Job(models.Model):
    CATEGORY_LEAD = "Lead"
    CATEGORY_VOLUNTEER = "Volunteer"

    CATEGORY_CHOICES = [
        (CATEGORY_LEAD, "Lead"),
        (CATEGORY_VOLUNTEER, "Volunteer"),
    ]

    STATUS_OPEN = "open"
    STATUS_CLOSED = "closed"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    # Ordered list of free-text prompts shown on the application form
    additional_questions = models.JSONField(default=list, blank=True)
    # Blank on legacy rows; treated as open
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN, blank=True)

    class Meta:
        ordering = ["title"]

    def __str__(self):
        return self.title

    @property
    def is_open(self) -> bool:
        return self.status != self.STATUS_CLOSED


class Application(models.Model):
    STATUS_APPLIED = "Applied"
    STATUS_SHORTLISTED = "Shortlisted"
    STATUS_ACCEPTED = "Accepted"
    STATUS_REJECTED = "Rejected"

    STATUS_CHOICES = [
        (STATUS_APPLIED, "Applied"),
        (STATUS_SHORTLISTED, "Shortlisted"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
    ]

    # Deleting a job leaves its applications in place
    job = models.ForeignKey(
        Job,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="applications",
    )
    job_title = models.CharField(max_length=255)

    user_id = models.CharField(max_length=128)
    user_email = models.EmailField(blank=True)
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32)
    whatsapp = models.CharField(max_length=32)
    answers = models.JSONField(default=dict, blank=True)

    submitted_at = models.DateTimeField(auto_now_add=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_APPLIED)

    class Meta:
        ordering = ["-submitted_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user_id", "job"], name="unique_application_per_job"),
        ]
        # Every supported filter combination, ordered by submission time
        indexes = [
            models.Index(fields=["-submitted_at"], name="app_submitted_idx"),
            models.Index(fields=["status", "-submitted_at"], name="app_status_submitted_idx"),
            models.Index(fields=["job_title", "-submitted_at"], name="app_job_submitted_idx"),
            models.Index(
                fields=["status", "job_title", "-submitted_at"],
                name="app_status_job_submitted_idx",
            ),
        ]

    def __str__(self):
        return f"{self.full_name} -> {self.job_title} ({self.status})"
