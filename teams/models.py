# teams/models.py
from django.db import models


class Team(models.Model):
    name = models.CharField(max_length=120)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Volunteer(models.Model):
    """
    Volunteer profile, keyed by the identity provider's uid.

    Provisioned outside the API (Django admin); the API only changes team
    assignment and the lead flag.
    """
    uid = models.CharField(max_length=128, primary_key=True)
    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32, blank=True)
    job_title = models.CharField(max_length=255, blank=True)
    # Team deletion unassigns members explicitly before deleting the team
    team = models.ForeignKey(
        Team,
        on_delete=models.PROTECT,
        related_name="members",
        null=True,
        blank=True,
    )
    is_lead = models.BooleanField(default=False)

    class Meta:
        ordering = ["full_name"]
        indexes = [
            models.Index(fields=["team", "is_lead"], name="volunteer_team_lead_idx"),
        ]

    def __str__(self):
        return self.full_name


class Task(models.Model):
    STATUS_TODO = "To Do"
    STATUS_IN_PROGRESS = "In Progress"
    STATUS_DONE = "Done"

    STATUS_CHOICES = [
        (STATUS_TODO, "To Do"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_DONE, "Done"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_TODO)

    # Denormalized from the assignee at creation time
    assignee_id = models.CharField(max_length=128)
    assignee_name = models.CharField(max_length=255)
    team = models.ForeignKey(
        Team,
        on_delete=models.SET_NULL,
        related_name="tasks",
        null=True,
        blank=True,
    )

    due_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.CharField(max_length=128)
    creator_name = models.CharField(max_length=255)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["assignee_id", "-created_at"], name="task_assignee_created_idx"),
            models.Index(fields=["team", "-created_at"], name="task_team_created_idx"),
        ]

    def __str__(self):
        return self.title
