from django.core.management.base import BaseCommand
from django.db import transaction

from agenda.models import AgendaTrack, AgendaItem
from announcements.models import Announcement
from jobs.models import Job
from teams.models import Team


class Command(BaseCommand):
    help = "Seeds the database with sample jobs, teams, agenda and an announcement"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding data...")

        jobs_data = [
            {
                "title": "Stage Manager",
                "description": "Keep the main stage on schedule and coordinate speaker handovers.",
                "category": Job.CATEGORY_LEAD,
                "additional_questions": ["Have you run a stage before?", "Which slots can you cover?"],
            },
            {
                "title": "Registration Desk",
                "description": "Check attendees in and hand out badges and swag.",
                "category": Job.CATEGORY_VOLUNTEER,
                "additional_questions": ["Are you available from 8 AM?"],
            },
            {
                "title": "Social Media",
                "description": "Live-post talks and photos during the event.",
                "category": Job.CATEGORY_VOLUNTEER,
                "additional_questions": [],
            },
        ]
        for data in jobs_data:
            job, created = Job.objects.get_or_create(title=data["title"], defaults=data)
            self.stdout.write(f"{'Created' if created else 'Found'} job: {job.title}")

        for name in ("Logistics", "Stage", "Outreach"):
            Team.objects.get_or_create(name=name)

        main, _ = AgendaTrack.objects.get_or_create(name="Main Hall")
        workshop, _ = AgendaTrack.objects.get_or_create(name="Workshop Room")

        agenda_data = [
            ("Registration & Breakfast", "", main, "08:30", "09:30", AgendaItem.CATEGORY_OTHER),
            ("Keynote", "Guest Speaker", main, "09:30", "10:30", AgendaItem.CATEGORY_AI),
            ("Building with Firebase", "Community Expert", workshop, "11:00", "12:30", AgendaItem.CATEGORY_FIREBASE),
            ("Modern Web Apps", "Community Expert", main, "11:00", "11:45", AgendaItem.CATEGORY_WEB),
        ]
        for title, speaker, track, start, end, category in agenda_data:
            AgendaItem.objects.get_or_create(
                title=title,
                defaults={
                    "speaker": speaker,
                    "track": track,
                    "track_name": track.name,
                    "start_time": start,
                    "end_time": end,
                    "category": category,
                },
            )

        if not Announcement.objects.exists():
            Announcement.objects.create(content="Volunteer applications are **open**! Check the job board.")

        self.stdout.write(self.style.SUCCESS("Seeding complete."))
