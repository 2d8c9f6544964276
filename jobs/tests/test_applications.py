from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from authx.gate import Identity
from authx.tests.fakes import InMemoryIdentityProvider
from core.exceptions import ConflictError, InvalidTransition, NotFoundError
from core.roles import Actor, ROLE_ADMIN, ROLE_ATTENDEE
from jobs import services
from jobs.models import Job, Application
from jobs.state_machine import VALID_TRANSITIONS
from users.models import Admin


def application_payload(job, **overrides):
    payload = {
        "job_id": job.id,
        "full_name": "Ada Applicant",
        "phone": "9876543210",
        "whatsapp": "9876543210",
        "answers": {"Why DevFest?": "Community"},
    }
    payload.update(overrides)
    return payload


class SubmitApplicationTestCase(TestCase):
    def setUp(self):
        InMemoryIdentityProvider.reset()
        InMemoryIdentityProvider.add_user("user-1", "ada@example.com")

        self.client = APIClient()
        self.client.force_authenticate(user=Identity(uid="user-1", email="spoofed@example.com"))

        self.job = Job.objects.create(
            title="Stage Manager",
            description="Run the main stage schedule.",
            category=Job.CATEGORY_LEAD,
            additional_questions=["Why DevFest?"],
        )
        self.url = reverse("application-list-create")

    def test_submit_creates_applied_application(self):
        response = self.client.post(self.url, application_payload(self.job), format="json")

        self.assertEqual(response.status_code, 201, response.data)
        application = Application.objects.get()
        self.assertEqual(application.status, Application.STATUS_APPLIED)
        self.assertEqual(application.job_title, "Stage Manager")
        self.assertEqual(application.user_id, "user-1")
        # Email comes from the identity provider, not the token or the client
        self.assertEqual(application.user_email, "ada@example.com")
        self.assertIsNotNone(application.submitted_at)
        self.assertEqual(
            response.data["application"]["allowed_transitions"],
            [Application.STATUS_SHORTLISTED, Application.STATUS_REJECTED],
        )

    def test_second_submission_conflicts(self):
        first = self.client.post(self.url, application_payload(self.job), format="json")
        second = self.client.post(self.url, application_payload(self.job), format="json")

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.data["error"], services.ALREADY_APPLIED)
        self.assertEqual(Application.objects.count(), 1)

    def test_closed_job_rejects_submission(self):
        self.job.status = Job.STATUS_CLOSED
        self.job.save()

        response = self.client.post(self.url, application_payload(self.job), format="json")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"], services.JOB_CLOSED)
        self.assertFalse(Application.objects.exists())

    def test_closed_job_rejects_even_after_prior_application(self):
        self.client.post(self.url, application_payload(self.job), format="json")
        self.job.status = Job.STATUS_CLOSED
        self.job.save()

        response = self.client.post(self.url, application_payload(self.job), format="json")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"], services.JOB_CLOSED)

    def test_legacy_job_without_status_is_open(self):
        Job.objects.filter(pk=self.job.pk).update(status="")
        response = self.client.post(self.url, application_payload(self.job), format="json")
        self.assertEqual(response.status_code, 201, response.data)

    def test_missing_job_is_not_found(self):
        payload = application_payload(self.job, job_id=9999)
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, 404)

    def test_short_phone_is_invalid(self):
        response = self.client.post(
            self.url, application_payload(self.job, phone="12345"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid data")
        self.assertIn("phone", response.data["details"])

    def test_answers_must_match_job_questions(self):
        response = self.client.post(
            self.url,
            application_payload(self.job, answers={"Favourite colour?": "Blue"}),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("answers", response.data["details"])

    def test_anonymous_must_sign_in(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.url, application_payload(self.job), format="json")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["error"], "You must be signed in.")

    def test_deleting_job_keeps_applications(self):
        self.client.post(self.url, application_payload(self.job), format="json")
        admin = Actor(uid="admin-1", email=None, role=ROLE_ADMIN)

        services.delete_job(self.job.id, admin)

        self.assertFalse(Job.objects.exists())
        self.assertEqual(Application.objects.count(), 1)

    def test_service_level_duplicate_raises_conflict(self):
        actor = Actor(uid="user-1", email=None, role=ROLE_ATTENDEE)
        services.submit_application(application_payload(self.job), actor)
        with self.assertRaises(ConflictError):
            services.submit_application(application_payload(self.job), actor)


class ApplicationTransitionTestCase(TestCase):
    def setUp(self):
        self.admin = Actor(uid="admin-1", email="root@example.com", role=ROLE_ADMIN)
        self.job = Job.objects.create(
            title="Greeter", description="Welcome attendees at the door.",
            category=Job.CATEGORY_VOLUNTEER,
        )

    def make_application(self, status, user_id="user-1"):
        return Application.objects.create(
            job=self.job, job_title=self.job.title, user_id=user_id,
            full_name="Ada", phone="9876543210", whatsapp="9876543210", status=status,
        )

    def test_transition_table_is_complete(self):
        statuses = [value for value, _ in Application.STATUS_CHOICES]

        for index, current in enumerate(statuses):
            for target in statuses:
                application = self.make_application(current, user_id=f"user-{index}-{target}")
                payload = {"status": target}

                if target in VALID_TRANSITIONS[current]:
                    result = services.update_application_status(application.id, payload, self.admin)
                    self.assertEqual(result.status, target)
                else:
                    with self.assertRaises(InvalidTransition):
                        services.update_application_status(application.id, payload, self.admin)
                    application.refresh_from_db()
                    self.assertEqual(application.status, current)

    def test_example_scenario(self):
        InMemoryIdentityProvider.reset()
        InMemoryIdentityProvider.add_user("U1", "u1@example.com")
        applicant = Actor(uid="U1", email=None, role=ROLE_ATTENDEE)

        a1 = services.submit_application(application_payload(self.job, answers={}), applicant)
        self.assertEqual(a1.status, Application.STATUS_APPLIED)

        a1 = services.update_application_status(a1.id, {"status": "Shortlisted"}, self.admin)
        self.assertEqual(a1.status, Application.STATUS_SHORTLISTED)

        with self.assertRaises(InvalidTransition):
            services.update_application_status(a1.id, {"status": "Shortlisted"}, self.admin)

        a1 = services.update_application_status(a1.id, {"status": "Accepted"}, self.admin)
        self.assertEqual(a1.status, Application.STATUS_ACCEPTED)

        for target in ("Applied", "Shortlisted", "Rejected", "Accepted"):
            with self.assertRaises(InvalidTransition):
                services.update_application_status(a1.id, {"status": target}, self.admin)

    def test_status_endpoint_is_admin_only(self):
        application = self.make_application(Application.STATUS_APPLIED)
        client = APIClient()
        client.force_authenticate(user=Identity(uid="user-1"))

        response = client.post(
            reverse("application-status", args=[application.id]),
            {"status": "Shortlisted"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"], "Unauthorized: Access Denied")

    def test_status_endpoint_returns_allowed_transitions(self):
        Admin.objects.create(uid="admin-1", email="root@example.com")
        application = self.make_application(Application.STATUS_APPLIED)
        client = APIClient()
        client.force_authenticate(user=Identity(uid="admin-1"))

        response = client.post(
            reverse("application-status", args=[application.id]),
            {"status": "Rejected"},
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data["application"]["status"], "Rejected")
        self.assertEqual(response.data["allowed_transitions"], ["Applied", "Shortlisted"])

    def test_invalid_transition_has_conflict_shape(self):
        Admin.objects.create(uid="admin-1", email="root@example.com")
        application = self.make_application(Application.STATUS_ACCEPTED)
        client = APIClient()
        client.force_authenticate(user=Identity(uid="admin-1"))

        response = client.post(
            reverse("application-status", args=[application.id]),
            {"status": "Rejected"},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"], "No actions available for this status.")


class ApplicationPaginationTestCase(TestCase):
    def setUp(self):
        self.admin = Actor(uid="admin-1", email=None, role=ROLE_ADMIN)
        self.job_a = Job.objects.create(title="Greeter", description="Welcome attendees.", category="Volunteer")
        self.job_b = Job.objects.create(title="Speaker Host", description="Look after speakers.", category="Lead")

        base = timezone.now()
        statuses = ["Applied", "Shortlisted", "Rejected"]
        for i in range(23):
            job = self.job_a if i % 2 == 0 else self.job_b
            application = Application.objects.create(
                job=job, job_title=job.title, user_id=f"user-{i}",
                full_name=f"Applicant {i}", phone="9876543210", whatsapp="9876543210",
                status=statuses[i % 3],
            )
            # Pairs share a timestamp so the id tie-breaker is exercised
            Application.objects.filter(pk=application.pk).update(
                submitted_at=base - timedelta(minutes=i // 2)
            )

    def collect(self, **filters):
        seen = []
        cursor = None
        pages = 0
        while True:
            params = dict(filters, limit=5)
            if cursor is not None:
                params["start_after"] = cursor
            page = services.get_applications(params, self.admin)
            seen.extend(page["applications"])
            cursor = page["next_cursor"]
            pages += 1
            self.assertLess(pages, 20)
            if cursor is None:
                return seen

    def test_paging_visits_every_application_once_newest_first(self):
        seen = self.collect()

        ids = [a.id for a in seen]
        self.assertEqual(len(ids), 23)
        self.assertEqual(len(set(ids)), 23)

        expected = list(
            Application.objects.order_by("-submitted_at", "-id").values_list("id", flat=True)
        )
        self.assertEqual(ids, expected)
        for newer, older in zip(seen, seen[1:]):
            self.assertGreaterEqual(newer.submitted_at, older.submitted_at)

    def test_filters_combine_with_and(self):
        seen = self.collect(status="Applied", job_title="Greeter")

        expected = Application.objects.filter(status="Applied", job_title="Greeter")
        self.assertEqual({a.id for a in seen}, set(expected.values_list("id", flat=True)))
        self.assertTrue(all(a.status == "Applied" and a.job_title == "Greeter" for a in seen))

    def test_all_means_unfiltered(self):
        page = services.get_applications({"status": "All", "job_title": "All"}, self.admin)
        self.assertEqual(len(page["applications"]), 10)
        self.assertIsNotNone(page["next_cursor"])

    def test_unknown_cursor_is_not_found(self):
        with self.assertRaises(NotFoundError):
            services.get_applications({"start_after": 999999}, self.admin)

    def test_short_page_has_no_cursor(self):
        page = services.get_applications({"status": "Rejected", "limit": 50}, self.admin)
        self.assertEqual(len(page["applications"]), Application.objects.filter(status="Rejected").count())
        self.assertIsNone(page["next_cursor"])

    def test_admin_list_endpoint(self):
        Admin.objects.create(uid="admin-1", email="root@example.com")
        client = APIClient()
        client.force_authenticate(user=Identity(uid="admin-1"))

        response = client.get(reverse("application-list-create"), {"limit": 4, "status": "Applied"})

        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(len(response.data["applications"]), 4)
        self.assertEqual(response.data["next_cursor"], response.data["applications"][-1]["id"])

    def test_non_admin_cannot_list(self):
        client = APIClient()
        client.force_authenticate(user=Identity(uid="user-1"))
        response = client.get(reverse("application-list-create"))
        self.assertEqual(response.status_code, 403)
