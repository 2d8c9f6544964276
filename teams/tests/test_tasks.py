from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from authx.gate import Identity
from core.exceptions import AuthorizationError, ConflictError
from core.roles import Actor, ROLE_ADMIN, ROLE_TEAM_LEAD, ROLE_VOLUNTEER
from teams import services
from teams.models import Team, Volunteer, Task
from users.models import Admin


class TaskWorkflowTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.design = Team.objects.create(name="Design")
        self.logistics = Team.objects.create(name="Logistics")

        self.lead = Volunteer.objects.create(
            uid="lead-1", full_name="Lena Lead", email="lena@example.com",
            team=self.design, is_lead=True,
        )
        self.member = Volunteer.objects.create(
            uid="vol-1", full_name="Vik Volunteer", email="vik@example.com",
            team=self.design,
        )
        self.outsider = Volunteer.objects.create(
            uid="vol-2", full_name="Omar Outsider", email="omar@example.com",
            team=self.logistics,
        )
        Admin.objects.create(uid="admin-1", email="root@example.com")

        self.tasks_url = reverse("task-list-create")

    def login(self, uid, email=None):
        self.client.force_authenticate(user=Identity(uid=uid, email=email))

    def test_volunteer_can_create_task_for_self(self):
        self.login("vol-1")
        response = self.client.post(self.tasks_url, {"title": "Print badges"}, format="json")

        self.assertEqual(response.status_code, 201, response.data)
        task = Task.objects.get(pk=response.data["id"])
        self.assertEqual(task.assignee_id, "vol-1")
        self.assertEqual(task.assignee_name, "Vik Volunteer")
        self.assertEqual(task.team_id, self.design.id)
        self.assertEqual(task.status, Task.STATUS_TODO)
        self.assertEqual(task.created_by, "vol-1")
        self.assertEqual(task.creator_name, "Vik Volunteer")

    def test_volunteer_cannot_assign_someone_else(self):
        self.login("vol-1")
        response = self.client.post(
            self.tasks_url,
            {"title": "Print badges", "assignee_id": "lead-1"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"], "Volunteers can only assign tasks to themselves")
        self.assertFalse(Task.objects.exists())

    def test_team_lead_can_assign_own_team_member(self):
        self.login("lead-1")
        response = self.client.post(
            self.tasks_url,
            {"title": "Sketch stage layout", "assignee_id": "vol-1"},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["assignee_name"], "Vik Volunteer")
        self.assertEqual(response.data["creator_name"], "Lena Lead")

    def test_team_lead_cannot_assign_other_team(self):
        self.login("lead-1")
        response = self.client.post(
            self.tasks_url,
            {"title": "Order chairs", "assignee_id": "vol-2"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)
        self.assertFalse(Task.objects.exists())

    def test_admin_task_routes_to_team_lead(self):
        self.login("admin-1", "root@example.com")
        response = self.client.post(
            self.tasks_url,
            {"title": "Finalize venue map", "team_id": self.design.id},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["assignee_id"], "lead-1")
        self.assertEqual(response.data["team_id"], self.design.id)
        # Admin has no volunteer profile, so the creator name falls back to email
        self.assertEqual(response.data["creator_name"], "root@example.com")

    def test_admin_task_for_team_without_lead_conflicts(self):
        self.login("admin-1")
        response = self.client.post(
            self.tasks_url,
            {"title": "Order chairs", "team_id": self.logistics.id},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertIn("no designated lead", response.data["error"])
        self.assertFalse(Task.objects.exists())

    def test_admin_can_self_assign(self):
        self.login("admin-1", "root@example.com")
        response = self.client.post(
            self.tasks_url,
            {"title": "Review sponsors", "assignee_id": "admin-1"},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["assignee_id"], "admin-1")
        self.assertIsNone(response.data["team_id"])

    def test_attendee_cannot_create_tasks(self):
        self.login("stranger")
        response = self.client.post(self.tasks_url, {"title": "Sneak in"}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_short_title_is_rejected(self):
        self.login("vol-1")
        response = self.client.post(self.tasks_url, {"title": "ab"}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid data")
        self.assertIn("title", response.data["details"])

    def test_status_moves_any_to_any(self):
        task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik Volunteer",
            team=self.design, created_by="vol-1", creator_name="Vik Volunteer",
        )
        self.login("vol-1")
        url = reverse("task-status", args=[task.id])

        for new_status in (Task.STATUS_DONE, Task.STATUS_TODO, Task.STATUS_IN_PROGRESS):
            response = self.client.post(url, {"status": new_status}, format="json")
            self.assertEqual(response.status_code, 200, response.data)
            task.refresh_from_db()
            self.assertEqual(task.status, new_status)

    def test_unknown_status_is_rejected(self):
        task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik Volunteer",
            created_by="vol-1", creator_name="Vik Volunteer",
        )
        self.login("vol-1")
        response = self.client.post(
            reverse("task-status", args=[task.id]), {"status": "Blocked"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_edit_changes_only_editable_fields(self):
        task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik Volunteer",
            team=self.design, created_by="vol-1", creator_name="Vik Volunteer",
        )
        self.login("vol-1")
        response = self.client.patch(
            reverse("task-detail", args=[task.id]),
            {"title": "Print all badges", "due_date": "2026-11-01"},
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        task.refresh_from_db()
        self.assertEqual(task.title, "Print all badges")
        self.assertEqual(str(task.due_date), "2026-11-01")
        self.assertEqual(task.assignee_id, "vol-1")

    def test_edit_rejects_assignment_fields(self):
        task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik Volunteer",
            created_by="vol-1", creator_name="Vik Volunteer",
        )
        self.login("vol-1")
        response = self.client.patch(
            reverse("task-detail", args=[task.id]),
            {"assignee_id": "lead-1"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_task(self):
        task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik Volunteer",
            created_by="vol-1", creator_name="Vik Volunteer",
        )
        self.login("vol-1")
        response = self.client.delete(reverse("task-detail", args=[task.id]))

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Task.objects.filter(pk=task.id).exists())

    def test_delete_missing_task_is_not_found(self):
        self.login("vol-1")
        response = self.client.delete(reverse("task-detail", args=[9999]))
        self.assertEqual(response.status_code, 404)


class TaskOwnershipTestCase(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="Design")
        Volunteer.objects.create(uid="vol-1", full_name="Vik", email="vik@example.com", team=self.team)
        Volunteer.objects.create(uid="vol-2", full_name="Val", email="val@example.com", team=self.team)
        self.task = Task.objects.create(
            title="Print badges", assignee_id="vol-1", assignee_name="Vik",
            team=self.team, created_by="vol-1", creator_name="Vik",
        )
        self.other = Actor(uid="vol-2", email=None, role=ROLE_VOLUNTEER, team_id=self.team.id)

    @override_settings(HUB_TASK_OWNERSHIP_CHECK=False)
    def test_any_staff_may_update_when_check_is_off(self):
        task = services.update_task_status(self.task.id, {"status": Task.STATUS_DONE}, self.other)
        self.assertEqual(task.status, Task.STATUS_DONE)

    @override_settings(HUB_TASK_OWNERSHIP_CHECK=True)
    def test_non_owner_is_denied_when_check_is_on(self):
        with self.assertRaises(AuthorizationError):
            services.update_task_status(self.task.id, {"status": Task.STATUS_DONE}, self.other)

    @override_settings(HUB_TASK_OWNERSHIP_CHECK=True)
    def test_team_lead_may_update_team_task_when_check_is_on(self):
        lead = Actor(uid="lead-9", email=None, role=ROLE_TEAM_LEAD, team_id=self.team.id)
        services.delete_task(self.task.id, lead)
        self.assertFalse(Task.objects.exists())


class TaskListingTestCase(TestCase):
    def setUp(self):
        self.design = Team.objects.create(name="Design")
        self.ops = Team.objects.create(name="Ops")

        def make(title, assignee, team, creator):
            return Task.objects.create(
                title=title, assignee_id=assignee, assignee_name=assignee,
                team=team, created_by=creator, creator_name=creator,
            )

        self.own = make("Own task", "vol-1", self.design, "vol-1")
        self.teammate = make("Teammate task", "vol-3", self.design, "lead-1")
        self.elsewhere = make("Elsewhere", "vol-2", self.ops, "admin-1")

    def test_admin_sees_everything(self):
        actor = Actor(uid="admin-1", email=None, role=ROLE_ADMIN)
        self.assertEqual(services.list_tasks(actor).count(), 3)

    def test_team_lead_sees_team_tasks(self):
        actor = Actor(uid="lead-1", email=None, role=ROLE_TEAM_LEAD, team_id=self.design.id)
        titles = set(services.list_tasks(actor).values_list("title", flat=True))
        self.assertEqual(titles, {"Own task", "Teammate task"})

    def test_volunteer_sees_own_tasks(self):
        actor = Actor(uid="vol-1", email=None, role=ROLE_VOLUNTEER, team_id=self.design.id)
        titles = list(services.list_tasks(actor).values_list("title", flat=True))
        self.assertEqual(titles, ["Own task"])

    def test_designated_lead_missing_raises_conflict(self):
        with self.assertRaises(ConflictError):
            services.designated_lead(self.ops)
