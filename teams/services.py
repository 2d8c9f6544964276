# teams/services.py
"""
Volunteer coordination: teams, lead flags and the task workflow.

Task status is unrestricted (any authorized actor may move a task to any
status). Creation is where the rules live:

- Volunteers may only assign tasks to themselves.
- Team leads may assign themselves or members of their own team.
- Admins may assign themselves; any other admin-created task is routed to
  the designated lead of the chosen team and fails if the team has none.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Q

from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.policies import (
    AuthorizationPolicy,
    CREATE_TASK_ANY,
    CREATE_TASK_SELF,
    CREATE_TASK_TEAM_MEMBER,
    DELETE_TASK,
    MANAGE_CATALOG,
    UPDATE_TASK,
    VIEW_DASHBOARD,
)
from core.revalidation import PATH_DASHBOARD, revalidate_path
from core.roles import ROLE_ADMIN, ROLE_TEAM_LEAD, ROLE_VOLUNTEER
from core.sanitizers import sanitize_text
from core.validation import validate_payload
from .models import Team, Volunteer, Task
from .serializers import (
    LeadStatusInputSerializer,
    TaskCreateSerializer,
    TaskStatusSerializer,
    TaskUpdateSerializer,
    TeamInputSerializer,
    VolunteerTeamInputSerializer,
)

logger = logging.getLogger("devfest.teams")


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────

def _get_team(team_id) -> Team:
    try:
        return Team.objects.get(pk=team_id)
    except Team.DoesNotExist:
        raise NotFoundError("Team not found.")


def _get_volunteer(uid) -> Volunteer:
    try:
        return Volunteer.objects.select_related("team").get(uid=uid)
    except Volunteer.DoesNotExist:
        raise NotFoundError("Volunteer not found.")


def _get_task(task_id, lock=False) -> Task:
    qs = Task.objects.select_for_update() if lock else Task.objects.all()
    try:
        return qs.get(pk=task_id)
    except Task.DoesNotExist:
        raise NotFoundError("Task not found.")


def designated_lead(team: Team) -> Volunteer:
    lead = (
        Volunteer.objects
        .filter(team=team, is_lead=True)
        .order_by("full_name", "uid")
        .first()
    )
    if lead is None:
        raise ConflictError(
            f"Team '{team.name}' has no designated lead. Assign a lead before creating tasks for it."
        )
    return lead


def _display_name(actor) -> str:
    volunteer = Volunteer.objects.filter(uid=actor.uid).only("full_name").first()
    if volunteer:
        return volunteer.full_name
    return actor.email or actor.uid


def _require_task_access(actor, action, task: Task):
    AuthorizationPolicy.require(
        actor,
        action,
        target_owner_uid=task.assignee_id,
        target_creator_uid=task.created_by,
        target_team_id=task.team_id,
        enforce_ownership=settings.HUB_TASK_OWNERSHIP_CHECK,
    )


# ─────────────────────────────────────────────────────────────
# Tasks
# ─────────────────────────────────────────────────────────────

def _resolve_assignee(data, actor) -> Volunteer:
    assignee_id = data.get("assignee_id")

    if actor.role == ROLE_ADMIN:
        if assignee_id == actor.uid:
            AuthorizationPolicy.require(actor, CREATE_TASK_SELF, target_owner_uid=assignee_id)
            return Volunteer.objects.select_related("team").filter(uid=actor.uid).first()

        AuthorizationPolicy.require(actor, CREATE_TASK_ANY)
        if data.get("team_id") is not None:
            team = _get_team(data["team_id"])
        elif assignee_id:
            member = _get_volunteer(assignee_id)
            if member.team is None:
                raise ConflictError(
                    f"{member.full_name} is not on a team, so there is no lead to route the task to."
                )
            team = member.team
        else:
            raise ValidationError(details={"team_id": ["Choose a team for this task."]})
        return designated_lead(team)

    if assignee_id is None:
        assignee_id = actor.uid

    if assignee_id == actor.uid or actor.role == ROLE_VOLUNTEER:
        AuthorizationPolicy.require(actor, CREATE_TASK_SELF, target_owner_uid=assignee_id)
        return _get_volunteer(assignee_id)

    member = _get_volunteer(assignee_id)
    AuthorizationPolicy.require(actor, CREATE_TASK_TEAM_MEMBER, target_team_id=member.team_id)
    return member


def create_task(payload, actor) -> Task:
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)
    data = validate_payload(TaskCreateSerializer, payload)

    assignee = _resolve_assignee(data, actor)
    if assignee is not None:
        assignee_id, assignee_name, team = assignee.uid, assignee.full_name, assignee.team
    else:
        # Admin self-assigning without a volunteer profile
        assignee_id, assignee_name, team = actor.uid, _display_name(actor), None

    task = Task.objects.create(
        title=sanitize_text(data["title"], max_length=255),
        description=sanitize_text(data.get("description")),
        assignee_id=assignee_id,
        assignee_name=assignee_name,
        team=team,
        due_date=data.get("due_date"),
        created_by=actor.uid,
        creator_name=_display_name(actor),
    )
    logger.info(
        f"Task created: task={task.id}, assignee={assignee_id}, team={task.team_id}, actor={actor.uid}"
    )
    revalidate_path(PATH_DASHBOARD)
    return task


def update_task(task_id, payload, actor) -> Task:
    """Edit title, description and due date. Assignment is fixed at creation."""
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)
    data = validate_payload(TaskUpdateSerializer, payload)

    with transaction.atomic():
        task = _get_task(task_id, lock=True)
        _require_task_access(actor, UPDATE_TASK, task)

        if "title" in data:
            task.title = sanitize_text(data["title"], max_length=255)
        if "description" in data:
            task.description = sanitize_text(data["description"])
        if "due_date" in data:
            task.due_date = data["due_date"]
        task.save(update_fields=["title", "description", "due_date"])

    revalidate_path(PATH_DASHBOARD)
    return task


def manage_task(payload, actor, task_id=None) -> Task:
    if task_id is None:
        return create_task(payload, actor)
    return update_task(task_id, payload, actor)


def update_task_status(task_id, payload, actor) -> Task:
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)
    data = validate_payload(TaskStatusSerializer, payload)

    with transaction.atomic():
        task = _get_task(task_id, lock=True)
        _require_task_access(actor, UPDATE_TASK, task)

        old_status = task.status
        task.status = data["status"]
        task.save(update_fields=["status"])

    logger.info(
        f"Task status change: task={task.id}, from={old_status}, to={task.status}, actor={actor.uid}"
    )
    revalidate_path(PATH_DASHBOARD)
    return task


def delete_task(task_id, actor) -> None:
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)

    with transaction.atomic():
        task = _get_task(task_id, lock=True)
        _require_task_access(actor, DELETE_TASK, task)
        task.delete()

    logger.info(f"Task deleted: task={task_id}, actor={actor.uid}")
    revalidate_path(PATH_DASHBOARD)


def list_tasks(actor):
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)

    qs = Task.objects.all()
    if actor.role == ROLE_ADMIN:
        return qs
    mine = Q(assignee_id=actor.uid) | Q(created_by=actor.uid)
    if actor.role == ROLE_TEAM_LEAD and actor.team_id is not None:
        return qs.filter(mine | Q(team_id=actor.team_id))
    return qs.filter(mine)


# ─────────────────────────────────────────────────────────────
# Teams & volunteers (admin only)
# ─────────────────────────────────────────────────────────────

def manage_team(payload, actor, team_id=None) -> Team:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(TeamInputSerializer, payload)
    name = sanitize_text(data["name"], max_length=120)
    if not name:
        raise ValidationError(details={"name": ["Team name cannot be empty"]})

    if team_id is None:
        team = Team.objects.create(name=name)
    else:
        team = _get_team(team_id)
        team.name = name
        team.save(update_fields=["name"])

    revalidate_path(PATH_DASHBOARD)
    return team


def delete_team(team_id, actor) -> int:
    """
    Unassign every member and delete the team in one transaction.
    Returns the number of volunteers that were unassigned.
    """
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    with transaction.atomic():
        try:
            team = Team.objects.select_for_update().get(pk=team_id)
        except Team.DoesNotExist:
            raise NotFoundError("Team not found.")

        unassigned = Volunteer.objects.filter(team=team).update(team=None)
        team.delete()

    logger.info(f"Team deleted: team={team_id}, unassigned={unassigned}, actor={actor.uid}")
    revalidate_path(PATH_DASHBOARD)
    return unassigned


def assign_volunteer_team(uid, payload, actor) -> Volunteer:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(VolunteerTeamInputSerializer, payload)

    with transaction.atomic():
        volunteer = _get_volunteer(uid)
        volunteer.team = _get_team(data["team_id"]) if data["team_id"] is not None else None
        volunteer.save(update_fields=["team"])

    revalidate_path(PATH_DASHBOARD)
    return volunteer


def set_lead_status(uid, payload, actor) -> Volunteer:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(LeadStatusInputSerializer, payload)

    volunteer = _get_volunteer(uid)
    volunteer.is_lead = data["is_lead"]
    volunteer.save(update_fields=["is_lead"])

    revalidate_path(PATH_DASHBOARD)
    return volunteer


def get_dashboard_data(actor) -> dict:
    AuthorizationPolicy.require(actor, VIEW_DASHBOARD)
    return {
        "teams": list(Team.objects.order_by("name")),
        "volunteers": list(Volunteer.objects.order_by("full_name")),
        "role": actor.role,
    }
