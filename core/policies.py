# core/policies.py
"""
Centralized authorization policy for the hub.

A pure decision table over (actor role, actor uid, action, target owner,
target team, actor team). No database access happens here; callers resolve
the actor and the target first and then ask the policy.
"""
from typing import Optional, Tuple

from .exceptions import AuthenticationError, AuthorizationError
from .roles import (
    Actor,
    ROLE_ADMIN,
    ROLE_TEAM_LEAD,
    STAFF_ROLES,
)


# Actions
MANAGE_CATALOG = "manage_catalog"  # jobs, agenda, announcements, admins, teams
VIEW_APPLICATIONS = "view_applications"
UPDATE_APPLICATION_STATUS = "update_application_status"
SUBMIT_APPLICATION = "submit_application"
CREATE_TASK_SELF = "create_task_self"
CREATE_TASK_TEAM_MEMBER = "create_task_team_member"
CREATE_TASK_ANY = "create_task_any"
UPDATE_TASK = "update_task"
DELETE_TASK = "delete_task"
VIEW_DASHBOARD = "view_dashboard"

ADMIN_ONLY_ACTIONS = {
    MANAGE_CATALOG,
    VIEW_APPLICATIONS,
    UPDATE_APPLICATION_STATUS,
    CREATE_TASK_ANY,
}

DENIED = "Unauthorized: Access Denied"


class AuthorizationPolicy:
    """
    All methods are static and side-effect free.
    ``check`` returns (allowed, reason); ``require`` raises on deny.
    """

    @staticmethod
    def check(
        actor: Optional[Actor],
        action: str,
        target_owner_uid: Optional[str] = None,
        target_team_id: Optional[int] = None,
        target_creator_uid: Optional[str] = None,
        enforce_ownership: bool = False,
    ) -> Tuple[bool, str]:
        if actor is None:
            return False, "Authentication required"

        role = actor.role

        if action in ADMIN_ONLY_ACTIONS:
            if role == ROLE_ADMIN:
                return True, ""
            return False, DENIED

        if action == SUBMIT_APPLICATION:
            # Any signed-in user, whatever their role
            return True, ""

        if action == VIEW_DASHBOARD:
            if role in STAFF_ROLES:
                return True, ""
            return False, DENIED

        if action == CREATE_TASK_SELF:
            if role not in STAFF_ROLES:
                return False, DENIED
            if target_owner_uid is not None and target_owner_uid != actor.uid:
                return False, "Volunteers can only assign tasks to themselves"
            return True, ""

        if action == CREATE_TASK_TEAM_MEMBER:
            if role == ROLE_ADMIN:
                return True, ""
            if role == ROLE_TEAM_LEAD:
                if target_team_id is not None and target_team_id == actor.team_id:
                    return True, ""
                return False, "Team leads can only assign tasks within their own team"
            return False, DENIED

        if action in (UPDATE_TASK, DELETE_TASK):
            if role not in STAFF_ROLES:
                return False, DENIED
            if not enforce_ownership or role == ROLE_ADMIN:
                return True, ""
            if actor.uid in (target_owner_uid, target_creator_uid):
                return True, ""
            if (
                role == ROLE_TEAM_LEAD
                and target_team_id is not None
                and target_team_id == actor.team_id
            ):
                return True, ""
            return False, "You can only change your own tasks"

        return False, f"Unknown action: {action}"

    @staticmethod
    def require(actor: Optional[Actor], action: str, **target) -> None:
        """Raise the matching typed error when ``check`` denies."""
        if actor is None:
            raise AuthenticationError()

        allowed, reason = AuthorizationPolicy.check(actor, action, **target)
        if not allowed:
            raise AuthorizationError(reason or DENIED)

    @staticmethod
    def is_admin(actor: Optional[Actor]) -> bool:
        return actor is not None and actor.role == ROLE_ADMIN

    @staticmethod
    def can_view_dashboard(actor: Optional[Actor]) -> bool:
        allowed, _ = AuthorizationPolicy.check(actor, VIEW_DASHBOARD)
        return allowed

