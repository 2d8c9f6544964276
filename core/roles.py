# core/roles.py
from dataclasses import dataclass
from typing import Optional


ROLE_ADMIN = "Admin"
ROLE_TEAM_LEAD = "Team Lead"
ROLE_VOLUNTEER = "Volunteer"
ROLE_ATTENDEE = "Attendee"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_TEAM_LEAD, "Team Lead"),
    (ROLE_VOLUNTEER, "Volunteer"),
    (ROLE_ATTENDEE, "Attendee"),
]

# Roles that can see the volunteer dashboard and work on tasks
STAFF_ROLES = [ROLE_ADMIN, ROLE_TEAM_LEAD, ROLE_VOLUNTEER]


@dataclass(frozen=True)
class Actor:
    """
    The caller of an operation, resolved once per request.

    ``role`` is derived from the admins/volunteers collections at request
    time and must never be persisted.
    """
    uid: str
    email: Optional[str]
    role: str
    team_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
