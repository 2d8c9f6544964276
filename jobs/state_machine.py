# jobs/state_machine.py
"""
Application status state machine.

Applied     → Shortlisted | Rejected
Shortlisted → Accepted | Rejected
Rejected    → Applied | Shortlisted   (re-open)
Accepted    → (terminal)

Any transition not in VALID_TRANSITIONS is rejected, including a
transition to the current status.
"""
from typing import Tuple
import logging

from core.exceptions import InvalidTransition
from .models import Application

logger = logging.getLogger("devfest.jobs")


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Application.STATUS_APPLIED: [Application.STATUS_SHORTLISTED, Application.STATUS_REJECTED],
    Application.STATUS_SHORTLISTED: [Application.STATUS_ACCEPTED, Application.STATUS_REJECTED],
    Application.STATUS_REJECTED: [Application.STATUS_APPLIED, Application.STATUS_SHORTLISTED],
    Application.STATUS_ACCEPTED: [],
}


def can_transition(application: Application, new_status: str) -> Tuple[bool, str]:
    """
    Check if an application can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = application.status

    if new_status not in dict(Application.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = VALID_TRANSITIONS.get(current_status, [])
    if not allowed:
        return False, "No actions available for this status."

    if new_status not in allowed:
        return False, f"Cannot move an application from '{current_status}' to '{new_status}'."

    return True, ""


def transition(application: Application, new_status: str, actor=None, save: bool = True) -> Application:
    """
    Move an application to ``new_status``.

    Raises InvalidTransition when the table does not allow it.
    """
    can, reason = can_transition(application, new_status)
    actor_id = getattr(actor, "uid", "unknown")

    if not can:
        logger.warning(
            f"Invalid application transition attempted: application={application.id}, "
            f"from={application.status}, to={new_status}, actor={actor_id}. "
            f"Reason: {reason}"
        )
        raise InvalidTransition(reason)

    old_status = application.status
    application.status = new_status

    if save:
        application.save(update_fields=["status"])

    logger.info(
        f"Application state transition: application={application.id}, "
        f"from={old_status}, to={new_status}, actor={actor_id}"
    )
    return application


def get_allowed_transitions(status: str) -> list:
    return list(VALID_TRANSITIONS.get(status, []))


def is_terminal_status(status: str) -> bool:
    return status in VALID_TRANSITIONS and len(VALID_TRANSITIONS[status]) == 0
