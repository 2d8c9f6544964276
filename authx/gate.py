# authx/gate.py
"""
AuthGate: bearer token -> uid, uid -> role.

Role is a projection of the admins and volunteers collections and is
recomputed on every call. The only memoization is per request (the actor is
stashed on the request object by ``actor_for``).
"""
import logging
from typing import Optional

from core.roles import (
    Actor,
    ROLE_ADMIN,
    ROLE_ATTENDEE,
    ROLE_TEAM_LEAD,
    ROLE_VOLUNTEER,
)
from teams.models import Volunteer
from users.models import Admin
from .identity import (
    IdentityProviderUnavailable,
    InvalidToken,
    get_identity_provider,
)

logger = logging.getLogger("devfest.authx")


class Identity:
    """
    The authenticated principal DRF puts on ``request.user``.
    Only the uid and the token's email claim are known here.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, uid: str, email: Optional[str] = None):
        self.uid = uid
        self.email = email

    @property
    def pk(self):
        # Throttles key on request.user.pk
        return self.uid

    def __eq__(self, other):
        return isinstance(other, Identity) and other.uid == self.uid

    def __hash__(self):
        return hash(self.uid)

    def __str__(self):
        return self.uid


class AuthGate:

    def __init__(self, provider=None):
        self.provider = provider or get_identity_provider()

    def authenticate(self, token: Optional[str]) -> Optional[Identity]:
        """
        Verify ``token`` with the identity provider. Any failure means
        anonymous; provider internals are never surfaced.
        """
        if not token:
            return None
        try:
            claims = self.provider.verify_token(token)
        except (InvalidToken, IdentityProviderUnavailable) as exc:
            logger.debug(f"Token rejected: {exc}")
            return None
        return Identity(uid=claims["uid"], email=claims.get("email"))

    def verify(self, token: Optional[str]) -> Optional[str]:
        identity = self.authenticate(token)
        return identity.uid if identity else None

    @staticmethod
    def resolve_role(uid: str) -> str:
        role, _ = AuthGate._lookup(uid)
        return role

    @staticmethod
    def resolve_actor(identity: Identity) -> Actor:
        role, volunteer = AuthGate._lookup(identity.uid)
        return Actor(
            uid=identity.uid,
            email=identity.email,
            role=role,
            team_id=volunteer.team_id if volunteer else None,
        )

    @staticmethod
    def _lookup(uid):
        volunteer = Volunteer.objects.filter(uid=uid).first()

        if Admin.objects.filter(uid=uid).exists():
            return ROLE_ADMIN, volunteer
        if volunteer is None:
            return ROLE_ATTENDEE, None
        if volunteer.is_lead:
            return ROLE_TEAM_LEAD, volunteer
        return ROLE_VOLUNTEER, volunteer


def actor_for(request) -> Optional[Actor]:
    """
    Resolve the caller of a request into an Actor, once per request.
    Returns None for anonymous callers.
    """
    user = getattr(request, "user", None)
    if not getattr(user, "is_authenticated", False) or not isinstance(user, Identity):
        return None

    actor = getattr(request, "_hub_actor", None)
    if actor is None or actor.uid != user.uid:
        actor = AuthGate.resolve_actor(user)
        request._hub_actor = actor
    return actor
