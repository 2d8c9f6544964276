# authx/identity.py
"""
Identity provider adapters.

The hub never creates or deletes users; it only verifies bearer tokens and
looks users up in the managed auth directory. The concrete provider is
chosen by ``settings.HUB_IDENTITY_PROVIDER``.
"""
import logging

import jwt
from django.conf import settings
from django.utils.module_loading import import_string

from core.sanitizers import normalize_email
from .supabase_client import get_supabase_client

logger = logging.getLogger("devfest.authx")

USERS_PAGE_SIZE = 200


class InvalidToken(Exception):
    """Token is missing, malformed, badly signed, expired or revoked."""


class UserNotFound(Exception):
    pass


class IdentityProviderUnavailable(Exception):
    """The auth directory could not be reached or is not configured."""


class IdentityProvider:
    """
    Interface every provider implements. Users are plain dicts:
    ``{"uid": str, "email": str | None}``.
    """

    def verify_token(self, token: str) -> dict:
        raise NotImplementedError

    def get_user(self, uid: str) -> dict:
        raise NotImplementedError

    def get_user_by_email(self, email: str) -> dict:
        raise NotImplementedError


class SupabaseIdentityProvider(IdentityProvider):
    """
    Verifies Supabase-issued JWTs locally (HS256, ``authenticated`` audience)
    and, when IDENTITY_CHECK_REVOKED is on, confirms the session with the
    auth server so signed-out or revoked sessions are rejected.
    """

    def verify_token(self, token):
        secret = settings.SUPABASE_JWT_SECRET
        if not secret:
            logger.warning("SUPABASE_JWT_SECRET not configured")
            raise InvalidToken("Token verification is not configured")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=["HS256"],
                audience=settings.SUPABASE_JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"Invalid token: {exc}") from exc

        uid = payload.get("sub")
        if not uid:
            raise InvalidToken("Invalid token: missing user ID")

        if settings.IDENTITY_CHECK_REVOKED:
            self._check_session(token)

        return {"uid": uid, "email": payload.get("email")}

    def _check_session(self, token):
        client = self._client()
        try:
            response = client.auth.get_user(token)
        except Exception as exc:
            raise InvalidToken(f"Session check failed: {exc}") from exc

        if response is None or response.user is None:
            raise InvalidToken("Session has been revoked")

    def get_user(self, uid):
        client = self._client()
        try:
            response = client.auth.admin.get_user_by_id(uid)
        except Exception as exc:
            raise UserNotFound(uid) from exc

        if response is None or response.user is None:
            raise UserNotFound(uid)
        return {"uid": response.user.id, "email": response.user.email}

    def get_user_by_email(self, email):
        client = self._client()
        wanted = normalize_email(email)

        page = 1
        while True:
            users = client.auth.admin.list_users(page=page, per_page=USERS_PAGE_SIZE)
            if not users:
                break
            for user in users:
                if normalize_email(user.email) == wanted:
                    return {"uid": user.id, "email": user.email}
            if len(users) < USERS_PAGE_SIZE:
                break
            page += 1

        raise UserNotFound(email)

    def _client(self):
        client = get_supabase_client()
        if client is None:
            raise IdentityProviderUnavailable("Supabase auth is not configured")
        return client


def get_identity_provider() -> IdentityProvider:
    return import_string(settings.HUB_IDENTITY_PROVIDER)()
