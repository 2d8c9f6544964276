# users/services.py
"""
Admin set management. Every operation requires the caller to be an admin.
"""
import logging

from django.db import IntegrityError, transaction

from authx.identity import UserNotFound, get_identity_provider
from core.exceptions import ConflictError, NotFoundError
from core.policies import AuthorizationPolicy, MANAGE_CATALOG
from core.revalidation import PATH_ADMIN, revalidate_path
from core.validation import validate_payload
from .models import Admin
from .serializers import AddAdminSerializer

logger = logging.getLogger("devfest.users")


def list_admins(actor):
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    return list(Admin.objects.order_by("email"))


def add_admin(payload, actor):
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(AddAdminSerializer, payload)

    try:
        user = get_identity_provider().get_user_by_email(data["email"])
    except UserNotFound:
        raise NotFoundError(f"No user found with email {data['email']}.")

    if Admin.objects.filter(uid=user["uid"]).exists():
        raise ConflictError(f"{user['email']} is already an admin.")

    try:
        with transaction.atomic():
            admin = Admin.objects.create(uid=user["uid"], email=user["email"] or data["email"])
    except IntegrityError:
        raise ConflictError(f"{user['email']} is already an admin.")

    logger.info(f"Admin added: uid={admin.uid}, by={actor.uid}")
    revalidate_path(PATH_ADMIN)
    return admin


def remove_admin(uid, actor):
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    if uid == actor.uid:
        raise ConflictError("You cannot remove yourself as an admin.")

    deleted, _ = Admin.objects.filter(uid=uid).delete()
    if not deleted:
        raise NotFoundError("Admin not found.")

    logger.info(f"Admin removed: uid={uid}, by={actor.uid}")
    revalidate_path(PATH_ADMIN)
