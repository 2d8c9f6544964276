# announcements/services.py
"""
Announcements and newsletter subscriptions.

A new announcement is broadcast to the ``announcements`` push topic once
the insert has committed. The broadcast is best effort and never fails
the request.
"""
import logging

from django.db import IntegrityError, transaction

from core.exceptions import ConflictError, NotFoundError
from core.policies import AuthorizationPolicy, MANAGE_CATALOG
from core.revalidation import PATH_ADMIN, PATH_HOME, cached_page, revalidate_path
from core.sanitizers import normalize_email, sanitize_text
from core.validation import validate_payload
from notifications.tasks import dispatch_topic_push
from .models import Announcement, Subscription
from .serializers import (
    AnnouncementInputSerializer,
    AnnouncementSerializer,
    SubscribeInputSerializer,
)

logger = logging.getLogger("devfest.announcements")

PUSH_TOPIC = "announcements"
PUSH_TITLE = "New announcement"
PUSH_BODY_LENGTH = 120


def get_announcements():
    """Public announcements payload, newest first."""
    return cached_page(
        PATH_HOME,
        lambda: list(AnnouncementSerializer(Announcement.objects.order_by("-created_at", "-id"), many=True).data),
    )


def push_message(announcement: Announcement) -> dict:
    body = announcement.content
    if len(body) > PUSH_BODY_LENGTH:
        body = body[:PUSH_BODY_LENGTH - 3].rstrip() + "..."
    return {"title": PUSH_TITLE, "body": body, "link": "/"}


def manage_announcement(payload, actor, announcement_id=None) -> Announcement:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(AnnouncementInputSerializer, payload)
    content = sanitize_text(data["content"])

    if announcement_id is None:
        with transaction.atomic():
            announcement = Announcement.objects.create(content=content)
            message = push_message(announcement)
            transaction.on_commit(lambda: dispatch_topic_push(PUSH_TOPIC, message))
        logger.info(f"Announcement created: announcement={announcement.id}, actor={actor.uid}")
    else:
        try:
            announcement = Announcement.objects.get(pk=announcement_id)
        except Announcement.DoesNotExist:
            raise NotFoundError("Announcement not found.")
        announcement.content = content
        announcement.save(update_fields=["content"])

    revalidate_path(PATH_HOME, PATH_ADMIN)
    return announcement


def delete_announcement(announcement_id, actor) -> None:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    deleted, _ = Announcement.objects.filter(pk=announcement_id).delete()
    if not deleted:
        raise NotFoundError("Announcement not found.")

    revalidate_path(PATH_HOME, PATH_ADMIN)


def subscribe(payload) -> Subscription:
    """Public newsletter sign-up. One subscription per email address."""
    data = validate_payload(SubscribeInputSerializer, payload)
    email = normalize_email(data["email"])

    if Subscription.objects.filter(email=email).exists():
        raise ConflictError("This email is already subscribed.")
    try:
        with transaction.atomic():
            subscription = Subscription.objects.create(email=email)
    except IntegrityError:
        raise ConflictError("This email is already subscribed.")

    logger.info(f"Newsletter subscription: id={subscription.id}")
    return subscription
