# agenda/services.py
import logging

from django.db import transaction

from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.policies import AuthorizationPolicy, MANAGE_CATALOG
from core.revalidation import PATH_ADMIN, PATH_AGENDA, PATH_HOME, cached_page, revalidate_path
from core.sanitizers import sanitize_text
from core.validation import validate_payload
from .models import AgendaTrack, AgendaItem
from .serializers import (
    AgendaItemInputSerializer,
    AgendaItemSerializer,
    AgendaTrackInputSerializer,
    AgendaTrackSerializer,
)

logger = logging.getLogger("devfest.agenda")


def get_agenda():
    """Public agenda payload, ordered by start time."""
    return cached_page(
        PATH_AGENDA,
        lambda: list(AgendaItemSerializer(AgendaItem.objects.order_by("start_time", "id"), many=True).data),
    )


def get_agenda_tracks():
    return list(AgendaTrackSerializer(AgendaTrack.objects.order_by("name"), many=True).data)


def _get_track(track_id, lock=False) -> AgendaTrack:
    qs = AgendaTrack.objects.select_for_update() if lock else AgendaTrack.objects.all()
    try:
        return qs.get(pk=track_id)
    except AgendaTrack.DoesNotExist:
        raise NotFoundError("Track not found.")


def manage_agenda_track(payload, actor, track_id=None) -> AgendaTrack:
    """
    Create or rename a track. A rename rewrites ``track_name`` on every
    item of the track in the same transaction.
    """
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(AgendaTrackInputSerializer, payload)
    name = sanitize_text(data["name"], max_length=120)
    if not name:
        raise ValidationError(details={"name": ["Track name is required."]})

    if track_id is None:
        track = AgendaTrack.objects.create(name=name)
        logger.info(f"Agenda track created: track={track.id}, actor={actor.uid}")
    else:
        with transaction.atomic():
            track = _get_track(track_id, lock=True)
            track.name = name
            track.save(update_fields=["name"])
            updated = AgendaItem.objects.filter(track=track).update(track_name=name)
        logger.info(f"Agenda track renamed: track={track.id}, items={updated}, actor={actor.uid}")

    revalidate_path(PATH_AGENDA, PATH_ADMIN)
    return track


def delete_agenda_track(track_id, actor) -> None:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    with transaction.atomic():
        track = _get_track(track_id, lock=True)
        in_use = AgendaItem.objects.filter(track=track).count()
        if in_use:
            raise ConflictError(
                f"Track '{track.name}' is used by {in_use} agenda item(s). Reassign or delete them first."
            )
        track.delete()

    logger.info(f"Agenda track deleted: track={track_id}, actor={actor.uid}")
    revalidate_path(PATH_AGENDA, PATH_ADMIN)


def manage_agenda_item(payload, actor, item_id=None) -> AgendaItem:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(AgendaItemInputSerializer, payload)

    with transaction.atomic():
        track = _get_track(data["track_id"])
        fields = {
            "title": sanitize_text(data["title"], max_length=255),
            "speaker": sanitize_text(data["speaker"], max_length=255),
            "description": sanitize_text(data["description"]),
            "track": track,
            "track_name": track.name,
            "start_time": data["start_time"],
            "end_time": data["end_time"],
            "category": data["category"],
        }

        if item_id is None:
            item = AgendaItem.objects.create(**fields)
        else:
            try:
                item = AgendaItem.objects.select_for_update().get(pk=item_id)
            except AgendaItem.DoesNotExist:
                raise NotFoundError("Agenda item not found.")
            for name, value in fields.items():
                setattr(item, name, value)
            item.save()

    revalidate_path(PATH_AGENDA, PATH_HOME, PATH_ADMIN)
    return item


def delete_agenda_item(item_id, actor) -> None:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    deleted, _ = AgendaItem.objects.filter(pk=item_id).delete()
    if not deleted:
        raise NotFoundError("Agenda item not found.")

    revalidate_path(PATH_AGENDA, PATH_HOME, PATH_ADMIN)
