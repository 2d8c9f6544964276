# jobs/services.py
"""
Job catalog and the application workflow.

Submissions are serialized per job: the job row is locked, the duplicate
check and the insert run in the same transaction, and the
(user_id, job) unique constraint settles any race that slips through.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from authx.identity import IdentityProviderUnavailable, UserNotFound, get_identity_provider
from core.exceptions import (
    AuthenticationError,
    BackendPreconditionError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from core.indexes import require_index
from core.policies import (
    AuthorizationPolicy,
    MANAGE_CATALOG,
    SUBMIT_APPLICATION,
    UPDATE_APPLICATION_STATUS,
    VIEW_APPLICATIONS,
)
from core.revalidation import PATH_ADMIN, PATH_VOLUNTEER, cached_page, revalidate_path
from core.sanitizers import sanitize_text
from core.validation import validate_payload
from . import state_machine
from .models import Job, Application
from .serializers import (
    FILTER_ALL,
    ApplicationInputSerializer,
    ApplicationQuerySerializer,
    ApplicationStatusSerializer,
    JobInputSerializer,
    JobSerializer,
)

logger = logging.getLogger("devfest.jobs")

ALREADY_APPLIED = "You have already applied for this position."
JOB_CLOSED = "This position is no longer open for applications."


# ─────────────────────────────────────────────────────────────
# Job catalog
# ─────────────────────────────────────────────────────────────

def list_jobs():
    """Public job board payload, ordered by title."""
    return cached_page(
        PATH_VOLUNTEER,
        lambda: list(JobSerializer(Job.objects.order_by("title", "id"), many=True).data),
    )


def _get_job(job_id, lock=False) -> Job:
    qs = Job.objects.select_for_update() if lock else Job.objects.all()
    try:
        return qs.get(pk=job_id)
    except Job.DoesNotExist:
        raise NotFoundError("Job not found.")


def manage_job(payload, actor, job_id=None) -> Job:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)
    data = validate_payload(JobInputSerializer, payload)

    fields = {
        "title": sanitize_text(data["title"], max_length=255),
        "description": sanitize_text(data["description"]),
        "category": data["category"],
        "additional_questions": data["additional_questions"],
    }
    if "status" in data:
        fields["status"] = data["status"]

    if job_id is None:
        job = Job.objects.create(**fields)
        logger.info(f"Job created: job={job.id}, actor={actor.uid}")
    else:
        job = _get_job(job_id)
        for name, value in fields.items():
            setattr(job, name, value)
        job.save(update_fields=list(fields))
        logger.info(f"Job updated: job={job.id}, actor={actor.uid}")

    revalidate_path(PATH_VOLUNTEER, PATH_ADMIN)
    return job


def delete_job(job_id, actor) -> None:
    """Delete a job. Its applications are kept."""
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    deleted, _ = Job.objects.filter(pk=job_id).delete()
    if not deleted:
        raise NotFoundError("Job not found.")

    logger.info(f"Job deleted: job={job_id}, actor={actor.uid}")
    revalidate_path(PATH_VOLUNTEER, PATH_ADMIN)


def toggle_job_status(job_id, actor) -> Job:
    AuthorizationPolicy.require(actor, MANAGE_CATALOG)

    with transaction.atomic():
        job = _get_job(job_id, lock=True)
        job.status = Job.STATUS_CLOSED if job.is_open else Job.STATUS_OPEN
        job.save(update_fields=["status"])

    logger.info(f"Job status toggled: job={job.id}, status={job.status}, actor={actor.uid}")
    revalidate_path(PATH_VOLUNTEER, PATH_ADMIN)
    return job


# ─────────────────────────────────────────────────────────────
# Applications
# ─────────────────────────────────────────────────────────────

def _verified_email(identity) -> str:
    """The applicant's email as the identity provider knows it, never the client's."""
    try:
        user = get_identity_provider().get_user(identity.uid)
    except (UserNotFound, IdentityProviderUnavailable) as exc:
        logger.warning(f"Could not resolve email for uid={identity.uid}: {exc}")
        return identity.email or ""
    return user.get("email") or identity.email or ""


def _clean_answers(answers: dict, job: Job) -> dict:
    questions = set(job.additional_questions or [])
    unknown = sorted(set(answers) - questions)
    if unknown:
        raise ValidationError(
            details={"answers": [f"Unknown question: {key}" for key in unknown]}
        )
    return {question: sanitize_text(answer) for question, answer in answers.items()}


def submit_application(payload, actor) -> Application:
    if actor is None:
        raise AuthenticationError("You must be signed in to apply.")
    AuthorizationPolicy.require(actor, SUBMIT_APPLICATION)

    data = validate_payload(ApplicationInputSerializer, payload)
    email = _verified_email(actor)

    try:
        with transaction.atomic():
            job = _get_job(data["job_id"], lock=True)
            if not job.is_open:
                raise ConflictError(JOB_CLOSED)

            if Application.objects.filter(user_id=actor.uid, job=job).exists():
                raise ConflictError(ALREADY_APPLIED)

            application = Application.objects.create(
                job=job,
                job_title=job.title,
                user_id=actor.uid,
                user_email=email,
                full_name=sanitize_text(data["full_name"], max_length=255),
                phone=sanitize_text(data["phone"], max_length=32),
                whatsapp=sanitize_text(data["whatsapp"], max_length=32),
                answers=_clean_answers(data["answers"], job),
                status=Application.STATUS_APPLIED,
            )
    except IntegrityError:
        raise ConflictError(ALREADY_APPLIED)

    logger.info(f"Application submitted: application={application.id}, job={job.id}, user={actor.uid}")
    revalidate_path(PATH_ADMIN)
    return application


def get_applications(params, actor) -> dict:
    """
    One page of applications, newest first.

    ``params``: status, job_title ("All" means unfiltered), start_after
    (id of the last application of the previous page), limit.
    Returns ``{"applications": [...], "next_cursor": id | None}``.
    """
    AuthorizationPolicy.require(actor, VIEW_APPLICATIONS)
    data = validate_payload(ApplicationQuerySerializer, params)
    limit = data.get("limit") or settings.APPLICATIONS_PAGE_SIZE

    filters = {}
    if data["status"] != FILTER_ALL:
        filters["status"] = data["status"]
    if data["job_title"] != FILTER_ALL:
        filters["job_title"] = data["job_title"]

    require_index(Application, filters.keys(), "-submitted_at")

    try:
        qs = Application.objects.filter(**filters).order_by("-submitted_at", "-id")

        if data["start_after"] is not None:
            try:
                cursor = Application.objects.only("id", "submitted_at").get(pk=data["start_after"])
            except Application.DoesNotExist:
                raise NotFoundError("Pagination cursor not found.")
            qs = qs.filter(
                Q(submitted_at__lt=cursor.submitted_at)
                | Q(submitted_at=cursor.submitted_at, id__lt=cursor.id)
            )

        applications = list(qs[:limit])
    except DatabaseError as exc:
        raise BackendPreconditionError(f"Applications query failed: {exc}") from exc

    next_cursor = applications[-1].id if len(applications) == limit else None
    return {"applications": applications, "next_cursor": next_cursor}


def update_application_status(application_id, payload, actor) -> Application:
    AuthorizationPolicy.require(actor, UPDATE_APPLICATION_STATUS)
    data = validate_payload(ApplicationStatusSerializer, payload)

    with transaction.atomic():
        try:
            application = Application.objects.select_for_update().get(pk=application_id)
        except Application.DoesNotExist:
            raise NotFoundError("Application not found.")

        state_machine.transition(application, data["status"], actor=actor)

    revalidate_path(PATH_ADMIN)
    return application
