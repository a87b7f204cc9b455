"""
Program catalog and enrollment lifecycle.

One enrollment row per (user, program):

    (none) --enroll--> enrolled --set_status--> ongoing | completed | rejected
    (none) --complete_on--> completed

Once a row exists any status may replace any other (completed -> ongoing is
allowed). "completed" always carries a completion date. Every write
refreshes updated_at.
"""

import logging
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import ConflictError, NotFoundError, RemoteError, ValidationError
from core.time_utils import now_utc, parse_iso_date
from models.program import Enrollment, Program

logger = logging.getLogger(__name__)


class EnrollmentStatus(str, Enum):
    ENROLLED = "enrolled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    REJECTED = "rejected"


# Statuses a patient can pick from "Update Status"
STATUS_CHOICES = [EnrollmentStatus.ONGOING, EnrollmentStatus.COMPLETED, EnrollmentStatus.REJECTED]


def coerce_status(status) -> EnrollmentStatus:
    try:
        return EnrollmentStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown enrollment status: {status!r}") from None


def _coerce_completion_date(value):
    try:
        completion_date = parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Completion date must be YYYY-MM-DD, got {value!r}") from None
    if completion_date is None:
        raise ValidationError("A completion date is required to mark a program completed.")
    return completion_date


def _commit(db: Session, enrollment: Enrollment, action: str) -> Enrollment:
    try:
        db.add(enrollment)
        db.commit()
        db.refresh(enrollment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s (user=%s program=%s)", action, enrollment.user_id, enrollment.program_id)
        raise RemoteError(f"Could not {action}") from exc
    return enrollment


def _read_failed(db: Session, action: str) -> RemoteError:
    db.rollback()
    logger.exception("Failed to %s", action)
    return RemoteError(f"Could not {action}")


# ------------------------------------------
# Programs
# ------------------------------------------
def get_all_programs(db: Session):
    try:
        return db.query(Program).order_by(Program.name).all()
    except SQLAlchemyError as exc:
        raise _read_failed(db, "load programs") from exc


def get_program(db: Session, program_id):
    try:
        return db.query(Program).filter(Program.id == program_id).first()
    except SQLAlchemyError as exc:
        raise _read_failed(db, "load program") from exc


# ------------------------------------------
# Enrollments
# ------------------------------------------
def get_user_enrollments(db: Session, user_id):
    if not user_id:
        return []
    try:
        return db.query(Enrollment).filter(Enrollment.user_id == user_id).all()
    except SQLAlchemyError as exc:
        raise _read_failed(db, "load enrollments") from exc


def get_enrollment(db: Session, user_id, program_id):
    try:
        return (
            db.query(Enrollment)
            .filter(Enrollment.user_id == user_id, Enrollment.program_id == program_id)
            .first()
        )
    except SQLAlchemyError as exc:
        raise _read_failed(db, "load enrollment") from exc


def enroll(db: Session, user_id, program_id) -> Enrollment:
    """Create the enrollment with status 'enrolled'.

    Raises ConflictError if the user already has a row for this program.
    """
    if get_program(db, program_id) is None:
        raise NotFoundError(f"Program {program_id} not found")
    if get_enrollment(db, user_id, program_id) is not None:
        raise ConflictError("You are already enrolled in this program.")

    enrollment = Enrollment(
        user_id=user_id,
        program_id=program_id,
        status=EnrollmentStatus.ENROLLED.value,
        updated_at=now_utc(),
    )
    _commit(db, enrollment, "enroll")
    logger.info("User %s enrolled in program %s", user_id, program_id)
    return enrollment


def set_status(db: Session, user_id, program_id, status, completion_date=None) -> Enrollment:
    """Overwrite the status of an existing enrollment.

    'completed' needs completion_date (date or 'YYYY-MM-DD').
    """
    status = coerce_status(status)

    enrollment = get_enrollment(db, user_id, program_id)
    if enrollment is None:
        raise NotFoundError("No enrollment found for this program.")

    if status is EnrollmentStatus.COMPLETED:
        enrollment.completion_date = _coerce_completion_date(completion_date)

    enrollment.status = status.value
    enrollment.updated_at = now_utc()
    _commit(db, enrollment, "update enrollment status")
    logger.info("User %s set program %s to %s", user_id, program_id, status.value)
    return enrollment


def complete_on(db: Session, user_id, program_id, completion_date) -> Enrollment:
    """Mark the program completed on the given date.

    Unlike set_status, creates the enrollment when none exists.
    """
    completion_date = _coerce_completion_date(completion_date)

    enrollment = get_enrollment(db, user_id, program_id)
    if enrollment is None:
        if get_program(db, program_id) is None:
            raise NotFoundError(f"Program {program_id} not found")
        enrollment = Enrollment(user_id=user_id, program_id=program_id)

    enrollment.status = EnrollmentStatus.COMPLETED.value
    enrollment.completion_date = completion_date
    enrollment.updated_at = now_utc()
    _commit(db, enrollment, "complete enrollment")
    logger.info("User %s completed program %s on %s", user_id, program_id, completion_date)
    return enrollment


def status_label(enrollment) -> str:
    """Human label for an enrollment's status; legacy null rows show as ''."""
    if enrollment is None or not enrollment.status:
        return ""
    return enrollment.status.capitalize()
