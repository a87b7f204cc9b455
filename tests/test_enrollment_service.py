"""
Tests for the enrollment lifecycle.
"""
from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.errors import ConflictError, NotFoundError, RemoteError, ValidationError
from models import Enrollment
from services import enrollment_service
from services.enrollment_service import EnrollmentStatus


def _count(db, user, program):
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user.id, Enrollment.program_id == program.id)
        .count()
    )


class TestPrograms:
    def test_programs_sorted_by_name(self, seeded_db):
        names = [p.name for p in enrollment_service.get_all_programs(seeded_db)]
        assert names == sorted(names)
        assert len(names) == 3

    def test_get_program(self, seeded_db, program):
        assert enrollment_service.get_program(seeded_db, program.id).name == program.name
        assert enrollment_service.get_program(seeded_db, 999) is None

    def test_read_failure_becomes_remote_error(self, seeded_db, user, program):
        down = OperationalError("SELECT", {}, Exception("down"))
        with patch.object(seeded_db, "query", side_effect=down):
            with pytest.raises(RemoteError):
                enrollment_service.get_all_programs(seeded_db)
            with pytest.raises(RemoteError):
                enrollment_service.get_program(seeded_db, program.id)
            with pytest.raises(RemoteError):
                enrollment_service.get_user_enrollments(seeded_db, user.id)
            with pytest.raises(RemoteError):
                enrollment_service.enroll(seeded_db, user.id, program.id)
        assert _count(seeded_db, user, program) == 0


class TestEnroll:
    def test_enroll_creates_enrolled_row(self, seeded_db, user, program):
        enrollment = enrollment_service.enroll(seeded_db, user.id, program.id)
        assert enrollment.status == "enrolled"
        assert enrollment.completion_date is None
        assert enrollment.updated_at is not None

    def test_second_enroll_conflicts(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        with pytest.raises(ConflictError):
            enrollment_service.enroll(seeded_db, user.id, program.id)
        assert _count(seeded_db, user, program) == 1

    def test_enroll_unknown_program(self, seeded_db, user):
        with pytest.raises(NotFoundError):
            enrollment_service.enroll(seeded_db, user.id, 999)

    def test_users_enroll_independently(self, seeded_db, user, other_user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        enrollment_service.enroll(seeded_db, other_user.id, program.id)
        assert len(enrollment_service.get_user_enrollments(seeded_db, user.id)) == 1
        assert len(enrollment_service.get_user_enrollments(seeded_db, other_user.id)) == 1


class TestSetStatus:
    def test_requires_existing_enrollment(self, seeded_db, user, program):
        with pytest.raises(NotFoundError):
            enrollment_service.set_status(seeded_db, user.id, program.id, "completed", date(2024, 5, 1))
        assert _count(seeded_db, user, program) == 0

    @pytest.mark.parametrize("status", ["ongoing", "rejected", EnrollmentStatus.ONGOING])
    def test_simple_transitions(self, seeded_db, user, program, status):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        updated = enrollment_service.set_status(seeded_db, user.id, program.id, status)
        assert updated.status == EnrollmentStatus(status).value

    def test_rejected_is_stored_literally(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        enrollment_service.set_status(seeded_db, user.id, program.id, "rejected")
        row = enrollment_service.get_enrollment(seeded_db, user.id, program.id)
        assert row.status == "rejected"

    def test_completed_requires_date(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        with pytest.raises(ValidationError):
            enrollment_service.set_status(seeded_db, user.id, program.id, "completed")
        with pytest.raises(ValidationError):
            enrollment_service.set_status(seeded_db, user.id, program.id, "completed", "")
        assert enrollment_service.get_enrollment(seeded_db, user.id, program.id).status == "enrolled"

    def test_completed_with_iso_string(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        updated = enrollment_service.set_status(seeded_db, user.id, program.id, "completed", "2024-06-30")
        assert updated.status == "completed"
        assert updated.completion_date == date(2024, 6, 30)

    def test_bad_date_rejected(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        with pytest.raises(ValidationError):
            enrollment_service.set_status(seeded_db, user.id, program.id, "completed", "30/06/2024")

    def test_unknown_status_rejected(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        with pytest.raises(ValidationError):
            enrollment_service.set_status(seeded_db, user.id, program.id, "paused")

    def test_completed_can_go_back_to_ongoing(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        enrollment_service.set_status(seeded_db, user.id, program.id, "completed", date(2024, 1, 2))
        updated = enrollment_service.set_status(seeded_db, user.id, program.id, "ongoing")
        assert updated.status == "ongoing"

    def test_updated_at_moves_forward(self, seeded_db, user, program):
        first = enrollment_service.enroll(seeded_db, user.id, program.id)
        stale = datetime(2000, 1, 1)
        first.updated_at = stale
        seeded_db.commit()

        updated = enrollment_service.set_status(seeded_db, user.id, program.id, "ongoing")
        assert updated.updated_at.replace(tzinfo=None) > stale


class TestCompleteOn:
    def test_creates_row_when_absent(self, seeded_db, user, program):
        enrollment = enrollment_service.complete_on(seeded_db, user.id, program.id, date(2024, 3, 15))
        assert enrollment.status == "completed"
        assert enrollment.completion_date == date(2024, 3, 15)
        assert _count(seeded_db, user, program) == 1

    def test_updates_existing_row(self, seeded_db, user, program):
        enrollment_service.enroll(seeded_db, user.id, program.id)
        enrollment_service.complete_on(seeded_db, user.id, program.id, "2024-03-15")
        enrollment_service.complete_on(seeded_db, user.id, program.id, date(2024, 3, 15) + timedelta(days=1))
        assert _count(seeded_db, user, program) == 1
        row = enrollment_service.get_enrollment(seeded_db, user.id, program.id)
        assert row.completion_date == date(2024, 3, 16)

    def test_requires_date(self, seeded_db, user, program):
        with pytest.raises(ValidationError):
            enrollment_service.complete_on(seeded_db, user.id, program.id, None)
        assert _count(seeded_db, user, program) == 0

    def test_enroll_after_complete_conflicts(self, seeded_db, user, program):
        enrollment_service.complete_on(seeded_db, user.id, program.id, "2024-03-15")
        with pytest.raises(ConflictError):
            enrollment_service.enroll(seeded_db, user.id, program.id)


class TestStatusLabel:
    def test_labels(self, seeded_db, user, program):
        assert enrollment_service.status_label(None) == ""
        enrollment = enrollment_service.enroll(seeded_db, user.id, program.id)
        assert enrollment_service.status_label(enrollment) == "Enrolled"

    def test_legacy_null_status(self):
        assert enrollment_service.status_label(Enrollment(status=None)) == ""
