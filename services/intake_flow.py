"""
Intake wizard orchestration.

Screens run in a fixed order:

    PATIENT_DETAILS -> PROGRAM_ENROLLMENT -> LOGGED_OUT

IntakeState is the only mutable state; Streamlit keeps one per login in
st.session_state and a new IntakeFlow is built around it on every rerun.

Database failures are logged and swallowed here (the method returns None or
False and the screen stays put). Validation, conflict and not-found errors
are raised to the page so it can show them.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.config import ENROLLMENT_PORTAL_URL
from core.database import get_db_context
from core.errors import RemoteError
from services import clinic_service, drug_service, enrollment_service, provider_service
from services.drug_service import DrugPricing
from services.enrollment_service import EnrollmentStatus

logger = logging.getLogger(__name__)

_STORE_ERRORS = (RemoteError, SQLAlchemyError)


class IntakeScreen(str, Enum):
    PATIENT_DETAILS = "patient_details"
    PROGRAM_ENROLLMENT = "program_enrollment"
    LOGGED_OUT = "logged_out"


@dataclass
class IntakeState:
    user_id: Optional[int] = None
    screen: IntakeScreen = IntakeScreen.PATIENT_DETAILS
    pricing: Optional[DrugPricing] = None
    selected_program_id: Optional[int] = None
    # Status chosen from "Update Status" that still needs a date
    pending_status: Optional[EnrollmentStatus] = None


@dataclass(frozen=True)
class CatalogOptions:
    """Catalog rows (alphabetical) plus the ids the user is linked to."""

    items: list
    member_ids: set

    def members(self):
        return [item for item in self.items if item.id in self.member_ids]

    def non_members(self):
        return [item for item in self.items if item.id not in self.member_ids]


class IntakeFlow:
    def __init__(self, state: IntakeState, session_factory=get_db_context, portal: Optional[Callable[[str], None]] = None):
        self.state = state
        self.session_factory = session_factory
        self.portal = portal

    @property
    def has_user(self) -> bool:
        return bool(self.state.user_id)

    def _run(self, action: str, fn, default=None):
        """Run fn(db) in a fresh session; store failures are logged and return default."""
        if not self.has_user:
            return default
        try:
            with self.session_factory() as db:
                return fn(db)
        except _STORE_ERRORS:
            logger.exception("Intake step failed: %s (user=%s)", action, self.state.user_id)
            return default

    # ------------------------------------------
    # Patient details: clinics
    # ------------------------------------------
    def clinic_options(self) -> CatalogOptions:
        def load(db):
            return CatalogOptions(
                items=clinic_service.get_all_clinics(db),
                member_ids=clinic_service.get_user_clinics(db, self.state.user_id),
            )

        return self._run("load clinics", load, default=CatalogOptions([], set()))

    def add_clinic(self, clinic_id) -> bool:
        return self._run(
            "add clinic",
            lambda db: clinic_service.add_clinic_to_user(db, self.state.user_id, clinic_id),
            default=False,
        )

    def remove_clinic(self, clinic_id) -> bool:
        return self._run(
            "remove clinic",
            lambda db: clinic_service.remove_clinic_from_user(db, self.state.user_id, clinic_id),
            default=False,
        )

    def create_clinic(self, name: str):
        return self._run(
            "create clinic",
            lambda db: clinic_service.create_and_add_clinic(db, self.state.user_id, name),
        )

    # ------------------------------------------
    # Patient details: providers
    # ------------------------------------------
    def provider_options(self) -> CatalogOptions:
        def load(db):
            return CatalogOptions(
                items=provider_service.get_all_providers(db),
                member_ids=provider_service.get_user_providers(db, self.state.user_id),
            )

        return self._run("load providers", load, default=CatalogOptions([], set()))

    def provider_details(self, provider_id):
        return self._run(
            "load provider details",
            lambda db: provider_service.get_provider_details(db, provider_id),
        )

    def add_provider(self, provider_id) -> bool:
        return self._run(
            "add provider",
            lambda db: provider_service.add_provider_to_user(db, self.state.user_id, provider_id),
            default=False,
        )

    def remove_provider(self, provider_id) -> bool:
        return self._run(
            "remove provider",
            lambda db: provider_service.remove_provider_from_user(db, self.state.user_id, provider_id),
            default=False,
        )

    def create_provider(self, name: str):
        return self._run(
            "create provider",
            lambda db: provider_service.create_and_add_provider(db, self.state.user_id, name),
        )

    # ------------------------------------------
    # Patient details: drug + advance
    # ------------------------------------------
    def preview_pricing(self, drug_name: str) -> Optional[DrugPricing]:
        """Pricing shown while typing; nothing is saved."""
        if not (drug_name or "").strip():
            return None
        return drug_service.get_drug_pricing(drug_name.strip())

    def submit_patient_details(self, drug_name: str) -> Optional[DrugPricing]:
        """Save the drug and remember its pricing.

        Clinics and providers are not checked; a patient may continue with
        none selected.
        """
        pricing = self._run(
            "save drug details",
            lambda db: drug_service.save_drug_with_pricing(db, self.state.user_id, drug_name),
        )
        if pricing is not None:
            self.state.pricing = pricing
        return pricing

    def advance(self) -> IntakeScreen:
        if self.state.screen is IntakeScreen.PATIENT_DETAILS and self.state.pricing is not None:
            self.state.screen = IntakeScreen.PROGRAM_ENROLLMENT
        return self.state.screen

    # ------------------------------------------
    # Program enrollment
    # ------------------------------------------
    def programs(self) -> list:
        return self._run("load programs", enrollment_service.get_all_programs, default=[])

    def enrollments(self) -> dict:
        """program_id -> Enrollment for the current user."""
        rows = self._run(
            "load enrollments",
            lambda db: enrollment_service.get_user_enrollments(db, self.state.user_id),
            default=[],
        )
        return {row.program_id: row for row in rows}

    def select_program(self, program_id):
        if program_id != self.state.selected_program_id:
            self.state.pending_status = None
        self.state.selected_program_id = program_id

    def enroll(self, program_id):
        """Enroll, then open the external portal.

        The page ends the session ENROLL_LOGOUT_SECONDS later.
        """
        enrollment = self._run(
            "enroll",
            lambda db: enrollment_service.enroll(db, self.state.user_id, program_id),
        )
        if enrollment is None:
            return None

        if self.portal is not None:
            try:
                self.portal(ENROLLMENT_PORTAL_URL)
            except Exception:
                logger.exception("Could not open enrollment portal")
        return enrollment

    def request_status(self, program_id, status):
        """Apply a status picked from "Update Status".

        'completed' only records the intent; submit_completion() applies it
        once a date is chosen.
        """
        status = enrollment_service.coerce_status(status)
        self.select_program(program_id)
        if status is EnrollmentStatus.COMPLETED:
            self.state.pending_status = status
            return None

        self.state.pending_status = None
        return self._run(
            "update enrollment status",
            lambda db: enrollment_service.set_status(db, self.state.user_id, program_id, status),
        )

    def submit_completion(self, completion_date: date | str, program_id=None):
        """Record the completion date.

        With a pending "completed" intent the existing enrollment is updated;
        without one the program is quick-completed, creating the row if needed.
        """
        program_id = program_id if program_id is not None else self.state.selected_program_id
        if program_id is None:
            return None

        if self.state.pending_status is EnrollmentStatus.COMPLETED:
            def apply(db):
                return enrollment_service.set_status(
                    db, self.state.user_id, program_id, EnrollmentStatus.COMPLETED, completion_date
                )
        else:
            def apply(db):
                return enrollment_service.complete_on(db, self.state.user_id, program_id, completion_date)

        enrollment = self._run("record completion", apply)
        if enrollment is not None:
            self.state.pending_status = None
        return enrollment

    def logout(self) -> IntakeScreen:
        self.state.screen = IntakeScreen.LOGGED_OUT
        self.state.user_id = None
        self.state.pricing = None
        self.state.selected_program_id = None
        self.state.pending_status = None
        return self.state.screen
