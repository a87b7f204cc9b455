import time

import streamlit as st

from core.config import ENROLL_LOGOUT_SECONDS
from core.errors import IntakeError
from core.helpers import open_enrollment_portal, render_intake_sidebar
from core.logging_config import configure_logging
from core.session_manager import require_login, get_intake_state, logout
from services.enrollment_service import EnrollmentStatus, STATUS_CHOICES, status_label
from services.intake_flow import IntakeFlow, IntakeScreen

# Page config is set globally in app.py

configure_logging()
require_login()
render_intake_sidebar()

state = get_intake_state()
if state.screen is IntakeScreen.PATIENT_DETAILS:
    st.switch_page("pages/1_Patient_Details.py")

flow = IntakeFlow(state, portal=open_enrollment_portal)

cols = st.columns([4, 1])
with cols[0]:
    st.title("Program Enrollment")
with cols[1]:
    if st.button("Logout"):
        flow.logout()
        logout()

programs = flow.programs()
if not programs:
    st.info("No assistance programs are available right now.")
    st.stop()

names = {p.id: p.name for p in programs}
program_id = st.selectbox(
    "Select Program",
    list(names),
    index=None,
    format_func=names.get,
    placeholder="Choose a program...",
)

if program_id is None:
    st.stop()

flow.select_program(program_id)
program = next(p for p in programs if p.id == program_id)
enrollment = flow.enrollments().get(program_id)

with st.container(border=True):
    st.subheader(program.name)
    st.write(f"**Sponsor:** {program.sponsor or '—'}")
    st.write(f"**Monetary Cap:** {program.monetary_cap or '—'}")
    st.write(f"**Description:** {program.description or '—'}")
    if program.enrollment_link:
        st.markdown(f"**Enrollment Link:** [{program.enrollment_link}]({program.enrollment_link})")


def completion_form(form_key: str):
    with st.form(form_key):
        completion_date = st.date_input("Completion Date", value=None)
        submitted = st.form_submit_button("Submit", type="primary")
    if submitted:
        try:
            saved = flow.submit_completion(completion_date, program_id=program_id)
        except IntakeError as e:
            st.error(str(e))
        else:
            if saved is not None:
                st.rerun()


if enrollment is None:
    # Not enrolled yet: enroll through the portal, or record a completed program directly
    if st.checkbox("Enroll Now", key=f"enroll_now_{program_id}"):
        if st.button("Proceed to Enrollment", type="primary"):
            try:
                enrolled = flow.enroll(program_id)
            except IntakeError as e:
                st.error(str(e))
            else:
                if enrolled is not None:
                    st.success("Enrollment recorded. Continue registration in the portal window.")
                    time.sleep(ENROLL_LOGOUT_SECONDS)
                    flow.logout()
                    logout()

    if st.checkbox("Completed", key=f"completed_{program_id}"):
        completion_form(f"quick_complete_{program_id}")
else:
    label = status_label(enrollment)
    st.success("You are enrolled in this program")
    if label:
        st.caption(f"Status: {label}")
    if enrollment.completion_date:
        st.caption(f"Completed on {enrollment.completion_date.isoformat()}")

    st.write("**Update Status:**")
    for status in STATUS_CHOICES:
        if st.button(status.value.capitalize(), key=f"status_{status.value}_{program_id}", use_container_width=True):
            try:
                updated = flow.request_status(program_id, status)
            except IntakeError as e:
                st.error(str(e))
            else:
                if updated is not None:
                    st.rerun()

    if state.pending_status is EnrollmentStatus.COMPLETED:
        completion_form(f"complete_{program_id}")
