import logging

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from core.errors import IntakeError
from core.helpers import hide_sidebar_completely
from core.logging_config import configure_logging
from core.session_manager import init_session_state, get_intake_state, login, logout
from core.setup_db import init_db
from services.intake_flow import IntakeScreen
from services.user_service import authenticate_user, create_user

logger = logging.getLogger(__name__)

SCREEN_PAGES = {
    IntakeScreen.PATIENT_DETAILS: "pages/1_Patient_Details.py",
    IntakeScreen.PROGRAM_ENROLLMENT: "pages/2_Program_Enrollment.py",
}


def go_to(page_path: str):
    st.switch_page(page_path)


def main():
    st.set_page_config(
        page_title="Patient Intake",
        page_icon="💊",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    configure_logging()
    init_session_state()

    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("Database initialisation failed")

    user = st.session_state.get("user")

    if user is not None:
        state = get_intake_state()
        page = SCREEN_PAGES.get(state.screen)
        if page is None:
            logout()
        go_to(page)

    hide_sidebar_completely()
    st.title("Patient Intake")

    login_tab, signup_tab = st.tabs(["Log in", "Sign up"])

    with login_tab:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login")

        if submitted:
            try:
                found = authenticate_user(username, password)
            except IntakeError:
                st.error("Login is unavailable right now. Please try again.")
            else:
                if found:
                    login(found)
                    st.query_params.clear()
                    go_to(SCREEN_PAGES[IntakeScreen.PATIENT_DETAILS])
                else:
                    st.error("Invalid credentials. Try again.")

    with signup_tab:
        su_user = st.text_input("Username", key="su_user")
        su_name = st.text_input("Full Name (optional)", key="su_name")
        su_pass = st.text_input("Password", type="password", key="su_pass")
        su_pass2 = st.text_input("Confirm Password", type="password", key="su_pass2")
        if st.button("Create Account", key="btn_signup"):
            if su_pass != su_pass2:
                st.error("Passwords do not match.")
            else:
                try:
                    new_user = create_user(su_user, su_pass, full_name=su_name)
                except IntakeError as e:
                    st.error(str(e))
                else:
                    login(new_user)
                    st.success("Account created and logged in!")
                    go_to(SCREEN_PAGES[IntakeScreen.PATIENT_DETAILS])


if __name__ == "__main__":
    main()
