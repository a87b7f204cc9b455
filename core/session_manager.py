import streamlit as st

from services.intake_flow import IntakeState


def init_session_state():
    """Ensure required session keys exist."""
    if "user" not in st.session_state:
        st.session_state.user = None
    if "intake" not in st.session_state:
        st.session_state.intake = None


def login(user):
    """Persist logged-in user and start a fresh intake for them."""
    st.session_state.user = user
    st.session_state.intake = IntakeState(user_id=user.id)


def get_intake_state() -> IntakeState:
    """Return the intake state for the current login, recreating it if lost."""
    init_session_state()
    state = st.session_state.intake
    user = st.session_state.user
    if state is None or (user is not None and state.user_id != user.id):
        state = IntakeState(user_id=user.id if user is not None else None)
        st.session_state.intake = state
    return state


def clear_session():
    """Clear session without redirect."""
    st.session_state.pop("user", None)
    st.session_state.pop("intake", None)


def logout():
    """Clear session and redirect to main app page."""
    clear_session()

    # Clear query parameters
    st.query_params.clear()

    # Redirect to main page
    st.switch_page("app.py")


def require_login():
    """Restrict page to logged-in users; send everyone else to app.py."""
    init_session_state()

    if st.session_state.user is None:
        st.warning("Please log in to access this page.")
        st.switch_page("app.py")
