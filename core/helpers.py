import json
import logging

import streamlit as st
import streamlit.components.v1 as components

logger = logging.getLogger(__name__)


# -----------------------------
# Sidebar helpers
# -----------------------------
def hide_default_sidebar_nav():
    """Hide Streamlit's default multi-page navigation for a cleaner custom menu."""
    st.markdown(
        """
        <style>
        /* Hide the auto-generated Pages section */
        [data-testid="stSidebarNav"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def hide_sidebar_completely():
    """Completely hide Streamlit's sidebar and the toggle control.

    Used on the login/signup view where navigation should not be visible.
    """
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none !important; }
        [data-testid="collapsedControl"] { display: none !important; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_intake_sidebar():
    """Sidebar with the signed-in user and a Logout button."""
    hide_default_sidebar_nav()
    with st.sidebar:
        user = st.session_state.get("user")
        if user is not None:
            st.caption(f"Signed in as {user.full_name or user.username}")
        if st.button("Logout", use_container_width=True):
            from core.session_manager import logout
            logout()


# -----------------------------
# External enrollment portal
# -----------------------------
def open_enrollment_portal(url: str):
    """Open the portal in a new browser tab. Fire-and-forget."""
    logger.info("Opening enrollment portal %s", url)
    components.html(
        f"<script>window.open({json.dumps(url)}, '_blank');</script>",
        height=0,
    )


def render_pricing_card(pricing):
    st.markdown(f"#### Pricing for {pricing.drug_name}")
    c1, c2, c3 = st.columns(3)
    c1.metric("Weekly", f"${pricing.weekly}")
    c2.metric("Monthly", f"${pricing.monthly}")
    c3.metric("Yearly", f"${pricing.yearly}")
