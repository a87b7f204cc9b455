import time

import streamlit as st
from streamlit_searchbox import st_searchbox

from core.config import PRICING_DISPLAY_SECONDS
from core.errors import IntakeError
from core.helpers import render_intake_sidebar, render_pricing_card
from core.logging_config import configure_logging
from core.session_manager import require_login, get_intake_state
from services.drug_service import search_drugs
from services.intake_flow import IntakeFlow, IntakeScreen

# Page config is set globally in app.py

configure_logging()
require_login()
render_intake_sidebar()

state = get_intake_state()
if state.screen is IntakeScreen.PROGRAM_ENROLLMENT:
    st.switch_page("pages/2_Program_Enrollment.py")

flow = IntakeFlow(state)

st.title("Patient Details")


def catalog_section(noun: str, options, add, remove, create):
    """Linked items with Remove buttons, a picker for the rest and "Other".

    Returns the id picked in the selector (or None).
    """
    key = noun.lower()

    members = options.members()
    if members:
        for item in members:
            c1, c2 = st.columns([4, 1])
            c1.write(f"**{item.name}**")
            if c2.button("Remove", key=f"rm_{key}_{item.id}"):
                remove(item.id)
                st.rerun()
    else:
        st.caption(f"No {key}s added yet.")

    # Widget keys can only be reset before the widget is drawn
    if st.session_state.pop(f"reset_{key}", False):
        st.session_state[f"other_{key}"] = False
        st.session_state[f"new_{key}_name"] = ""

    is_other = st.checkbox(f"Other (Add new {key})", key=f"other_{key}")
    if is_other:
        c1, c2 = st.columns([4, 1])
        new_name = c1.text_input(f"New {key} name", key=f"new_{key}_name", placeholder=f"Enter new {key} name")
        if c2.button("Add", key=f"create_{key}"):
            try:
                created = create(new_name)
            except IntakeError as e:
                st.error(str(e))
            else:
                if created is not None:
                    st.session_state[f"reset_{key}"] = True
                    st.rerun()
        return None

    choices = options.non_members()
    if not choices:
        return None

    names = {item.id: item.name for item in choices}
    c1, c2 = st.columns([4, 1])
    picked = c1.selectbox(
        f"Select {key}",
        list(names),
        index=None,
        format_func=names.get,
        placeholder=f"Select a {key}...",
        key=f"select_{key}",
    )
    if picked is not None and c2.button("Add", key=f"add_{key}"):
        try:
            add(picked)
        except IntakeError as e:
            st.error(str(e))
        else:
            st.rerun()
    return picked


# -----------------------------
# Clinic information
# -----------------------------
st.subheader("Clinic Information")
catalog_section(
    "Clinic",
    flow.clinic_options(),
    add=flow.add_clinic,
    remove=flow.remove_clinic,
    create=flow.create_clinic,
)

st.write("---")

# -----------------------------
# Provider information
# -----------------------------
st.subheader("Provider Information")
picked_provider = catalog_section(
    "Provider",
    flow.provider_options(),
    add=flow.add_provider,
    remove=flow.remove_provider,
    create=flow.create_provider,
)

if picked_provider is not None:
    details = flow.provider_details(picked_provider)
    if details is not None:
        with st.container(border=True):
            st.markdown("#### Provider Details")
            for label, value in details.display_fields():
                st.write(f"- **{label}:** {value}")

st.write("---")

# -----------------------------
# Drug details
# -----------------------------
st.subheader("Drug Details")
drug_name = st_searchbox(
    search_drugs,
    key="drug_search",
    placeholder="Type a drug name, e.g. Metformin",
    default_options=search_drugs(""),
)

preview = flow.preview_pricing(drug_name or "")
if preview is not None:
    render_pricing_card(preview)
    st.caption("This drug will be saved to your patient profile.")

if st.button("Continue to Program Enrollment", type="primary"):
    try:
        pricing = flow.submit_patient_details(drug_name or "")
    except IntakeError as e:
        st.error(str(e))
    else:
        if pricing is not None:
            st.success(f"Saved {pricing.drug_name}. Loading program enrollment...")
            time.sleep(PRICING_DISPLAY_SECONDS)
            flow.advance()
            st.switch_page("pages/2_Program_Enrollment.py")
