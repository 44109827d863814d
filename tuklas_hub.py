# ==== Standard Library ====
import logging

# ==== Third-Party Packages ====
import streamlit as st

from src.auth import sign_out
from src.config import log_level
from src.ui.admin import render_admin
from src.ui.common import PAGE_KEY, current_viewer, go, suspended
from src.ui.dashboard import render_dashboard, render_events
from src.ui.enroll import render_enroll
from src.ui.home import render_home
from src.ui.login import render_login, render_signup, render_suspended
from src.ui.programs import render_lessons, render_modules, render_programs

logging.basicConfig(
    level=getattr(logging, log_level(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="TUKLAS Virtual Hub", page_icon="🎓", layout="wide")

PAGES = {
    "Home": render_home,
    "Programs": render_programs,
    "Modules": render_modules,
    "Lessons": render_lessons,
    "Dashboard": render_dashboard,
    "Events": render_events,
    "Enroll": render_enroll,
    "Login": render_login,
    "Sign up": render_signup,
    "Suspended": render_suspended,
    "Admin": render_admin,
}
# Screens reachable only from inside another screen.
HIDDEN = {"Modules", "Lessons", "Suspended", "Sign up"}
OPEN_WHILE_SUSPENDED = {"Home", "Login", "Sign up", "Suspended"}

viewer = current_viewer()

menu = [name for name in PAGES if name not in HIDDEN]
if viewer.signed_in:
    menu.remove("Login")
if not viewer.is_admin:
    menu.remove("Admin")

page = st.session_state.get(PAGE_KEY, "Home")
if page not in PAGES:
    page = "Home"


def _on_nav() -> None:
    st.session_state[PAGE_KEY] = st.session_state["nav"]


with st.sidebar:
    st.markdown("## TUKLAS")
    st.radio("Go to", menu, key="nav", on_change=_on_nav)
    if viewer.signed_in:
        st.caption(viewer.email)
        if st.button("Log out"):
            sign_out()
            go("Home")

if viewer.signed_in and suspended(viewer) and page not in OPEN_WHILE_SUSPENDED:
    page = "Suspended"

PAGES[page](viewer)
