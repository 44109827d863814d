"""Login, sign-up and suspension screens."""

from __future__ import annotations

import logging

import streamlit as st

from tuklas.store import StoreError

from ..auth import AuthError, sign_in, sign_out, sign_up
from ..services import ensure_profile
from ..timeutils import format_display, utc_now
from ..utils.toasts import toast_ok
from ..validation import validate_signup
from .common import Viewer, go

_LOG = logging.getLogger(__name__)


def render_login(viewer: Viewer) -> None:
    st.title("Log in")
    if viewer.signed_in:
        st.success(f"Signed in as {viewer.email}.")
        return
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")
    if submitted:
        try:
            session = sign_in(email, password)
        except AuthError as exc:
            st.error(str(exc))
            return
        try:
            ensure_profile(session.user_id, session.email)
        except StoreError:
            _LOG.warning("Could not ensure profile for %s", session.user_id)
        toast_ok("Welcome back!")
        go(st.session_state.pop("next_page", None) or "Dashboard")
    if st.button("Create an account"):
        go("Sign up")


def render_signup(viewer: Viewer) -> None:
    st.title("Create your account")
    with st.form("signup_form"):
        name = st.text_input("Full name")
        email = st.text_input("Gmail address")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Sign up")
    st.caption("Only @gmail.com emails are accepted on this form.")
    if not submitted:
        return
    errors = validate_signup(name, email, password, confirm)
    if errors:
        st.error(next(iter(errors.values())))
        return
    try:
        session = sign_up(email, password)
        ensure_profile(session.user_id, session.email, name)
    except (AuthError, StoreError) as exc:
        st.error(str(exc))
        return
    toast_ok("Account created!")
    go("Enroll")


def render_suspended(viewer: Viewer) -> None:
    st.title("Account suspended")
    until = viewer.profile.suspended_until if viewer.profile else None
    if until is not None:
        st.error(f"Your account is suspended until {format_display(until)}.")
    if until is None or until <= utc_now():
        if st.button("Continue"):
            go("Dashboard")
    if st.button("Log out"):
        sign_out()
        go("Home")
