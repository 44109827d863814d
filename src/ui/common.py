"""Shared state and gates for the hub screens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import streamlit as st

from tuklas.store import StoreError

from ..auth import AuthSession, get_current_session, is_admin, is_suspended
from ..models import PaymentProof, Profile
from ..services import fetch_user_proofs, is_enrolled, load_profile
from ..timeutils import utc_now

_LOG = logging.getLogger(__name__)

PAGE_KEY = "page"


@dataclass
class Viewer:
    session: Optional[AuthSession]
    profile: Optional[Profile]

    @property
    def signed_in(self) -> bool:
        return self.session is not None

    @property
    def user_id(self) -> str:
        return self.session.user_id if self.session else ""

    @property
    def email(self) -> str:
        return self.session.email if self.session else ""

    @property
    def is_admin(self) -> bool:
        return self.signed_in and is_admin(self.email, self.profile)


def go(page: str, st_module: Any = st) -> None:
    st_module.session_state[PAGE_KEY] = page
    st_module.rerun()


def current_viewer(st_module: Any = st) -> Viewer:
    session = get_current_session(st_module=st_module)
    profile = None
    if session is not None:
        try:
            profile = load_profile(session.user_id)
        except StoreError:
            _LOG.warning("Profile lookup failed for %s", session.user_id)
    return Viewer(session=session, profile=profile)


def require_login(viewer: Viewer, next_page: str, st_module: Any = st) -> bool:
    """Send anonymous visitors to the login screen, remembering where they were."""
    if viewer.signed_in:
        return True
    st_module.session_state["next_page"] = next_page
    st_module.info("Please log in to continue.")
    if st_module.button("Go to login", key=f"login_from_{next_page}"):
        go("Login", st_module)
    return False


def suspended(viewer: Viewer) -> bool:
    return viewer.profile is not None and is_suspended(viewer.profile, utc_now(), viewer.email)


def require_enrollment(viewer: Viewer, st_module: Any = st) -> bool:
    try:
        enrolled = is_enrolled(viewer.user_id, viewer.email)
    except StoreError as exc:
        st_module.error(str(exc))
        return False
    if enrolled:
        return True
    st_module.warning("Please complete the enrollment form before choosing a program.")
    if st_module.button("Open enrollment form", key="to_enroll"):
        go("Enroll", st_module)
    return False


@st.cache_data(ttl=30, show_spinner=False)
def _cached_proofs(user_id: str, refresh: int) -> List[PaymentProof]:
    return fetch_user_proofs(user_id)


def my_proofs(viewer: Viewer, st_module: Any = st) -> Optional[List[PaymentProof]]:
    """The viewer's proofs or ``None`` after showing the load error inline."""
    try:
        return _cached_proofs(viewer.user_id, st_module.session_state.get("__refresh", 0))
    except StoreError as exc:
        st_module.error(str(exc))
        return None


__all__ = [
    "PAGE_KEY",
    "Viewer",
    "go",
    "current_viewer",
    "require_login",
    "require_enrollment",
    "suspended",
    "my_proofs",
]
