"""Admin dashboard, user management and payment review."""

from __future__ import annotations

import logging

import streamlit as st

from tuklas.store import StoreError

from ..catalog import LEVEL_LABELS, program_title
from ..services import approve_proof, fetch_all_proofs, load_profiles, reject_proof
from ..services.admin import (
    STATUS_FILTERS,
    dashboard_counts,
    filter_proofs,
    filter_users,
    latest_enrollment,
    list_users,
    paginate,
    proof_counts,
    proofs_frame,
    suspend_user,
    unsuspend_user,
)
from ..services.payments import InvalidTransitionError
from ..timeutils import format_display, utc_now
from ..utils.toasts import refresh_with_toast, toast_warn
from ..validation import validate_suspension_days
from .common import Viewer

_LOG = logging.getLogger(__name__)


def _overview() -> None:
    try:
        counts = dashboard_counts()
    except StoreError as exc:
        st.error(str(exc))
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Programs", counts["programs"])
    c2.metric("Applicants", counts["applicants"])
    c3.metric("Payments", counts["payments"])
    c4.metric("Pending", counts["pending"])


def _users() -> None:
    try:
        users = list_users()
    except StoreError as exc:
        st.error(str(exc))
        return
    query = st.text_input("Search users", key="admin_user_q")
    page = st.number_input("Page", min_value=1, value=1, step=1, key="admin_user_page")
    rows, total_pages = paginate(filter_users(users, query), int(page))
    st.caption(f"Page {min(int(page), total_pages)} of {total_pages}")
    now = utc_now()
    for user in rows:
        with st.expander(f"{user.display_name} · {user.email} · {user.role}"):
            st.write("Enrolled" if user.enrolled else "Not enrolled")
            if user.suspended_until and user.suspended_until > now:
                st.warning(f"Suspended until {format_display(user.suspended_until)}")
                if st.button("Unsuspend", key=f"unsuspend_{user.id}"):
                    try:
                        unsuspend_user(user.id)
                    except StoreError as exc:
                        st.error(str(exc))
                    else:
                        refresh_with_toast("Suspension lifted.")
            else:
                days = st.text_input("Suspend for days", key=f"days_{user.id}")
                if st.button("Suspend", key=f"suspend_{user.id}"):
                    errors = validate_suspension_days(days)
                    if errors:
                        st.error(errors["days"])
                    else:
                        try:
                            suspend_user(user.id, float(days), now)
                        except StoreError as exc:
                            st.error(str(exc))
                        else:
                            refresh_with_toast("User suspended.")
            if st.button("Show enrollment", key=f"enroll_{user.id}"):
                try:
                    form = latest_enrollment(user)
                except StoreError as exc:
                    st.error(str(exc))
                else:
                    if form is None:
                        st.caption("No enrollment form on file.")
                    else:
                        st.json(form.get("payload") or form)


def _payments(viewer: Viewer) -> None:
    try:
        proofs = fetch_all_proofs()
        profiles = load_profiles({p.user_id for p in proofs})
    except StoreError as exc:
        st.error(str(exc))
        return
    counts = proof_counts(proofs)
    st.caption(
        f"Pending: {counts['pending']} • Approved: {counts['approved']} • Rejected: {counts['rejected']}"
    )
    status = st.selectbox("Status", STATUS_FILTERS)
    query = st.text_input("Search by email, name, program or level", key="admin_proof_q")
    selected = filter_proofs(proofs, status, query, profiles)
    st.dataframe(proofs_frame(selected, profiles), hide_index=True, use_container_width=True)

    for proof in selected:
        if not proof.is_pending:
            continue
        user = profiles.get(proof.user_id)
        label = f"{user.display_name if user else proof.user_id} · {program_title(proof.program_id)} · {LEVEL_LABELS[proof.level]}"
        with st.expander(label):
            if proof.image_url:
                st.image(proof.image_url)
            if proof.reference:
                st.caption(f"Reference: {proof.reference}")
            reason = st.text_input("Reason for rejection (optional)", key=f"reason_{proof.id}")
            c1, c2 = st.columns(2)
            try:
                if c1.button(f"Approve (+{proof.credits_awarded} credits)", key=f"approve_{proof.id}"):
                    approve_proof(proof.id, viewer.user_id, utc_now())
                    refresh_with_toast("Payment approved.")
                if c2.button("Reject", key=f"reject_{proof.id}"):
                    reject_proof(proof.id, reason)
                    refresh_with_toast("Payment rejected.")
            except InvalidTransitionError as exc:
                _LOG.info("Stale review action on %s: %s", proof.id, exc)
                toast_warn("This payment was already reviewed.")
            except StoreError as exc:
                st.error(str(exc))


def render_admin(viewer: Viewer) -> None:
    st.title("Admin")
    if not viewer.is_admin:
        st.error("You are not authorized to view this page.")
        return
    overview, users, payments = st.tabs(["Overview", "Users", "Payment proofs"])
    with overview:
        _overview()
    with users:
        _users()
    with payments:
        _payments(viewer)
