"""Dashboard countdowns, today's sessions and the full events calendar."""

from __future__ import annotations

from typing import List

import streamlit as st

from ..config import app_timezone, session_minutes, teams_link
from ..entitlements import resolve_entitlements
from ..models import PaymentProof
from ..session_schedule import (
    ENDED,
    NOT_STARTED,
    group_by_day,
    join_state,
    program_countdowns,
    sessions_for_day,
    sessions_for_proofs,
)
from ..timeutils import clock_string, format_display, utc_now
from ..utils.toasts import toast_once
from .common import Viewer, my_proofs, require_login


def _session_row(session, now) -> None:
    state = join_state(session, now)
    cols = st.columns([3, 3, 1])
    cols[0].markdown(f"**{session.title}**")
    cols[1].caption(session.display_text)
    if state == NOT_STARTED:
        cols[2].caption("Not started")
    elif state == ENDED:
        cols[2].caption("Ended")
    else:
        cols[2].link_button("Join", session.join_url)


@st.fragment(run_every="1s")
def _countdowns(proofs: List[PaymentProof]) -> None:
    tz = app_timezone()
    now = utc_now()
    minutes = session_minutes()
    cards = program_countdowns(resolve_entitlements(proofs, minutes, tz=tz), now)
    if not cards:
        st.info("No approved programs yet. Submit a payment on the Programs page.")
        return
    for card in cards:
        with st.container(border=True):
            st.markdown(f"**{card.title}**")
            if card.ended:
                st.caption(f"Completed {format_display(card.ends_at, tz)}")
            elif card.started:
                st.metric("Ends in", clock_string(card.until_end_ms))
            else:
                st.metric("Starts in", clock_string(card.until_start_ms))
                st.caption(f"First session {format_display(card.starts_at, tz)}")

    today = sessions_for_day(sessions_for_proofs(proofs, teams_link(), minutes, tz), now, tz)
    st.subheader("Today's sessions")
    if not today:
        st.caption("No sessions today.")
    for session in today:
        _session_row(session, now)
        if join_state(session, now) not in (NOT_STARTED, ENDED):
            toast_once(f"{session.title} is live now.", "🎥")


def render_dashboard(viewer: Viewer) -> None:
    st.title("Dashboard")
    if not require_login(viewer, "Dashboard"):
        return
    proofs = my_proofs(viewer)
    if proofs is None:
        return
    _countdowns(proofs)


def render_events(viewer: Viewer) -> None:
    st.title("Events")
    if not require_login(viewer, "Events"):
        return
    proofs = my_proofs(viewer)
    if proofs is None:
        return
    tz = app_timezone()
    now = utc_now()
    sessions = sessions_for_proofs(proofs, teams_link(), session_minutes(), tz)
    if not sessions:
        st.info("Your training calendar appears once a payment is approved.")
        return
    for day, items in group_by_day(sessions, tz).items():
        st.subheader(day)
        for session in items:
            _session_row(session, now)
