"""Programs catalogue, payment submission, modules and lessons."""

from __future__ import annotations

import logging
from datetime import datetime, time, timezone
from typing import List, Optional

import streamlit as st

from tuklas.storage import StorageError
from tuklas.store import StoreError

from ..catalog import (
    LEVEL_LABELS,
    LEVEL_PRICES,
    LEVELS,
    curriculum,
    format_peso,
    lessons_for,
    program_title,
    search_programs,
)
from ..config import app_timezone, session_minutes
from ..entitlements import approved_levels, can_open_level, resolve_entitlements
from ..models import SLOTS, PaymentProof, ScheduleChoice
from ..scheduling_lock import compute_global_lock, is_payment_blocked, lock_message
from ..services import PaymentBlockedError, ReceiptValidationError, submit_payment_proof
from ..timeutils import format_display, utc_now
from ..utils.toasts import refresh_with_toast
from .common import Viewer, go, my_proofs, require_enrollment, require_login

_LOG = logging.getLogger(__name__)


def _payment_form(viewer: Viewer, program_id: str, proofs: List[PaymentProof]) -> None:
    tz = app_timezone()
    now = utc_now()
    lock = compute_global_lock(proofs, now, session_minutes(), tz)
    if is_payment_blocked(lock, program_id, now):
        st.warning(lock_message(lock, now, tz))
        return

    with st.form(f"pay_{program_id}", clear_on_submit=True):
        level = st.radio(
            "Level",
            LEVELS,
            format_func=lambda lv: f"{LEVEL_LABELS[lv]} ({format_peso(LEVEL_PRICES[lv])})",
            horizontal=True,
        )
        start_day = st.date_input("Start date", value=now.astimezone(tz).date())
        slot = st.selectbox("Time slot", SLOTS)
        reference = st.text_input("GCash reference number (optional)")
        receipt = st.file_uploader("Payment receipt", type=["png", "jpg", "jpeg"])
        submitted = st.form_submit_button("Submit for review")

    if not submitted:
        return
    if receipt is None:
        st.error("Please attach your payment receipt.")
        return

    start = datetime.combine(start_day, time(0, 0), tzinfo=tz).astimezone(timezone.utc)
    try:
        submit_payment_proof(
            user_id=viewer.user_id,
            program_id=program_id,
            level=level,
            filename=receipt.name,
            content_type=receipt.type or "",
            data=receipt.getvalue(),
            existing=proofs,
            now=now,
            reference=reference,
            schedule_choice=ScheduleChoice(start=start, slot=slot),
            tz=tz,
        )
    except ReceiptValidationError as exc:
        for message in exc.errors.values():
            st.error(message)
    except PaymentBlockedError as exc:
        st.warning(str(exc))
    except (StorageError, StoreError) as exc:
        st.error(str(exc))
    else:
        refresh_with_toast("Payment submitted. We'll review it shortly.")


def _status_line(program_id: str, proofs: List[PaymentProof]) -> None:
    ent = resolve_entitlements(proofs, session_minutes(), program_id, app_timezone()).get(program_id)
    pending = [p for p in proofs if p.program_id == program_id and p.is_pending]
    if ent is not None and ent.is_permanent:
        levels = ", ".join(LEVEL_LABELS[lv] for lv in LEVELS if lv in ent.unlocked_levels)
        st.success(f"Unlocked: {levels}. Schedule ends {format_display(ent.best_expiry, app_timezone())}.")
    if pending:
        st.info(f"{len(pending)} payment(s) waiting for review.")


def render_programs(viewer: Viewer) -> None:
    st.title("Programs")
    if not require_login(viewer, "Programs") or not require_enrollment(viewer):
        return
    proofs = my_proofs(viewer)
    if proofs is None:
        return

    query = st.text_input("Search programs")
    results = search_programs(query)
    if not results:
        st.caption("No programs match your search.")
    for program in results:
        with st.expander(program.title):
            st.write(program.overview)
            for outcome in program.outcomes:
                st.markdown(f"- {outcome}")
            for level in LEVELS:
                block = curriculum(program.id, level)
                if block is None:
                    continue
                st.markdown(f"**{LEVEL_LABELS[level]}** · {block.days} days · {format_peso(LEVEL_PRICES[level])}")
                st.caption(" • ".join(block.topics))
            _status_line(program.id, proofs)
            if st.button("Open modules", key=f"modules_{program.id}"):
                st.session_state["program_id"] = program.id
                go("Modules")
            _payment_form(viewer, program.id, proofs)


def render_modules(viewer: Viewer) -> None:
    if not require_login(viewer, "Modules"):
        return
    proofs = my_proofs(viewer)
    if proofs is None:
        return
    program_id: Optional[str] = st.session_state.get("program_id")
    if not program_id:
        st.info("Pick a program first.")
        return
    st.title(program_title(program_id))
    unlocked = approved_levels(proofs, program_id)
    if not unlocked:
        st.warning("This program unlocks once an admin approves your payment.")
        return
    for level in LEVELS:
        block = curriculum(program_id, level)
        if block is None:
            continue
        label = f"{LEVEL_LABELS[level]} ({block.days} days)"
        if level not in unlocked:
            st.markdown(f"🔒 {label}")
            continue
        if st.button(f"Open {label}", key=f"lessons_{program_id}_{level}"):
            st.session_state["level"] = level
            go("Lessons")


def render_lessons(viewer: Viewer) -> None:
    if not require_login(viewer, "Lessons"):
        return
    proofs = my_proofs(viewer)
    if proofs is None:
        return
    program_id = st.session_state.get("program_id")
    level = st.session_state.get("level")
    if not program_id or not level or not can_open_level(proofs, program_id, level):
        st.warning("This level is locked.")
        return
    st.title(f"{program_title(program_id)} · {LEVEL_LABELS[level]}")
    for lesson in lessons_for(program_id, level):
        st.subheader(str(lesson["title"]))
        for point in lesson["points"]:
            st.markdown(f"- {point}")
    if st.button("Back to modules"):
        go("Modules")
