"""Landing page: learner counter, FAQs and reviews."""

from __future__ import annotations

import logging

import streamlit as st

from tuklas.store import StoreError

from ..catalog import PROGRAMS
from ..services import average_rating, filter_faqs, learner_count, load_reviews, submit_review
from ..timeutils import utc_now
from ..utils.toasts import refresh_with_toast
from ..validation import validate_review
from .common import Viewer

_LOG = logging.getLogger(__name__)

PARTNER_COUNT = 4


@st.cache_data(ttl=300, show_spinner=False)
def _learners(refresh: int) -> int:
    return learner_count()


def _stats() -> None:
    try:
        learners = _learners(st.session_state.get("__refresh", 0))
    except StoreError:
        _LOG.warning("Learner counter unavailable")
        learners = 0
    c1, c2, c3 = st.columns(3)
    c1.metric("Learners", learners)
    c2.metric("Programs", len(PROGRAMS))
    c3.metric("Partners", PARTNER_COUNT)


def _faqs() -> None:
    st.subheader("FAQs")
    query = st.text_input("Search FAQs", placeholder="Try certificate, schedule, enroll.")
    matches = filter_faqs(query)
    if not matches:
        st.caption("No results found.")
    for item in matches:
        with st.expander(item["q"]):
            st.write(item["a"])


def _reviews(viewer: Viewer) -> None:
    st.subheader("Reviews")
    try:
        rows = load_reviews()
    except StoreError as exc:
        st.error(str(exc))
        rows = []
    st.write(f"Average rating: **{average_rating(rows)}** / 5")

    with st.form("review_form", clear_on_submit=True):
        name = st.text_input("Display name", value=viewer.profile.full_name if viewer.profile else "")
        rating = st.slider("Rating", 1, 5, 5)
        comment = st.text_area("Comment")
        submitted = st.form_submit_button("Post review")
    if submitted:
        errors = validate_review(viewer.signed_in, name, comment)
        if errors:
            for message in errors.values():
                st.error(message)
        else:
            try:
                submit_review(viewer.user_id, name, rating, comment, utc_now())
            except StoreError as exc:
                st.error(str(exc))
            else:
                refresh_with_toast("Thanks for your review!")

    if not rows:
        st.caption("No reviews yet. Be the first.")
    for row in rows:
        stars = int(row.get("rating") or 0)
        st.markdown(f"**{row.get('display_name', '')}** {'★' * stars}{'☆' * (5 - stars)}")
        st.write(row.get("comment") or "")


def render_home(viewer: Viewer) -> None:
    st.title("TUKLAS Virtual Hub")
    st.write("Train as a virtual assistant with live daily sessions and guided modules.")
    _stats()
    _faqs()
    _reviews(viewer)
