"""Enrollment form screen."""

from __future__ import annotations

import streamlit as st

from tuklas.store import StoreError

from ..catalog import PROGRAMS
from ..services import EnrollmentError, submit_enrollment
from ..services.enrollment import DEFAULT_COUNTRY, GENDER_OPTIONS, REFERRAL_CHOICES
from ..timeutils import utc_now
from ..utils.toasts import refresh_with_toast
from .common import Viewer, go, require_login


def render_enroll(viewer: Viewer) -> None:
    st.title("Enroll")
    if not require_login(viewer, "Enroll"):
        return

    with st.form("enroll_form"):
        st.subheader("Personal")
        c1, c2 = st.columns(2)
        form = {
            "first_name": c1.text_input("First name"),
            "last_name": c2.text_input("Last name"),
            "birthdate": str(c1.date_input("Birthdate", value=None) or ""),
            "gender": c2.selectbox("Gender", [""] + GENDER_OPTIONS),
        }
        st.subheader("Contact")
        k1, k2 = st.columns(2)
        form["email"] = k1.text_input("Email", value=viewer.email)
        form["phone"] = k2.text_input("Mobile number (11 digits)")
        st.subheader("Address")
        form["street"] = st.text_input("Street")
        a1, a2, a3 = st.columns(3)
        form["city"] = a1.text_input("City")
        form["province"] = a2.text_input("Province")
        form["zip"] = a3.text_input("ZIP code")
        form["country"] = st.text_input("Country", value=DEFAULT_COUNTRY)
        st.subheader("Program")
        form["program"] = st.selectbox("Program", [p.title for p in PROGRAMS])
        form["goals"] = st.text_area("Your goals")
        form["referral"] = st.selectbox("How did you hear about us?", [""] + REFERRAL_CHOICES)
        st.subheader("Emergency contact")
        e1, e2 = st.columns(2)
        form["ice_name"] = e1.text_input("Contact name")
        form["ice_phone"] = e2.text_input("Contact number (11 digits)")
        form["newsletter"] = st.checkbox("Send me updates", value=True)
        form["agree_terms"] = st.checkbox("I accept the Terms of Service")
        form["agree_data"] = st.checkbox("I consent to the processing of my data")
        submitted = st.form_submit_button("Submit enrollment")

    if not submitted:
        return
    try:
        submit_enrollment(viewer.user_id, form, utc_now())
    except EnrollmentError as exc:
        for field, message in exc.errors.items():
            st.error(f"{field.replace('_', ' ').title()}: {message}")
    except StoreError as exc:
        st.error(str(exc))
    else:
        refresh_with_toast("Enrollment complete!")
        go("Programs")
