from typing import Set

import streamlit as st


_RECENT_TOASTS_KEY = "__recent_toasts__"


def _already_toasted(msg: str) -> bool:
    shown: Set[str] = st.session_state.setdefault(_RECENT_TOASTS_KEY, set())
    if msg in shown:
        return True
    shown.add(msg)
    return False


def toast_once(msg: str, icon: str) -> None:
    """Show a toast once per browser session.

    Used for notices that would otherwise repeat on every one-second
    countdown rerun, such as "your training starts today".
    """
    if not _already_toasted(msg):
        st.toast(msg, icon=icon)


def toast_ok(msg: str) -> None:
    st.toast(msg, icon="✅")


def toast_warn(msg: str) -> None:
    st.toast(msg, icon="⚠️")


def refresh_with_toast(msg: str = "Saved!") -> None:
    """Bump ``__refresh`` so cached loaders re-query, then confirm the save.

    Parameters
    ----------
    msg:
        The message to display in the success toast. Defaults to ``"Saved!"``.
    """
    st.session_state["__refresh"] = st.session_state.get("__refresh", 0) + 1
    toast_ok(msg)
