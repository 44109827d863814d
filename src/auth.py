"""Sign-in, sign-up and session handling over Firebase Authentication.

Passwords are checked by the Firebase Auth REST API; the resulting ID and
refresh tokens live in ``st.session_state`` for the lifetime of the
browser session.  Expired ID tokens are refreshed through the secure token
endpoint before a screen reads the current session.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Callable, Dict, List, Optional

import requests
import streamlit as st
from firebase_admin import auth as fb_auth
from tuklas.firebase import get_app

from .config import admin_emails, firebase_api_key
from .models import ROLE_ADMIN, ROLE_STAFF, Profile

_LOG = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{action}"
TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
REQUEST_TIMEOUT = 10
# Refresh slightly early so a token never expires mid-request.
EXPIRY_LEEWAY = timedelta(seconds=60)

_FRIENDLY_ERRORS = {
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "EMAIL_EXISTS": "An account with this email already exists.",
    "WEAK_PASSWORD": "Password must be at least 6 characters",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "TOKEN_EXPIRED": "Your session has expired. Please log in again.",
    "INVALID_REFRESH_TOKEN": "Your session has expired. Please log in again.",
}

SessionCallback = Callable[[Optional["AuthSession"]], None]
# Listeners are kept per browser session in st.session_state.
LISTENERS_KEY = "auth_listeners"


class AuthError(RuntimeError):
    """Raised when Firebase rejects a sign-in, sign-up or refresh."""


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str
    id_token: str
    refresh_token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now + EXPIRY_LEEWAY >= self.expires_at


def _error_message(resp: requests.Response) -> str:
    try:
        code = resp.json().get("error", {}).get("message", "")
    except ValueError:
        code = ""
    # Firebase appends details after a colon, e.g. "WEAK_PASSWORD : ...".
    key = str(code).split(":")[0].strip()
    return _FRIENDLY_ERRORS.get(key, "Something went wrong. Please try again.")


def _post(url: str, **kwargs: Any) -> Dict[str, Any]:
    params = {"key": firebase_api_key()}
    try:
        resp = requests.post(url, params=params, timeout=REQUEST_TIMEOUT, **kwargs)
    except requests.RequestException as exc:
        _LOG.warning("Auth request to %s failed: %s", url, exc)
        raise AuthError("Could not reach the sign-in service. Check your connection.") from exc
    if not resp.ok:
        message = _error_message(resp)
        _LOG.info("Auth request rejected (%s): %s", resp.status_code, message)
        raise AuthError(message)
    return resp.json()


def _session_from(payload: Dict[str, Any], now: datetime, email: str = "") -> AuthSession:
    expires_in = int(payload.get("expiresIn") or payload.get("expires_in") or 3600)
    return AuthSession(
        user_id=payload.get("localId") or payload.get("user_id") or "",
        email=(payload.get("email") or email or "").lower(),
        id_token=payload.get("idToken") or payload.get("id_token") or "",
        refresh_token=payload.get("refreshToken") or payload.get("refresh_token") or "",
        expires_at=now + timedelta(seconds=expires_in),
    )


def _listeners(st_module: Any) -> List[SessionCallback]:
    return st_module.session_state.setdefault(LISTENERS_KEY, [])


def _notify(session: Optional[AuthSession], st_module: Any) -> None:
    for callback in list(_listeners(st_module)):
        try:
            callback(session)
        except Exception:
            _LOG.exception("Session change listener failed")


def _store(session: Optional[AuthSession], st_module: Any) -> None:
    if session is None:
        st_module.session_state.pop(SESSION_KEY, None)
    else:
        st_module.session_state[SESSION_KEY] = session
    _notify(session, st_module)


def sign_in(
    email: str,
    password: str,
    *,
    st_module: Any = st,
    now: Optional[datetime] = None,
) -> AuthSession:
    """Check credentials and store the new session."""
    now = now or datetime.now(timezone.utc)
    email = (email or "").strip().lower()
    payload = _post(
        IDENTITY_URL.format(action="signInWithPassword"),
        json={"email": email, "password": password or "", "returnSecureToken": True},
    )
    session = _session_from(payload, now, email)
    _store(session, st_module)
    _LOG.info("User %s signed in", session.user_id)
    return session


def sign_up(
    email: str,
    password: str,
    *,
    st_module: Any = st,
    now: Optional[datetime] = None,
) -> AuthSession:
    now = now or datetime.now(timezone.utc)
    email = (email or "").strip().lower()
    payload = _post(
        IDENTITY_URL.format(action="signUp"),
        json={"email": email, "password": password or "", "returnSecureToken": True},
    )
    session = _session_from(payload, now, email)
    _store(session, st_module)
    _LOG.info("Created account %s", session.user_id)
    return session


def refresh(session: AuthSession, *, now: Optional[datetime] = None) -> AuthSession:
    now = now or datetime.now(timezone.utc)
    payload = _post(
        TOKEN_URL,
        data={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
    )
    fresh = _session_from(payload, now, session.email)
    return replace(fresh, user_id=fresh.user_id or session.user_id)


def get_current_session(
    *, st_module: Any = st, now: Optional[datetime] = None
) -> Optional[AuthSession]:
    """Return the stored session, refreshing it when the ID token expired.

    A session that cannot be refreshed is dropped and ``None`` is returned.
    """
    session = st_module.session_state.get(SESSION_KEY)
    if not isinstance(session, AuthSession):
        return None
    now = now or datetime.now(timezone.utc)
    if not session.is_expired(now):
        return session
    try:
        fresh = refresh(session, now=now)
    except AuthError:
        _LOG.info("Dropping expired session for %s", session.user_id)
        _store(None, st_module)
        return None
    st_module.session_state[SESSION_KEY] = fresh
    return fresh


def on_session_change(
    callback: SessionCallback, *, st_module: Any = st
) -> Callable[[], None]:
    """Register ``callback`` for this browser session's sign-in/out events.

    Returns a function that removes the callback again.
    """
    listeners = _listeners(st_module)
    listeners.append(callback)

    def unsubscribe() -> None:
        if callback in listeners:
            listeners.remove(callback)

    return unsubscribe


def sign_out(*, st_module: Any = st, revoke: bool = True, logger: Any = _LOG) -> None:
    session = st_module.session_state.get(SESSION_KEY)
    if revoke and isinstance(session, AuthSession) and session.user_id:
        try:
            fb_auth.revoke_refresh_tokens(session.user_id, app=get_app())
        except Exception:
            logger.exception("Token revoke failed on logout")
    _store(None, st_module)


def is_admin(email: Optional[str], profile: Optional[Profile] = None) -> bool:
    """Admins come from the ``ADMIN_EMAILS`` allow-list or a staff role."""
    if email and email.strip().lower() in admin_emails():
        return True
    return profile is not None and profile.role in (ROLE_ADMIN, ROLE_STAFF)


def is_suspended(profile: Optional[Profile], now: datetime, email: Optional[str] = None) -> bool:
    if profile is None or profile.suspended_until is None:
        return False
    if is_admin(email or profile.email, profile):
        return False
    return profile.suspended_until > now


__all__ = [
    "AuthError",
    "AuthSession",
    "SESSION_KEY",
    "sign_in",
    "sign_up",
    "refresh",
    "get_current_session",
    "on_session_change",
    "sign_out",
    "is_admin",
    "is_suspended",
]
