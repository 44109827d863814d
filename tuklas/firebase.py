"""Firebase app, Firestore and Cloud Storage clients for the hub."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import firebase_admin
import streamlit as st
from firebase_admin import credentials, firestore, storage

_LOG = logging.getLogger(__name__)

_app: Optional[firebase_admin.App] = None
_db_client: Optional[firestore.Client] = None
db: Optional[firestore.Client] = None  # tests assign a fake client here


def _credential_info() -> Dict[str, Any]:
    path = os.getenv("FIREBASE_CREDENTIALS")
    if path:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    return dict(st.secrets["firebase"])


def get_app() -> firebase_admin.App:
    """Initialise the default Firebase app once and return it."""

    global _app
    if _app is not None:
        return _app
    if firebase_admin._apps:
        _app = firebase_admin.get_app()
        return _app
    try:  # pragma: no cover - runtime side effects
        info = _credential_info()
        options = {}
        bucket = info.pop("storage_bucket", None) or os.getenv("FIREBASE_STORAGE_BUCKET")
        if bucket:
            options["storageBucket"] = bucket
        _app = firebase_admin.initialize_app(credentials.Certificate(info), options or None)
        return _app
    except Exception as exc:  # pragma: no cover - surfaced in the UI
        _LOG.exception("Firebase initialisation failed")
        raise RuntimeError("Firebase initialization failed") from exc


def get_db() -> firestore.Client:
    """Return a cached Firestore client."""

    global _db_client, db
    if db is not None:
        return db
    if _db_client is None:
        _db_client = firestore.client(get_app())
    db = _db_client
    return _db_client


def get_bucket(name: Optional[str] = None):
    """Return a Cloud Storage bucket; ``None`` selects the app default."""
    return storage.bucket(name, app=get_app())


__all__ = ["db", "get_app", "get_db", "get_bucket"]
