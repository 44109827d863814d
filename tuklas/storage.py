"""Blob store for uploaded receipts (Cloud Storage)."""

from __future__ import annotations

import logging
from typing import Optional

from google.api_core import exceptions as gexc

from . import firebase

_LOG = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when an upload or URL lookup fails."""


def upload(bucket: Optional[str], path: str, data: bytes, content_type: str) -> str:
    """Store ``data`` at ``path`` and return the path."""
    try:
        blob = firebase.get_bucket(bucket).blob(path)
        blob.upload_from_string(data, content_type=content_type)
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Upload to %s/%s failed", bucket, path)
        raise StorageError(f"Upload failed: {exc}") from exc
    return path


def get_public_url(bucket: Optional[str], path: str) -> str:
    try:
        blob = firebase.get_bucket(bucket).blob(path)
        blob.make_public()
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Could not publish %s/%s", bucket, path)
        raise StorageError(f"Could not get a link for the receipt: {exc}") from exc
    return blob.public_url


def delete(bucket: Optional[str], path: str) -> None:
    try:
        firebase.get_bucket(bucket).blob(path).delete()
    except gexc.NotFound:
        return
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Could not delete %s/%s", bucket, path)
        raise StorageError(f"Could not remove the receipt: {exc}") from exc


__all__ = ["StorageError", "upload", "get_public_url", "delete"]
