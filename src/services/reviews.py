"""Home page reviews, learner counter and FAQs."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence

from tuklas import store

from ..models import APPROVED
from ..timeutils import iso_z

_LOG = logging.getLogger(__name__)

REVIEWS = "reviews"
REVIEW_LIMIT = 24
LEARNER_SCAN_LIMIT = 10000

FAQS: List[Dict[str, str]] = [
    {"q": "What is a Virtual Assistant?", "a": "A VA provides remote admin, technical, or creative support for clients and teams."},
    {"q": "Who can enroll?", "a": "Anyone who wants to become a VA. Beginners and upskillers are welcome."},
    {"q": "Is the training online?", "a": "Yes. You can learn anywhere on your own schedule."},
    {"q": "How long is the program?", "a": "It depends on the level or package. Expect a little over a week per level."},
    {"q": "Are there prerequisites?", "a": "No strict requirements. Basic computer skills and willingness to learn are enough."},
    {"q": "Will I get a certificate?", "a": "Yes. You receive a certificate after completing the program."},
    {"q": "Do you help with job placement?", "a": "We share openings and connect you with leads through our network. Results still depend on your skill and effort."},
    {"q": "Can I ask instructors during training?", "a": "Yes. Message instructors and join discussions inside the platform."},
]


def load_reviews(limit: int = REVIEW_LIMIT) -> List[Dict[str, Any]]:
    return store.select(REVIEWS, order_by="created_at", descending=True, limit=limit)


def average_rating(reviews: Sequence[Mapping[str, Any]]) -> float:
    """Mean rating rounded to one decimal; ``0`` with no reviews."""
    if not reviews:
        return 0.0
    total = 0.0
    for review in reviews:
        try:
            total += float(review.get("rating") or 0)
        except (TypeError, ValueError):
            continue
    return round(total / len(reviews), 1)


def submit_review(
    user_id: str, display_name: str, rating: int, comment: str, now: datetime
) -> str:
    rating = min(5, max(1, int(rating)))
    review_id = store.insert(
        REVIEWS,
        {
            "user_id": user_id,
            "display_name": display_name.strip(),
            "rating": rating,
            "comment": comment.strip(),
            "created_at": iso_z(now),
        },
    )
    _LOG.info("Stored review %s", review_id)
    return review_id


def learner_count() -> int:
    """Unique users holding at least one approved payment."""
    rows = store.select(
        "payment_proofs", [("status", "==", APPROVED)], limit=LEARNER_SCAN_LIMIT
    )
    return len({r.get("user_id") for r in rows if r.get("user_id")})


def filter_faqs(query: str, faqs: Sequence[Dict[str, str]] = FAQS) -> List[Dict[str, str]]:
    q = (query or "").strip().lower()
    if not q:
        return list(faqs)
    return [f for f in faqs if q in f["q"].lower() or q in f["a"].lower()]


__all__ = [
    "FAQS",
    "REVIEWS",
    "load_reviews",
    "average_rating",
    "submit_review",
    "learner_count",
    "filter_faqs",
]
