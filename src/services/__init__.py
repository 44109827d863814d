"""Backend-facing operations for the hub screens."""

from .payments import (
    InvalidTransitionError,
    PaymentBlockedError,
    ReceiptValidationError,
    approve_proof,
    fetch_all_proofs,
    fetch_user_proofs,
    reject_proof,
    submit_payment_proof,
)
from .enrollment import EnrollmentError, is_enrolled, submit_enrollment
from .profiles import ensure_profile, load_profile, load_profiles
from .reviews import average_rating, filter_faqs, learner_count, load_reviews, submit_review

__all__ = [
    "InvalidTransitionError",
    "PaymentBlockedError",
    "ReceiptValidationError",
    "approve_proof",
    "fetch_all_proofs",
    "fetch_user_proofs",
    "reject_proof",
    "submit_payment_proof",
    "EnrollmentError",
    "is_enrolled",
    "submit_enrollment",
    "ensure_profile",
    "load_profile",
    "load_profiles",
    "average_rating",
    "filter_faqs",
    "learner_count",
    "load_reviews",
    "submit_review",
]
