"""Utility modules."""
from contest_api.utils.db_utils import insert_if_absent
from contest_api.utils.time_utils import ensure_utc, utc_now
from contest_api.utils.validation import validate_answers, validate_id

__all__ = [
    "insert_if_absent",
    "ensure_utc",
    "utc_now",
    "validate_answers",
    "validate_id",
]
