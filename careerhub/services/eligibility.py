"""
Eligibility Service

Decides whether a student may apply to a job from their admission batch.

HOW IT WORKS:
1. Normalize the job's eligibility labels ("2021–2025" -> "2021-2025")
2. Derive the student's batch label from batchStart/batchEnd
   - a 3 year gap is a lateral entry into a 4 year programme, so the label
     starts one year earlier: (2021, 2024) -> "2020-2024"
   - otherwise the label is "{batchStart}-{batchEnd}"
3. Eligible iff the label is in the normalized list (exact match, no ranges)

The evaluator never raises: bad or missing years simply match nothing.
"""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

EN_DASH = "–"


def normalize_label(label: str) -> str:
    """Replace en-dashes with hyphens and trim whitespace."""
    return str(label).replace(EN_DASH, "-").strip()


def normalize_labels(labels: Optional[Iterable[str]]) -> List[str]:
    if not labels:
        return []
    return [normalize_label(label) for label in labels]


def _coerce_year(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, float):
        try:
            value = float(str(value).strip())
        except ValueError:
            return None
    return int(value) if value.is_integer() else None


def batch_label(batch_start, batch_end) -> Optional[str]:
    """
    Compute a student's batch label.

    Returns None when either year is missing or non-numeric.
    """
    start = _coerce_year(batch_start)
    end = _coerce_year(batch_end)
    if start is None or end is None:
        return None

    if end - start == 3:
        return f"{start - 1}-{end}"
    return f"{start}-{end}"


def is_eligible(batch_start, batch_end, eligibility: Optional[Iterable[str]]) -> bool:
    label = batch_label(batch_start, batch_end)
    if label is None:
        return False
    return label in normalize_labels(eligibility)


def check_profile_eligibility(profiles, email: str, job: dict) -> bool:
    """
    Eligibility of a stored profile for a job document.

    A failed or empty profile fetch counts as "not eligible".
    """
    try:
        profile = profiles.get_by_email(email)
    except Exception as e:
        logger.error(f"Eligibility check failed for {email}: {e}")
        return False

    if not profile:
        return False

    return is_eligible(profile.get("batchStart"), profile.get("batchEnd"), job.get("eligibility"))
