"""
Deadline / date status classification.

diff_days is the whole number of days between now and the target, rounded
down, so anything in the past is negative and anything later today is 0.

Four label scales exist, one per screen that shows a badge:

    scale           <0          ==0        <=3        <=7        else
    job deadline    expired     -          urgent     soon       normal
    test deadline   expired     today      urgent     soon       normal
    test date       past        today      soon       upcoming   scheduled
    webinar date    completed   today      upcoming   soon       normal

The job scale has no "today" bucket; a deadline later today reads "0 days left".
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

ONE_DAY = timedelta(days=1)


def as_utc(value) -> datetime:
    """Naive datetimes (what pymongo returns) are UTC. ISO strings are parsed."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def diff_days(target: datetime, now: datetime) -> int:
    return math.floor((as_utc(target) - as_utc(now)) / ONE_DAY)


def is_deadline_passed(deadline: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Strict now > deadline. Agrees with the 'expired' bucket at every instant."""
    if not deadline:
        return False
    now = now or utc_now()
    return as_utc(now) > as_utc(deadline)


@dataclass(frozen=True)
class StatusScale:
    past: str
    past_text: str
    today: Optional[str]
    today_text: Optional[str]
    within_three: str
    within_week: str
    later: str
    countdown: Callable[[int], str]

    def classify(self, target: Optional[datetime], now: Optional[datetime] = None) -> Optional[Dict[str, str]]:
        if not target:
            return None
        days = diff_days(target, now or utc_now())

        if days < 0:
            return {"status": self.past, "text": self.past_text}
        if days == 0 and self.today is not None:
            return {"status": self.today, "text": self.today_text}
        if days <= 3:
            return {"status": self.within_three, "text": self.countdown(days)}
        if days <= 7:
            return {"status": self.within_week, "text": self.countdown(days)}
        return {"status": self.later, "text": self.countdown(days)}


def _days_left(days: int) -> str:
    return f"{days} days left"


def _in_days(days: int) -> str:
    return f"In {days} days"


JOB_DEADLINE = StatusScale(
    past="expired", past_text="Expired",
    today=None, today_text=None,
    within_three="urgent", within_week="soon", later="normal",
    countdown=_days_left,
)

TEST_DEADLINE = StatusScale(
    past="expired", past_text="Expired",
    today="today", today_text="Today",
    within_three="urgent", within_week="soon", later="normal",
    countdown=_days_left,
)

TEST_DATE = StatusScale(
    past="past", past_text="Past",
    today="today", today_text="Today",
    within_three="soon", within_week="upcoming", later="scheduled",
    countdown=lambda days: f"In {days} day{'s' if days != 1 else ''}" if days <= 3 else _in_days(days),
)

WEBINAR_DATE = StatusScale(
    past="completed", past_text="Completed",
    today="today", today_text="Today!",
    within_three="upcoming", within_week="soon", later="normal",
    countdown=_in_days,
)


def classify_job_deadline(deadline, now=None):
    return JOB_DEADLINE.classify(deadline, now)


def classify_test_deadline(deadline, now=None):
    return TEST_DEADLINE.classify(deadline, now)


def classify_test_date(date, now=None):
    return TEST_DATE.classify(date, now)


def classify_webinar_date(date, now=None):
    return WEBINAR_DATE.classify(date, now)
