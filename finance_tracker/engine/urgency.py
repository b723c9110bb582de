from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List

from ..data_model import Debt
from ..data_model.dates import days_until_due, weeks_left

OVERDUE_SCORE = 1000
PRIORITY_ORDER = {"urgent": 4, "high": 3, "medium": 2, "low": 1}


@dataclass
class UrgencyAssessment:
    priority: str
    days_left: int
    reason: str

    @property
    def score(self) -> int:
        """Sort key for allocation; overdue debts always come first."""
        return OVERDUE_SCORE if self.days_left < 0 else 100 - self.days_left

    @property
    def weeks_left(self) -> int:
        return weeks_left(self.days_left)


def classify_days_left(days_left: int) -> UrgencyAssessment:
    if days_left < 0:
        return UrgencyAssessment("urgent", days_left, f"OVERDUE! {abs(days_left)} days late")
    reason = f"Due in {days_left} days"
    if days_left <= 7:
        return UrgencyAssessment("urgent", days_left, reason)
    if days_left <= 30:
        return UrgencyAssessment("high", days_left, reason)
    if days_left <= 60:
        return UrgencyAssessment("medium", days_left, reason)
    return UrgencyAssessment("low", days_left, reason)


def classify_urgency(debt: Debt, today: dt.date | dt.datetime) -> UrgencyAssessment:
    return classify_days_left(days_until_due(debt.due_date, today))


@dataclass
class UpcomingDue:
    debt: Debt
    days_left: int


def upcoming_due_dates(
    debts: Iterable[Debt],
    today: dt.date | dt.datetime,
    days_before: int = 3,
    days_after: int = 1,
) -> List[UpcomingDue]:
    """Active debts whose due date falls inside the reminder window.

    The window runs from `days_after` days past due to `days_before` days
    ahead, nearest first.
    """
    upcoming: List[UpcomingDue] = []
    for debt in debts:
        if not debt.due_date or not debt.is_active:
            continue
        days_left = days_until_due(debt.due_date, today)
        if -days_after <= days_left <= days_before:
            upcoming.append(UpcomingDue(debt, days_left))
    return sorted(upcoming, key=lambda item: item.days_left)
