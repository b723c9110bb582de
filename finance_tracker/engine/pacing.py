"""Linear pacing check for a single debt, independent of any saved plan."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, List

from ..data_model import Debt, RecurringDebt, parse_date
from ..data_model.dates import days_between, days_until_due, weeks_left

NO_DUE_DATE_SPAN_DAYS = 365
BEHIND_THRESHOLD = 10.0
AHEAD_RATIO = 1.1
REDUCED_PAYMENT_RATIO = 0.8
PACING_STATUSES = ("urgent", "behind", "ahead", "onTrack")


@dataclass
class PacingResult:
    debt_id: str
    debt_name: str
    status: str
    days_left: int
    weekly_needed: float
    remaining_amount: float
    principal_paid: float
    expected_paid: float
    behind_amount: float
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "debtId": self.debt_id,
            "debtName": self.debt_name,
            "status": self.status,
            "daysLeft": self.days_left,
            "weeklyNeeded": self.weekly_needed,
            "remainingAmount": self.remaining_amount,
            "principalPaid": self.principal_paid,
            "expectedPaid": self.expected_paid,
            "behindAmount": self.behind_amount,
            "recommendation": self.recommendation,
        }


@dataclass
class PacingReport:
    items: List[PacingResult] = field(default_factory=list)
    total_behind: float = 0.0


def _total_days(debt: Debt, days_left: int) -> float:
    due = parse_date(debt.due_date)
    if due is None:
        return NO_DUE_DATE_SPAN_DAYS
    start = parse_date(debt.start_date) or due
    # Legacy formula: adds the full start-to-due span on top of the days
    # still left, so elapsed days are counted twice.
    return days_left + abs(days_between(start, due))


def compute_pacing(debt: Debt, today: dt.date | dt.datetime) -> PacingResult:
    principal_paid = debt.principal_paid
    remaining = debt.total_amount - principal_paid
    days_left = days_until_due(debt.due_date, today)

    total_days = _total_days(debt, days_left)
    days_passed = total_days - days_left
    if total_days > 0:
        expected_paid = debt.total_amount * days_passed / total_days
    else:
        expected_paid = debt.total_amount
    behind = max(0.0, expected_paid - principal_paid)

    weeks = weeks_left(days_left)
    weekly_needed = remaining / weeks

    if days_left < 0:
        status = "urgent"
        text = (
            f"URGENT! {abs(days_left)} days overdue. "
            f"You need ${weekly_needed:.2f} per week to catch up."
        )
    elif days_left <= 7:
        status = "urgent"
        text = f"CRITICAL! Only {days_left} days left. Pay the remaining ${remaining:.2f} now."
    elif behind > BEHIND_THRESHOLD:
        status = "behind"
        text = (
            f"You are ${behind:.2f} behind. "
            f"Raise your weekly payment to ${weekly_needed + behind / weeks:.2f} to recover."
        )
    elif principal_paid > expected_paid * AHEAD_RATIO:
        status = "ahead"
        text = (
            f"Great, you are ahead. You can reduce to ${weekly_needed * REDUCED_PAYMENT_RATIO:.2f} "
            "per week or focus on other debts."
        )
    else:
        status = "onTrack"
        text = f"Keep paying ${weekly_needed:.2f} per week to finish on time."

    return PacingResult(
        debt_id=debt.id,
        debt_name=debt.name,
        status=status,
        days_left=days_left,
        weekly_needed=weekly_needed,
        remaining_amount=remaining,
        principal_paid=principal_paid,
        expected_paid=expected_paid,
        behind_amount=behind,
        recommendation=text,
    )


def analyze_pacing(debts: Iterable[Debt], today: dt.date | dt.datetime) -> PacingReport:
    report = PacingReport()
    for debt in debts:
        if isinstance(debt, RecurringDebt) or not debt.is_active:
            continue
        result = compute_pacing(debt, today)
        if result.behind_amount > BEHIND_THRESHOLD:
            report.total_behind += result.behind_amount
        report.items.append(result)
    report.items.sort(key=lambda item: item.days_left)
    return report
