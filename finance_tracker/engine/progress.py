from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, List, Sequence

from ..data_model import Debt, DebtRecommendation, PlanProgress, SavedFinancialPlan, parse_timestamp
from ..data_model.dates import to_iso_timestamp

ON_TRACK_RATIO = 0.9
WEEK = dt.timedelta(days=7)


def weeks_between(start: dt.datetime, now: dt.datetime) -> int:
    return max(0, math.floor((now - start) / WEEK))


def principal_paid_since(debt: Debt, start: dt.datetime) -> float:
    total = 0.0
    for payment in debt.payments:
        if not payment.is_principal():
            continue
        # date-only payments count as midnight, so one logged on the day a
        # plan is saved falls before the plan and is not counted
        paid_at = parse_timestamp(payment.date)
        if paid_at is not None and paid_at >= start:
            total += payment.amount
    return total


def compute_plan_progress(
    recommendations: Sequence[DebtRecommendation],
    plan_created_at: str,
    debts: Iterable[Debt],
    now: dt.datetime,
    actual_weekly_income: float = 0.0,
    planned_outflow: float = 0.0,
) -> PlanProgress:
    """Measures the live debts against the weekly payments a plan suggested.

    Only principal payments made since the plan was created count towards
    progress; recommendations whose debt has since been deleted are ignored.
    """
    created_at = parse_timestamp(plan_created_at)
    if created_at is None:
        return PlanProgress(projected_completion=to_iso_timestamp(now))

    weeks_completed = weeks_between(created_at, now)
    live = {debt.id: debt for debt in debts}

    progress = PlanProgress(weeks_completed=weeks_completed)
    notes: List[str] = []
    total_remaining = 0.0

    for rec in recommendations:
        debt = live.get(rec.debt_id)
        if debt is None:
            continue
        paid = principal_paid_since(debt, created_at)
        progress.total_amount_paid += paid
        expected = rec.suggested_payment * weeks_completed
        remaining = debt.total_amount - debt.principal_paid
        total_remaining += max(0.0, remaining)

        if remaining <= 0:
            progress.completed_debts += 1
        elif paid >= expected * ON_TRACK_RATIO:
            progress.on_track_debts += 1
        else:
            progress.behind_debts += 1
            notes.append(f"{debt.name}: Need ${expected - paid:.2f} more to catch up")

    weekly_target = sum(rec.suggested_payment for rec in recommendations)
    weeks_to_complete = math.ceil(total_remaining / weekly_target) if weekly_target > 0 else 0
    progress.projected_completion = to_iso_timestamp(now + weeks_to_complete * WEEK)

    progress.income_gap = max(0.0, planned_outflow - actual_weekly_income)
    if progress.income_gap > 0:
        notes.append(f"You need to earn ${progress.income_gap:.2f} more per week to meet your plan")

    progress.recommendations = notes
    return progress


def compute_progress(plan: SavedFinancialPlan, debts: Iterable[Debt], now: dt.datetime, actual_weekly_income: float) -> PlanProgress:
    return compute_plan_progress(
        plan.recommendations,
        plan.created_at,
        debts,
        now,
        actual_weekly_income=actual_weekly_income,
        planned_outflow=plan.planned_outflow,
    )


def plan_status(progress: PlanProgress) -> str:
    if progress.behind_debts:
        return "needs_update"
    if progress.completed_debts and not progress.on_track_debts:
        return "completed"
    return "active"
