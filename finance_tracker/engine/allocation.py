"""Weekly cash allocation across debts and savings goals.

Both allocators are pure: they never mutate their inputs and return the
same recommendations for the same arguments.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List

from ..data_model import Debt, DebtRecommendation, RecurringDebt, SavingGoal, SavingsRecommendation, parse_date
from .urgency import PRIORITY_ORDER, UrgencyAssessment, classify_urgency

logger = logging.getLogger(__name__)

URGENT_MULTIPLIER = 1.5
SECOND_PASS_MIN_POOL = 10.0
MIN_DEBT_PAYMENT = 5.0
PRIORITY_CAP_FACTORS = {"high": 0.4, "medium": 0.3, "low": 0.2}
MIN_SAVINGS_CONTRIBUTION = 5.0
_EPSILON = 1e-9


def round_cents(value: float, *caps: float) -> float:
    """Rounds to cents without ever rounding above any of the caps."""
    rounded = round(value, 2)
    cap = min(caps) if caps else rounded
    if rounded > cap + _EPSILON:
        rounded = math.floor(cap * 100) / 100
    return rounded


@dataclass
class DebtAnalysis:
    debt: Debt
    remaining_amount: float
    urgency: UrgencyAssessment

    @property
    def minimum_weekly_payment(self) -> float:
        return self.remaining_amount / self.urgency.weeks_left


def analyze_debt(debt: Debt, today: dt.date | dt.datetime) -> DebtAnalysis:
    return DebtAnalysis(debt, debt.remaining_amount, classify_urgency(debt, today))


def _recommend(analysis: DebtAnalysis, payment: float, raw: float) -> DebtRecommendation:
    """Weeks needed are counted from the unrounded payment."""
    return DebtRecommendation(
        debt_id=analysis.debt.id,
        debt_name=analysis.debt.name,
        current_amount=analysis.remaining_amount,
        suggested_payment=payment,
        priority=analysis.urgency.priority,
        days_left=analysis.urgency.days_left,
        reason=analysis.urgency.reason,
        weeks_paid=0,
        total_weeks_needed=math.ceil(analysis.remaining_amount / raw),
    )


def allocate_to_debts(
    debts: Iterable[Debt],
    available_money: float,
    today: dt.date | dt.datetime,
) -> List[DebtRecommendation]:
    """Splits the weekly pool across debts, most urgent first.

    Urgent debts get up to 1.5x their minimum weekly payment; the rest
    share what is left, capped by a fraction of the pool that depends on
    their priority. Recurring bills have no balance to pay down and are
    skipped.
    """
    candidates = [d for d in debts if not isinstance(d, RecurringDebt) and d.remaining_amount > 0]
    analyses = sorted(
        (analyze_debt(d, today) for d in candidates),
        key=lambda a: a.urgency.score,
        reverse=True,
    )

    remaining_money = available_money
    recommendations: List[DebtRecommendation] = []

    for analysis in analyses:
        if analysis.urgency.priority != "urgent" or remaining_money <= 0:
            continue
        raw = min(analysis.minimum_weekly_payment * URGENT_MULTIPLIER, analysis.remaining_amount, remaining_money)
        payment = round_cents(raw, analysis.remaining_amount, remaining_money)
        if payment <= 0:
            continue
        recommendations.append(_recommend(analysis, payment, raw))
        remaining_money -= payment
        logger.debug("urgent debt %s gets %.2f, %.2f left", analysis.debt.id, payment, remaining_money)

    recommended = {rec.debt_id for rec in recommendations}
    for analysis in analyses:
        if analysis.urgency.priority == "urgent" or analysis.debt.id in recommended:
            continue
        if remaining_money <= SECOND_PASS_MIN_POOL:
            continue
        cap = remaining_money * PRIORITY_CAP_FACTORS[analysis.urgency.priority]
        raw = min(analysis.minimum_weekly_payment, analysis.remaining_amount, cap)
        if raw < MIN_DEBT_PAYMENT:
            continue
        payment = round_cents(raw, analysis.remaining_amount, remaining_money)
        recommendations.append(_recommend(analysis, payment, raw))
        remaining_money -= payment
        logger.debug("%s debt %s gets %.2f", analysis.urgency.priority, analysis.debt.id, payment)

    return sorted(recommendations, key=lambda rec: PRIORITY_ORDER[rec.priority], reverse=True)


def _deadline_key(goal: SavingGoal) -> dt.date:
    return parse_date(goal.deadline) or dt.date.max


def allocate_to_savings(goals: Iterable[SavingGoal], available_money: float) -> List[SavingsRecommendation]:
    """Weighted split of the leftover money across unfinished goals.

    A single greedy pass in priority order (earliest deadline first within a
    priority). Small shares are bumped to MIN_SAVINGS_CONTRIBUTION, so later
    goals may get nothing when money is short.
    """
    eligible = sorted(
        (g for g in goals if g.current_amount < g.target_amount),
        key=lambda g: (-g.weight, _deadline_key(g)),
    )
    if not eligible or available_money <= 0:
        return []

    total_weight = sum(g.weight for g in eligible)
    remaining = available_money
    recommendations: List[SavingsRecommendation] = []

    for goal in eligible:
        if remaining <= 0:
            break
        goal_remaining = goal.target_amount - goal.current_amount
        if goal_remaining <= 0:
            continue
        if len(eligible) == 1:
            suggested = remaining
        else:
            suggested = remaining * goal.weight / total_weight
        if suggested < MIN_SAVINGS_CONTRIBUTION and remaining >= MIN_SAVINGS_CONTRIBUTION:
            suggested = MIN_SAVINGS_CONTRIBUTION
        suggested = round_cents(min(goal_remaining, suggested, remaining), goal_remaining, remaining)
        if suggested <= 0:
            continue
        recommendations.append(
            SavingsRecommendation(
                goal_id=goal.id,
                goal_name=goal.name,
                suggested_contribution=suggested,
                priority=goal.priority,
                remaining_amount=round(goal_remaining - suggested, 2),
                deadline=goal.deadline,
            )
        )
        remaining = max(0.0, remaining - suggested)

    return recommendations
