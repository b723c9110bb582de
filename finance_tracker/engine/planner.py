from __future__ import annotations

import datetime as dt
import logging
from dataclasses import replace
from typing import Iterable

from ..data_model import Debt, RecurringDebt, SavedFinancialPlan, SavingGoal
from ..data_model.dates import to_iso_timestamp
from ..validation import ValidationError
from .allocation import allocate_to_debts, allocate_to_savings
from .progress import compute_progress, plan_status
from .state import DebtState, LedgerState, PlanRepository, SavingGoalState

logger = logging.getLogger(__name__)


def recurring_weekly_total(debts: Iterable[Debt]) -> float:
    return sum(debt.weekly_amount for debt in debts if isinstance(debt, RecurringDebt))


def build_plan(
    debts: Iterable[Debt],
    goals: Iterable[SavingGoal],
    weekly_income: float,
    essential_expenses: float,
    other_expenses: float,
    now: dt.datetime,
) -> SavedFinancialPlan:
    """Allocates one week of money: recurring bills, then debts, then savings."""
    debts = list(debts)
    recurring = round(recurring_weekly_total(debts), 2)
    available = round(weekly_income - essential_expenses - other_expenses - recurring, 2)

    recommendations = allocate_to_debts(debts, available, now)
    weekly_target = round(sum(rec.suggested_payment for rec in recommendations), 2)
    savings = allocate_to_savings(goals, max(0.0, available - weekly_target))

    stamp = to_iso_timestamp(now)
    return SavedFinancialPlan(
        created_at=stamp,
        updated_at=stamp,
        weekly_income=weekly_income,
        essential_expenses=essential_expenses,
        other_expenses=other_expenses,
        available_for_debts=available,
        weekly_target=weekly_target,
        recommendations=recommendations,
        savings_recommendations=savings,
        savings_contribution=round(sum(rec.suggested_contribution for rec in savings), 2),
        recurring_expenses=recurring,
    )


class PlanService:
    """Builds, stores and re-reads the single saved plan against live data."""

    def __init__(self, debts: DebtState, goals: SavingGoalState, ledger: LedgerState, plans: PlanRepository):
        self.debts = debts
        self.goals = goals
        self.ledger = ledger
        self.plans = plans

    def with_progress(self, plan: SavedFinancialPlan, now: dt.datetime) -> SavedFinancialPlan:
        progress = compute_progress(plan, self.debts.list_debts(), now, self.ledger.weekly_income_total(now))
        return replace(plan, progress=progress, status=plan_status(progress))

    def preview(
        self,
        weekly_income: float,
        essential_expenses: float,
        other_expenses: float,
        now: dt.datetime,
    ) -> SavedFinancialPlan:
        plan = build_plan(
            self.debts.list_debts(),
            self.goals.list_goals(),
            weekly_income,
            essential_expenses,
            other_expenses,
            now,
        )
        _require_affordable(plan)
        return self.with_progress(plan, now)

    def save_plan(
        self,
        weekly_income: float,
        essential_expenses: float,
        other_expenses: float,
        now: dt.datetime,
    ) -> SavedFinancialPlan:
        plan = self.preview(weekly_income, essential_expenses, other_expenses, now)
        self.plans.put(plan)
        return plan

    def get_plan(self, now: dt.datetime) -> SavedFinancialPlan | None:
        """The stored plan with its progress recomputed; nothing is written."""
        plan = self.plans.get()
        if plan is None:
            return None
        return self.with_progress(plan, now)

    def persist(self, plan: SavedFinancialPlan) -> None:
        self.plans.put(plan)

    def refresh_plan(self, now: dt.datetime) -> SavedFinancialPlan | None:
        """Rebuilds recommendations from the last 7 days of logged income and expenses.

        The plan keeps its id and creation date so progress stays anchored.
        """
        current = self.plans.get()
        if current is None:
            return None
        expenses = self.ledger.weekly_expense_total(now)
        rebuilt = build_plan(
            self.debts.list_debts(),
            self.goals.list_goals(),
            self.ledger.weekly_income_total(now),
            expenses["food"] + expenses["gas"],
            expenses["other"],
            now,
        )
        _require_affordable(rebuilt)
        plan = self.with_progress(replace(rebuilt, id=current.id, created_at=current.created_at), now)
        self.plans.put(plan)
        logger.info("Refreshed plan %s: weekly target %.2f", plan.id, plan.weekly_target)
        return plan

    def delete_plan(self) -> None:
        self.plans.delete()


def _require_affordable(plan: SavedFinancialPlan) -> None:
    if plan.available_for_debts <= 0:
        raise ValidationError("Expenses exceed income; reduce expenses or increase income before planning.")
