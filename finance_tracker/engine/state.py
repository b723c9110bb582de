import datetime as dt
import json
import logging
from typing import Dict, List

import pandas as pd

from ..data_model import (
    DailyExpense,
    DailyIncome,
    Debt,
    Payment,
    SavedFinancialPlan,
    SavingGoal,
    debt_from_dict,
    debt_to_dict,
    expense_from_dict,
    expense_to_dict,
    goal_from_dict,
    goal_to_dict,
    income_from_dict,
    income_to_dict,
    plan_from_dict,
    plan_to_dict,
)
from ..data_model.dates import to_iso_timestamp
from ..validation import ValidationError
from .aggregate import expenses_frame, incomes_frame, summarize_ledger, weekly_expense_total, weekly_income_total
from .storage import delete_record, load_record, load_records, save_record, save_records

logger = logging.getLogger(__name__)

IMPORT_REQUIRED_FIELDS = ("id", "name", "startDate")


class DebtState:
    def __init__(self, storage_path: str = "user_data/debts.json"):
        self.storage_path = storage_path
        self.debts: List[Debt] = [debt_from_dict(row) for row in load_records(storage_path)]

    def list_debts(self) -> List[Debt]:
        return list(self.debts)

    def get(self, debt_id: str) -> Debt | None:
        return next((debt for debt in self.debts if debt.id == debt_id), None)

    def save(self, debt: Debt) -> None:
        for index, existing in enumerate(self.debts):
            if existing.id == debt.id:
                self.debts[index] = debt
                break
        else:
            self.debts.append(debt)
        self._save()

    def delete(self, debt_id: str) -> bool:
        kept = [debt for debt in self.debts if debt.id != debt_id]
        if len(kept) == len(self.debts):
            return False
        self.debts = kept
        self._save()
        return True

    def add_payment(self, debt_id: str, payment: Payment) -> Debt | None:
        debt = self.get(debt_id)
        if debt is None:
            return None
        debt.add_payment(payment)
        self._save()
        logger.info("Recorded %s payment of %.2f on debt %s", payment.type, payment.amount, debt_id)
        return debt

    def delete_payment(self, debt_id: str, payment_id: str) -> Debt | None:
        debt = self.get(debt_id)
        if debt is None or not debt.delete_payment(payment_id):
            return None
        self._save()
        return debt

    def export_json(self) -> str:
        return json.dumps([debt_to_dict(debt) for debt in self.debts], indent=2, ensure_ascii=False)

    def import_json(self, raw_text: str) -> int:
        """Replaces the whole collection with an exported JSON document."""
        try:
            rows = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Import file is not valid JSON: {exc}") from exc
        if not isinstance(rows, list):
            raise ValidationError("Import file must contain a list of debts.")
        for row in rows:
            if not isinstance(row, dict) or any(not row.get(key) for key in IMPORT_REQUIRED_FIELDS):
                raise ValidationError("Every imported debt needs an id, name and startDate.")
            if isinstance(row.get("totalAmount"), bool) or not isinstance(row.get("totalAmount"), (int, float)):
                raise ValidationError("Every imported debt needs a numeric totalAmount.")
            if not isinstance(row.get("payments"), list):
                raise ValidationError("Every imported debt needs a payments list.")
        self.debts = [debt_from_dict(row) for row in rows]
        self._save()
        logger.info("Imported %d debts into %s", len(self.debts), self.storage_path)
        return len(self.debts)

    def _save(self) -> None:
        save_records(self.storage_path, [debt_to_dict(debt) for debt in self.debts])


class SavingGoalState:
    def __init__(self, storage_path: str = "user_data/saving_goals.json"):
        self.storage_path = storage_path
        self.goals: List[SavingGoal] = [goal_from_dict(row) for row in load_records(storage_path)]

    def list_goals(self) -> List[SavingGoal]:
        return list(self.goals)

    def get(self, goal_id: str) -> SavingGoal | None:
        return next((goal for goal in self.goals if goal.id == goal_id), None)

    def save(self, goal: SavingGoal) -> None:
        for index, existing in enumerate(self.goals):
            if existing.id == goal.id:
                self.goals[index] = goal
                break
        else:
            self.goals.append(goal)
        self._save()

    def delete(self, goal_id: str) -> bool:
        kept = [goal for goal in self.goals if goal.id != goal_id]
        if len(kept) == len(self.goals):
            return False
        self.goals = kept
        self._save()
        return True

    def contribute(self, goal_id: str, amount: float, note: str | None, now: dt.datetime) -> SavingGoal | None:
        goal = self.get(goal_id)
        if goal is None:
            return None
        updated = goal.contribute(amount, note=note, now=to_iso_timestamp(now))
        self.save(updated)
        return updated

    def _save(self) -> None:
        save_records(self.storage_path, [goal_to_dict(goal) for goal in self.goals])


class LedgerState:
    """Daily income and expense logs."""

    def __init__(
        self,
        income_path: str = "user_data/daily_incomes.json",
        expense_path: str = "user_data/daily_expenses.json",
    ):
        self.income_path = income_path
        self.expense_path = expense_path
        self.incomes: List[DailyIncome] = [income_from_dict(row) for row in load_records(income_path)]
        self.expenses: List[DailyExpense] = [expense_from_dict(row) for row in load_records(expense_path)]

    def add_income(self, entry: DailyIncome) -> None:
        self.incomes.append(entry)
        save_records(self.income_path, [income_to_dict(e) for e in self.incomes])

    def delete_income(self, entry_id: str) -> bool:
        kept = [e for e in self.incomes if e.id != entry_id]
        if len(kept) == len(self.incomes):
            return False
        self.incomes = kept
        save_records(self.income_path, [income_to_dict(e) for e in self.incomes])
        return True

    def add_expense(self, entry: DailyExpense) -> None:
        self.expenses.append(entry)
        save_records(self.expense_path, [expense_to_dict(e) for e in self.expenses])

    def delete_expense(self, entry_id: str) -> bool:
        kept = [e for e in self.expenses if e.id != entry_id]
        if len(kept) == len(self.expenses):
            return False
        self.expenses = kept
        save_records(self.expense_path, [expense_to_dict(e) for e in self.expenses])
        return True

    def weekly_income_total(self, now: dt.datetime) -> float:
        return weekly_income_total(self.incomes, now)

    def weekly_expense_total(self, now: dt.datetime) -> Dict[str, float]:
        return weekly_expense_total(self.expenses, now)

    def summary(self, kind: str, freq: str = "W") -> pd.DataFrame:
        frame = expenses_frame(self.expenses) if kind == "expenses" else incomes_frame(self.incomes)
        return summarize_ledger(frame, freq=freq)


class PlanRepository:
    """Single-slot store for the one active financial plan."""

    def __init__(self, storage_path: str = "user_data/financial_plan.json"):
        self.storage_path = storage_path

    def get(self) -> SavedFinancialPlan | None:
        record = load_record(self.storage_path)
        return plan_from_dict(record) if record else None

    def put(self, plan: SavedFinancialPlan) -> None:
        save_record(self.storage_path, plan_to_dict(plan))
        logger.info("Stored financial plan %s", plan.id)

    def delete(self) -> None:
        delete_record(self.storage_path)
        logger.info("Deleted financial plan at %s", self.storage_path)
