from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .base import clean_text, new_id, non_negative, non_negative_int, to_number

DEBT_PRIORITIES = ("urgent", "high", "medium", "low")
PLAN_STATUSES = ("active", "completed", "needs_update")


@dataclass
class DebtRecommendation:
    debt_id: str
    debt_name: str
    current_amount: float
    suggested_payment: float
    priority: str
    days_left: int
    reason: str
    weeks_paid: int = 0
    total_weeks_needed: int = 0


@dataclass
class SavingsRecommendation:
    goal_id: str
    goal_name: str
    suggested_contribution: float
    priority: str
    remaining_amount: float
    deadline: str | None = None


@dataclass
class PlanProgress:
    weeks_completed: int = 0
    total_amount_paid: float = 0.0
    on_track_debts: int = 0
    behind_debts: int = 0
    completed_debts: int = 0
    projected_completion: str = ""
    income_gap: float = 0.0
    recommendations: List[str] = field(default_factory=list)


@dataclass
class SavedFinancialPlan:
    created_at: str
    updated_at: str
    weekly_income: float
    essential_expenses: float
    other_expenses: float
    available_for_debts: float
    weekly_target: float
    recommendations: List[DebtRecommendation] = field(default_factory=list)
    savings_recommendations: List[SavingsRecommendation] = field(default_factory=list)
    savings_contribution: float = 0.0
    recurring_expenses: float = 0.0
    progress: PlanProgress = field(default_factory=PlanProgress)
    status: str = "active"
    id: str = field(default_factory=new_id)

    @property
    def planned_outflow(self) -> float:
        return self.weekly_target + self.essential_expenses + self.other_expenses + self.recurring_expenses


def _amount(value: Any) -> float:
    return to_number(value) or 0.0


def recommendation_from_dict(data: Dict[str, Any]) -> DebtRecommendation:
    priority = data.get("priority")
    return DebtRecommendation(
        debt_id=str(data.get("debtId") or ""),
        debt_name=clean_text(data.get("debtName")) or "",
        current_amount=_amount(data.get("currentAmount")),
        suggested_payment=non_negative(data.get("suggestedPayment")) or 0.0,
        priority=priority if priority in DEBT_PRIORITIES else "low",
        days_left=int(_amount(data.get("daysLeft"))),
        reason=str(data.get("reason") or ""),
        weeks_paid=non_negative_int(data.get("weeksPaid")) or 0,
        total_weeks_needed=non_negative_int(data.get("totalWeeksNeeded")) or 0,
    )


def recommendation_to_dict(rec: DebtRecommendation) -> Dict[str, Any]:
    return {
        "debtId": rec.debt_id,
        "debtName": rec.debt_name,
        "currentAmount": rec.current_amount,
        "suggestedPayment": rec.suggested_payment,
        "priority": rec.priority,
        "daysLeft": rec.days_left,
        "reason": rec.reason,
        "weeksPaid": rec.weeks_paid,
        "totalWeeksNeeded": rec.total_weeks_needed,
    }


def savings_recommendation_from_dict(data: Dict[str, Any]) -> SavingsRecommendation:
    return SavingsRecommendation(
        goal_id=str(data.get("goalId") or ""),
        goal_name=clean_text(data.get("goalName")) or "",
        suggested_contribution=non_negative(data.get("suggestedContribution")) or 0.0,
        priority=str(data.get("priority") or "important"),
        remaining_amount=_amount(data.get("remainingAmount")),
        deadline=clean_text(data.get("deadline")),
    )


def savings_recommendation_to_dict(rec: SavingsRecommendation) -> Dict[str, Any]:
    return {
        "goalId": rec.goal_id,
        "goalName": rec.goal_name,
        "suggestedContribution": rec.suggested_contribution,
        "priority": rec.priority,
        "remainingAmount": rec.remaining_amount,
        "deadline": rec.deadline,
    }


def progress_from_dict(data: Dict[str, Any]) -> PlanProgress:
    return PlanProgress(
        weeks_completed=non_negative_int(data.get("weeksCompleted")) or 0,
        total_amount_paid=_amount(data.get("totalAmountPaid")),
        on_track_debts=non_negative_int(data.get("onTrackDebts")) or 0,
        behind_debts=non_negative_int(data.get("behindDebts")) or 0,
        completed_debts=non_negative_int(data.get("completedDebts")) or 0,
        projected_completion=str(data.get("projectedCompletion") or ""),
        income_gap=_amount(data.get("incomeGap")),
        recommendations=[str(r) for r in data.get("recommendations") or []],
    )


def progress_to_dict(progress: PlanProgress) -> Dict[str, Any]:
    return {
        "weeksCompleted": progress.weeks_completed,
        "totalAmountPaid": progress.total_amount_paid,
        "onTrackDebts": progress.on_track_debts,
        "behindDebts": progress.behind_debts,
        "completedDebts": progress.completed_debts,
        "projectedCompletion": progress.projected_completion,
        "incomeGap": progress.income_gap,
        "recommendations": list(progress.recommendations),
    }


def plan_from_dict(data: Dict[str, Any]) -> SavedFinancialPlan:
    status = data.get("status")
    return SavedFinancialPlan(
        id=clean_text(data.get("id")) or new_id(),
        created_at=str(data.get("createdAt") or ""),
        updated_at=str(data.get("updatedAt") or data.get("createdAt") or ""),
        weekly_income=_amount(data.get("weeklyIncome")),
        essential_expenses=_amount(data.get("essentialExpenses")),
        other_expenses=_amount(data.get("otherExpenses")),
        available_for_debts=_amount(data.get("availableForDebts")),
        weekly_target=_amount(data.get("weeklyTarget")),
        recommendations=[recommendation_from_dict(r) for r in data.get("recommendations") or []],
        savings_recommendations=[
            savings_recommendation_from_dict(r) for r in data.get("savingsRecommendations") or []
        ],
        savings_contribution=_amount(data.get("savingsContribution")),
        recurring_expenses=_amount(data.get("recurringExpenses")),
        progress=progress_from_dict(data.get("progress") or {}),
        status=status if status in PLAN_STATUSES else "active",
    )


def plan_to_dict(plan: SavedFinancialPlan) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "createdAt": plan.created_at,
        "updatedAt": plan.updated_at,
        "weeklyIncome": plan.weekly_income,
        "essentialExpenses": plan.essential_expenses,
        "otherExpenses": plan.other_expenses,
        "recurringExpenses": plan.recurring_expenses,
        "availableForDebts": plan.available_for_debts,
        "weeklyTarget": plan.weekly_target,
        "recommendations": [recommendation_to_dict(r) for r in plan.recommendations],
        "savingsRecommendations": [savings_recommendation_to_dict(r) for r in plan.savings_recommendations],
        "savingsContribution": plan.savings_contribution,
        "progress": progress_to_dict(plan.progress),
        "status": plan.status,
    }
