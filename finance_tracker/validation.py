"""Boundary validation for caller-supplied payloads.

Everything entering the allocation engines passes through here first; the
engines themselves assume finite, non-negative numbers.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, Iterable

from .data_model import (
    DEBT_KINDS,
    GOAL_PRIORITIES,
    PAYMENT_TYPES,
    RECURRING_FREQUENCY_DAYS,
    DailyExpense,
    DailyIncome,
    Debt,
    Payment,
    SavingGoal,
    debt_from_dict,
    expense_from_dict,
    goal_from_dict,
    income_from_dict,
    parse_date,
    payment_from_dict,
)
from .data_model.base import new_id
from .data_model.dates import to_iso_date, to_iso_timestamp


class ValidationError(ValueError):
    """Raised when a payload value is missing, non-finite or out of range."""


def require_amount(value: Any, field: str, *, positive: bool = False, default: float | None = None) -> float:
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field} is required.")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number.") from None
    if not math.isfinite(amount):
        raise ValidationError(f"{field} must be a finite number.")
    if positive and amount <= 0:
        raise ValidationError(f"{field} must be greater than zero.")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative.")
    return amount


def require_count(value: Any, field: str) -> int:
    amount = require_amount(value, field, positive=True)
    if amount != int(amount):
        raise ValidationError(f"{field} must be a whole number.")
    return int(amount)


def require_text(value: Any, field: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.")
    return text


def optional_text(value: Any) -> str | None:
    text = str(value or "").strip()
    return text or None


def require_choice(value: Any, field: str, choices: Iterable[str], default: str) -> str:
    if value is None or value == "":
        return default
    options = tuple(choices)
    if value not in options:
        raise ValidationError(f"{field} must be one of: {', '.join(options)}.")
    return str(value)


def require_date(value: Any, field: str, *, default: str | None = None) -> str | None:
    if value is None or value == "":
        return default
    if parse_date(str(value)) is None:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD).")
    return str(value).strip()


def debt_from_payload(payload: Dict[str, Any], now: dt.datetime, existing: Debt | None = None) -> Debt:
    """Builds a debt from an add/edit form payload.

    When editing, identity, payments and creation time come from the
    existing record.
    """
    kind = require_choice(payload.get("kind"), "kind", DEBT_KINDS, "loan")
    record: Dict[str, Any] = {
        "id": existing.id if existing else new_id(),
        "name": require_text(payload.get("name"), "name"),
        "description": optional_text(payload.get("description")),
        "totalAmount": require_amount(payload.get("totalAmount"), "totalAmount", default=0.0),
        "startDate": require_date(payload.get("startDate"), "startDate", default=to_iso_date(now)),
        "dueDate": require_date(payload.get("dueDate"), "dueDate"),
        "createdAt": existing.created_at if existing else to_iso_timestamp(now),
        "kind": kind,
    }
    if payload.get("interestRate") not in (None, ""):
        record["interestRate"] = require_amount(payload.get("interestRate"), "interestRate")
    if kind == "recurring":
        record["recurringAmount"] = require_amount(payload.get("recurringAmount"), "recurringAmount", positive=True)
        record["recurringFrequency"] = require_choice(
            payload.get("recurringFrequency"), "recurringFrequency", RECURRING_FREQUENCY_DAYS, "monthly"
        )
    elif kind == "installment":
        record["installmentAmount"] = require_amount(
            payload.get("installmentAmount"), "installmentAmount", positive=True
        )
        record["totalInstallments"] = require_count(payload.get("totalInstallments"), "totalInstallments")
    if kind != "recurring" and record["totalAmount"] <= 0:
        raise ValidationError("totalAmount must be greater than zero.")

    debt = debt_from_dict(record)
    if existing:
        debt.payments = list(existing.payments)
        debt.refresh_derived()
    return debt


def payment_from_payload(payload: Dict[str, Any], now: dt.datetime) -> Payment:
    return payment_from_dict(
        {
            "id": new_id(),
            "amount": require_amount(payload.get("amount"), "amount", positive=True),
            "date": require_date(payload.get("date"), "date", default=to_iso_date(now)),
            "type": require_choice(payload.get("type"), "type", PAYMENT_TYPES, "principal"),
            "note": optional_text(payload.get("note")),
        }
    )


def goal_from_payload(payload: Dict[str, Any], now: dt.datetime, existing: SavingGoal | None = None) -> SavingGoal:
    stamp = to_iso_timestamp(now)
    target = require_amount(payload.get("targetAmount"), "targetAmount", positive=True)
    current = require_amount(payload.get("currentAmount"), "currentAmount", default=0.0)
    return goal_from_dict(
        {
            "id": existing.id if existing else new_id(),
            "name": require_text(payload.get("name"), "name"),
            "targetAmount": target,
            "currentAmount": min(current, target),
            "deadline": require_date(payload.get("deadline"), "deadline"),
            "priority": require_choice(payload.get("priority"), "priority", GOAL_PRIORITIES, "important"),
            "notes": optional_text(payload.get("notes")),
            "createdAt": existing.created_at if existing else stamp,
            "updatedAt": stamp,
            "lastContributionAt": existing.last_contribution_at if existing else None,
            "lastContributionNote": existing.last_contribution_note if existing else None,
        }
    )


def income_from_payload(payload: Dict[str, Any], now: dt.datetime) -> DailyIncome:
    return income_from_dict(
        {
            "id": new_id(),
            "date": require_date(payload.get("date"), "date", default=to_iso_date(now)),
            "amount": require_amount(payload.get("amount"), "amount", positive=True),
            "note": optional_text(payload.get("note")),
        }
    )


def expense_from_payload(payload: Dict[str, Any], now: dt.datetime) -> DailyExpense:
    entry = expense_from_dict(
        {
            "id": new_id(),
            "date": require_date(payload.get("date"), "date", default=to_iso_date(now)),
            "foodAmount": require_amount(payload.get("foodAmount"), "foodAmount", default=0.0),
            "gasAmount": require_amount(payload.get("gasAmount"), "gasAmount", default=0.0),
            "otherAmount": require_amount(payload.get("otherAmount"), "otherAmount", default=0.0),
            "note": optional_text(payload.get("note")),
        }
    )
    if entry.total <= 0:
        raise ValidationError("At least one expense amount must be greater than zero.")
    return entry


def plan_inputs_from_payload(payload: Dict[str, Any]) -> Dict[str, float]:
    return {
        "weekly_income": require_amount(payload.get("weeklyIncome"), "weeklyIncome", positive=True),
        "essential_expenses": require_amount(payload.get("essentialExpenses"), "essentialExpenses", default=0.0),
        "other_expenses": require_amount(payload.get("otherExpenses"), "otherExpenses", default=0.0),
    }
