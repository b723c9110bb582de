from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .base import clean_text, new_id, non_negative
from .dates import to_iso_date, utc_now


@dataclass
class DailyIncome:
    id: str
    date: str
    amount: float
    note: str | None = None


@dataclass
class DailyExpense:
    id: str
    date: str
    food_amount: float = 0.0
    gas_amount: float = 0.0
    other_amount: float = 0.0
    note: str | None = None

    @property
    def total(self) -> float:
        return self.food_amount + self.gas_amount + self.other_amount


def income_from_dict(data: Dict[str, Any]) -> DailyIncome:
    return DailyIncome(
        id=clean_text(data.get("id")) or new_id(),
        date=clean_text(data.get("date")) or to_iso_date(utc_now()),
        amount=non_negative(data.get("amount")) or 0.0,
        note=clean_text(data.get("note")),
    )


def income_to_dict(entry: DailyIncome) -> Dict[str, Any]:
    row: Dict[str, Any] = {"id": entry.id, "date": entry.date, "amount": entry.amount}
    if entry.note:
        row["note"] = entry.note
    return row


def expense_from_dict(data: Dict[str, Any]) -> DailyExpense:
    return DailyExpense(
        id=clean_text(data.get("id")) or new_id(),
        date=clean_text(data.get("date")) or to_iso_date(utc_now()),
        food_amount=non_negative(data.get("foodAmount")) or 0.0,
        gas_amount=non_negative(data.get("gasAmount")) or 0.0,
        other_amount=non_negative(data.get("otherAmount")) or 0.0,
        note=clean_text(data.get("note")),
    )


def expense_to_dict(entry: DailyExpense) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": entry.id,
        "date": entry.date,
        "foodAmount": entry.food_amount,
        "gasAmount": entry.gas_amount,
        "otherAmount": entry.other_amount,
    }
    if entry.note:
        row["note"] = entry.note
    return row
