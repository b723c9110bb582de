from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from .base import clean_text, new_id, non_negative, positive
from .dates import to_iso_timestamp, utc_now

GOAL_PRIORITIES = ("essential", "important", "nice_to_have")
DEFAULT_GOAL_PRIORITY = "important"
PRIORITY_WEIGHTS = {"essential": 3, "important": 2, "nice_to_have": 1}


@dataclass
class SavingGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: str | None = None
    priority: str = DEFAULT_GOAL_PRIORITY
    notes: str | None = None
    created_at: str = ""
    updated_at: str = ""
    last_contribution_at: str | None = None
    last_contribution_note: str | None = None

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)

    @property
    def is_complete(self) -> bool:
        return self.current_amount >= self.target_amount

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS.get(self.priority, PRIORITY_WEIGHTS[DEFAULT_GOAL_PRIORITY])

    def contribute(self, amount: float, note: str | None = None, now: str | None = None) -> "SavingGoal":
        """Returns a copy with the amount added, clamped to the target."""
        stamp = now or to_iso_timestamp(utc_now())
        updated = replace(
            self,
            current_amount=min(self.target_amount, self.current_amount + amount),
            updated_at=stamp,
            last_contribution_at=stamp,
        )
        if note:
            updated.last_contribution_note = note
        return updated


def goal_from_dict(data: Dict[str, Any]) -> SavingGoal:
    created_at = clean_text(data.get("createdAt")) or to_iso_timestamp(utc_now())
    updated_at = clean_text(data.get("updatedAt")) or created_at
    target = positive(data.get("targetAmount")) or 0.0
    current = non_negative(data.get("currentAmount")) or 0.0
    priority = data.get("priority")
    return SavingGoal(
        id=clean_text(data.get("id")) or new_id(),
        name=clean_text(data.get("name")) or "Unnamed goal",
        target_amount=target,
        current_amount=min(current, target),
        deadline=clean_text(data.get("deadline")),
        priority=priority if priority in GOAL_PRIORITIES else DEFAULT_GOAL_PRIORITY,
        notes=clean_text(data.get("notes")),
        created_at=created_at,
        updated_at=updated_at,
        last_contribution_at=clean_text(data.get("lastContributionAt")),
        last_contribution_note=clean_text(data.get("lastContributionNote")),
    )


def goal_to_dict(goal: SavingGoal) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": goal.id,
        "name": goal.name,
        "targetAmount": goal.target_amount,
        "currentAmount": goal.current_amount,
        "deadline": goal.deadline,
        "priority": goal.priority,
        "createdAt": goal.created_at,
        "updatedAt": goal.updated_at,
        "lastContributionAt": goal.last_contribution_at,
    }
    if goal.notes:
        row["notes"] = goal.notes
    if goal.last_contribution_note:
        row["lastContributionNote"] = goal.last_contribution_note
    return row
