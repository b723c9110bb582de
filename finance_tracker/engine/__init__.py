from .allocation import allocate_to_debts, allocate_to_savings
from .pacing import analyze_pacing, compute_pacing
from .planner import PlanService, build_plan
from .progress import compute_plan_progress, compute_progress
from .urgency import classify_urgency, upcoming_due_dates

__all__ = [
    "PlanService",
    "allocate_to_debts",
    "allocate_to_savings",
    "analyze_pacing",
    "build_plan",
    "classify_urgency",
    "compute_pacing",
    "compute_plan_progress",
    "compute_progress",
    "upcoming_due_dates",
]
