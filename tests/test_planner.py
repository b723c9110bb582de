import datetime as dt

import pytest

from finance_tracker.data_model import DailyExpense, DailyIncome, Payment, debt_from_dict, goal_from_dict
from finance_tracker.engine import PlanService, build_plan, compute_progress
from finance_tracker.engine.state import DebtState, LedgerState, PlanRepository, SavingGoalState
from finance_tracker.validation import ValidationError

NOW = dt.datetime(2026, 3, 10, 12, 0)


def _loan():
    return debt_from_dict(
        {
            "id": "card",
            "name": "Credit card",
            "kind": "credit_card",
            "totalAmount": 100.0,
            "startDate": "2026-01-01",
            "dueDate": "2026-03-12",
            "createdAt": "2026-01-01T00:00:00.000Z",
        }
    )


def _phone_bill():
    return debt_from_dict(
        {
            "id": "phone",
            "name": "Phone",
            "kind": "recurring",
            "recurringAmount": 60.0,
            "recurringFrequency": "monthly",
            "startDate": "2026-01-01",
            "dueDate": "2026-03-15",
        }
    )


def _goal():
    return goal_from_dict({"id": "fund", "name": "Emergency fund", "targetAmount": 1000.0, "priority": "essential"})


def _service(tmp_path):
    debts = DebtState(str(tmp_path / "debts.json"))
    goals = SavingGoalState(str(tmp_path / "goals.json"))
    ledger = LedgerState(str(tmp_path / "income.json"), str(tmp_path / "expenses.json"))
    debts.save(_loan())
    debts.save(_phone_bill())
    goals.save(_goal())
    return PlanService(debts, goals, ledger, PlanRepository(str(tmp_path / "plan.json")))


def test_build_plan_deducts_recurring_bills_and_saves_leftover():
    plan = build_plan([_loan(), _phone_bill()], [_goal()], 800.0, 200.0, 100.0, NOW)

    assert plan.recurring_expenses == 14.0
    assert plan.available_for_debts == 486.0
    assert [r.debt_id for r in plan.recommendations] == ["card"]
    assert plan.weekly_target == 100.0
    assert plan.savings_contribution == 386.0
    assert plan.savings_recommendations[0].goal_id == "fund"
    assert plan.created_at == "2026-03-10T12:00:00.000Z"


def test_preview_rejects_plans_with_no_money_left(tmp_path):
    service = _service(tmp_path)

    with pytest.raises(ValidationError):
        service.preview(300.0, 250.0, 50.0, NOW)


def test_preview_does_not_store_anything(tmp_path):
    service = _service(tmp_path)

    service.preview(800.0, 200.0, 100.0, NOW)

    assert service.get_plan(NOW) is None


def test_saved_plan_progress_is_recomputed_on_read(tmp_path):
    service = _service(tmp_path)
    saved = service.save_plan(800.0, 200.0, 100.0, NOW)
    service.debts.add_payment("card", Payment(id="p1", amount=100.0, date="2026-03-11T08:00:00.000Z"))

    plan = service.get_plan(NOW + dt.timedelta(days=8))

    assert plan.id == saved.id
    assert plan.progress.weeks_completed == 1
    assert plan.progress.completed_debts == 1
    assert plan.progress.total_amount_paid == 100.0
    assert plan.status == "completed"
    assert service.plans.get().progress.completed_debts == 0


def test_persist_stores_recomputed_progress(tmp_path):
    service = _service(tmp_path)
    service.save_plan(800.0, 200.0, 100.0, NOW)
    plan = service.get_plan(NOW + dt.timedelta(days=7))

    service.persist(plan)

    stored = service.plans.get()
    assert stored.progress.weeks_completed == 1
    assert stored.status == "needs_update"


def test_plan_falls_behind_without_payments(tmp_path):
    service = _service(tmp_path)
    service.save_plan(800.0, 200.0, 100.0, NOW)

    plan = service.get_plan(NOW + dt.timedelta(days=14))

    assert plan.status == "needs_update"
    assert plan.progress.behind_debts == 1
    assert plan.progress.recommendations[0] == "Credit card: Need $200.00 more to catch up"


def test_refresh_uses_logged_week_and_keeps_identity(tmp_path):
    service = _service(tmp_path)
    saved = service.save_plan(800.0, 200.0, 100.0, NOW)
    service.ledger.add_income(DailyIncome(id="i1", date="2026-03-12", amount=600.0))
    service.ledger.add_expense(DailyExpense(id="e1", date="2026-03-13", food_amount=50.0, gas_amount=30.0, other_amount=20.0))

    later = NOW + dt.timedelta(days=5)
    plan = service.refresh_plan(later)

    assert plan.id == saved.id
    assert plan.created_at == saved.created_at
    assert plan.weekly_income == 600.0
    assert plan.essential_expenses == 80.0
    assert plan.other_expenses == 20.0
    assert service.plans.get().weekly_income == 600.0


def test_refresh_and_delete_without_plan(tmp_path):
    service = _service(tmp_path)

    assert service.refresh_plan(NOW) is None

    service.save_plan(800.0, 200.0, 100.0, NOW)
    service.delete_plan()

    assert service.get_plan(NOW) is None


def test_recurring_bills_count_towards_income_gap():
    rent = debt_from_dict(
        {
            "id": "rent",
            "name": "Rent",
            "kind": "recurring",
            "recurringAmount": 100.0,
            "recurringFrequency": "weekly",
            "startDate": "2026-01-01",
        }
    )
    loan = debt_from_dict(
        {
            "id": "loan",
            "name": "Loan",
            "totalAmount": 200.0,
            "startDate": "2026-01-01",
            "dueDate": "2026-03-12",
        }
    )
    plan = build_plan([rent, loan], [], 500.0, 200.0, 0.0, NOW)

    progress = compute_progress(plan, [rent, loan], NOW, 450.0)

    assert plan.weekly_target == 200.0
    assert plan.planned_outflow == 500.0
    assert progress.income_gap == 50.0
    assert progress.recommendations[-1] == "You need to earn $50.00 more per week to meet your plan"
