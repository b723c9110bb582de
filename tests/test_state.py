import datetime as dt
import json

import pytest

from finance_tracker.data_model import DailyExpense, DailyIncome, Payment, SavedFinancialPlan, debt_from_dict, goal_from_dict
from finance_tracker.engine.state import DebtState, LedgerState, PlanRepository, SavingGoalState
from finance_tracker.validation import ValidationError

NOW = dt.datetime(2026, 3, 10, 12, 0)


def _debt(debt_id, **extra):
    record = {
        "id": debt_id,
        "name": debt_id.title(),
        "totalAmount": 500.0,
        "startDate": "2026-01-01",
        "dueDate": "2026-06-01",
        "createdAt": "2026-01-01T00:00:00.000Z",
    }
    record.update(extra)
    return debt_from_dict(record)


def test_debt_state_persists_across_instances(tmp_path):
    path = str(tmp_path / "debts.json")
    state = DebtState(path)
    state.save(_debt("car"))
    state.add_payment("car", Payment(id="p1", amount=120.0, date="2026-02-01"))

    reloaded = DebtState(path)

    assert [d.id for d in reloaded.list_debts()] == ["car"]
    assert reloaded.get("car").remaining_amount == 380.0


def test_debt_state_update_delete_and_missing_ids(tmp_path):
    state = DebtState(str(tmp_path / "debts.json"))
    state.save(_debt("car"))
    state.save(_debt("car", name="Car loan"))

    assert len(state.list_debts()) == 1
    assert state.get("car").name == "Car loan"
    assert state.add_payment("nope", Payment(id="p", amount=1.0, date="2026-02-01")) is None
    assert state.delete_payment("car", "nope") is None
    assert state.delete("nope") is False
    assert state.delete("car") is True
    assert state.list_debts() == []


def test_export_then_import_reproduces_balances(tmp_path):
    source = DebtState(str(tmp_path / "a.json"))
    source.save(_debt("car"))
    source.save(
        _debt(
            "phone",
            kind="installment",
            totalAmount=600.0,
            installmentAmount=100.0,
            totalInstallments=6,
        )
    )
    source.add_payment("car", Payment(id="p1", amount=123.45, date="2026-02-01"))
    source.add_payment("phone", Payment(id="p2", amount=210.0, date="2026-02-01"))
    exported = source.export_json()

    target = DebtState(str(tmp_path / "b.json"))
    count = target.import_json(exported)

    assert count == 2
    assert [d.remaining_amount for d in target.list_debts()] == [d.remaining_amount for d in source.list_debts()]
    assert target.get("phone").completed_installments == 2
    assert DebtState(str(tmp_path / "b.json")).export_json() == exported


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"id": "x"}),
        json.dumps([{"id": "x", "name": "X", "totalAmount": 10, "payments": []}]),
        json.dumps([{"id": "x", "name": "X", "startDate": "2026-01-01", "totalAmount": "10", "payments": []}]),
        json.dumps([{"id": "x", "name": "X", "startDate": "2026-01-01", "totalAmount": 10}]),
    ],
)
def test_invalid_import_is_rejected_and_keeps_existing_debts(tmp_path, raw):
    state = DebtState(str(tmp_path / "debts.json"))
    state.save(_debt("car"))

    with pytest.raises(ValidationError):
        state.import_json(raw)

    assert [d.id for d in state.list_debts()] == ["car"]


def test_goal_contribution_is_saved(tmp_path):
    path = str(tmp_path / "goals.json")
    state = SavingGoalState(path)
    state.save(goal_from_dict({"id": "g", "name": "Trip", "targetAmount": 200}))

    updated = state.contribute("g", 250.0, "bonus", NOW)

    assert updated.current_amount == 200.0
    assert SavingGoalState(path).get("g").last_contribution_note == "bonus"
    assert state.contribute("missing", 10.0, None, NOW) is None


def test_ledger_state_tracks_entries_and_totals(tmp_path):
    state = LedgerState(str(tmp_path / "income.json"), str(tmp_path / "expenses.json"))
    state.add_income(DailyIncome(id="i1", date="2026-03-09", amount=300.0))
    state.add_income(DailyIncome(id="i2", date="2026-03-08", amount=50.0))
    state.add_expense(DailyExpense(id="e1", date="2026-03-09", food_amount=40.0, other_amount=10.0))

    assert state.delete_income("i2") is True
    assert state.delete_income("i2") is False

    reloaded = LedgerState(str(tmp_path / "income.json"), str(tmp_path / "expenses.json"))
    assert reloaded.weekly_income_total(NOW) == 300.0
    assert reloaded.weekly_expense_total(NOW)["total"] == 50.0
    assert list(reloaded.summary("expenses", freq="M")["Total"]) == [50.0]


def test_plan_repository_single_slot(tmp_path):
    repo = PlanRepository(str(tmp_path / "plan.json"))
    assert repo.get() is None

    plan = SavedFinancialPlan(
        created_at="2026-03-10T12:00:00.000Z",
        updated_at="2026-03-10T12:00:00.000Z",
        weekly_income=800.0,
        essential_expenses=200.0,
        other_expenses=100.0,
        available_for_debts=500.0,
        weekly_target=150.0,
        id="plan-1",
    )
    repo.put(plan)

    assert repo.get() == plan

    repo.delete()
    assert repo.get() is None
