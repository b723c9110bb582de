import json

import pytest

from finance_tracker.data_model import (
    InstallmentDebt,
    LoanDebt,
    Payment,
    RecurringDebt,
    debt_from_dict,
    debt_summary,
    debt_to_dict,
    goal_from_dict,
)


def _loan(total=1000.0, payments=None):
    return LoanDebt(
        id="loan-1",
        name="Car loan",
        total_amount=total,
        start_date="2026-01-01",
        due_date="2026-12-31",
        payments=list(payments or []),
        created_at="2026-01-01T09:00:00.000Z",
    )


def test_remaining_amount_only_counts_principal_payments():
    debt = _loan()

    debt.add_payment(Payment(id="p1", amount=200.0, date="2026-02-01"))
    debt.add_payment(Payment(id="p2", amount=50.0, date="2026-02-01", type="interest"))
    debt.add_payment(Payment(id="p3", amount=10.0, date="2026-02-01", type="fee"))

    assert debt.remaining_amount == 800.0
    assert debt.principal_paid == 200.0
    assert debt.interest_paid == 50.0
    assert debt.fees_paid == 10.0
    assert debt.total_paid == 260.0


def test_remaining_amount_never_negative_and_debt_becomes_inactive():
    debt = _loan(total=100.0)

    debt.add_payment(Payment(id="p1", amount=150.0, date="2026-02-01"))

    assert debt.remaining_amount == 0.0
    assert not debt.is_active


def test_delete_payment_restores_balance():
    debt = _loan(payments=[Payment(id="p1", amount=300.0, date="2026-02-01")])

    assert debt.delete_payment("p1") is True
    assert debt.delete_payment("missing") is False
    assert debt.remaining_amount == 1000.0


def test_installment_count_follows_principal_paid():
    debt = InstallmentDebt(
        id="inst-1",
        name="Phone",
        total_amount=600.0,
        start_date="2026-01-01",
        installment_amount=100.0,
        total_installments=6,
    )

    debt.add_payment(Payment(id="p1", amount=250.0, date="2026-02-01"))
    assert debt.completed_installments == 2

    debt.add_payment(Payment(id="p2", amount=40.0, date="2026-02-08", type="interest"))
    assert debt.completed_installments == 2

    debt.add_payment(Payment(id="p3", amount=900.0, date="2026-02-15"))
    assert debt.completed_installments == 6

    debt.delete_payment("p3")
    assert debt.completed_installments == 2


@pytest.mark.parametrize(
    "frequency, expected_due",
    [("weekly", "2026-03-08"), ("biweekly", "2026-03-16"), ("monthly", "2026-03-31")],
)
def test_recurring_payment_advances_due_date(frequency, expected_due):
    debt = RecurringDebt(
        id="rent",
        name="Rent",
        total_amount=0.0,
        start_date="2026-01-01",
        due_date="2026-03-01",
        recurring_amount=900.0,
        recurring_frequency=frequency,
    )

    debt.add_payment(Payment(id="p1", amount=900.0, date="2026-03-01"))

    assert debt.due_date == expected_due
    assert debt.is_active


def test_recurring_weekly_amount_is_normalised_by_frequency():
    debt = RecurringDebt(
        id="phone",
        name="Phone bill",
        total_amount=0.0,
        start_date="2026-01-01",
        recurring_amount=60.0,
        recurring_frequency="monthly",
    )

    assert debt.weekly_amount == pytest.approx(14.0)


def test_debt_from_dict_is_lenient_with_bad_values():
    debt = debt_from_dict(
        {
            "id": "x",
            "name": "  ",
            "totalAmount": "not a number",
            "kind": "mystery",
            "payments": [{"id": "p1", "amount": -5, "type": "tip"}, "garbage"],
        }
    )

    assert isinstance(debt, LoanDebt)
    assert debt.name == "Unnamed debt"
    assert debt.total_amount == 0.0
    assert len(debt.payments) == 1
    assert debt.payments[0].amount == 0.0
    assert debt.payments[0].type == "principal"


def test_installment_from_dict_clamps_completed_installments():
    debt = debt_from_dict(
        {
            "id": "i",
            "name": "Laptop",
            "totalAmount": 1200,
            "startDate": "2026-01-01",
            "kind": "installment",
            "installmentAmount": 100,
            "totalInstallments": 12,
            "completedInstallments": 40,
        }
    )

    assert isinstance(debt, InstallmentDebt)
    assert debt.completed_installments == 12


def test_json_round_trip_keeps_derived_balances():
    debt = _loan(
        total=1234.56,
        payments=[
            Payment(id="p1", amount=100.1, date="2026-02-01"),
            Payment(id="p2", amount=0.2, date="2026-02-02"),
            Payment(id="p3", amount=12.0, date="2026-02-03", type="interest", note="march"),
        ],
    )

    reloaded = debt_from_dict(json.loads(json.dumps(debt_to_dict(debt))))

    assert reloaded == debt
    assert reloaded.remaining_amount == debt.remaining_amount


def test_debt_summary_adds_derived_fields():
    debt = _loan(payments=[Payment(id="p1", amount=250.0, date="2026-02-01")])

    summary = debt_summary(debt)

    assert summary["remainingAmount"] == 750.0
    assert summary["principalPaid"] == 250.0
    assert summary["isActive"] is True
    assert summary["kind"] == "loan"


def test_goal_contribution_is_clamped_to_target():
    goal = goal_from_dict({"id": "g", "name": "Trip", "targetAmount": 500, "currentAmount": 450})

    updated = goal.contribute(100.0, note="bonus", now="2026-03-10T12:00:00.000Z")

    assert updated.current_amount == 500.0
    assert updated.is_complete
    assert updated.last_contribution_note == "bonus"
    assert updated.last_contribution_at == "2026-03-10T12:00:00.000Z"
    assert goal.current_amount == 450.0
