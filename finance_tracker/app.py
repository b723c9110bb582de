"""REST backend for the weekly debt and savings planner."""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from .config import Settings, load_settings_from_env
from .data_model import (
    debt_summary,
    expense_to_dict,
    goal_to_dict,
    income_to_dict,
    parse_timestamp,
    plan_to_dict,
    utc_now,
)
from .engine import PlanService, analyze_pacing, upcoming_due_dates
from .engine.state import DebtState, LedgerState, PlanRepository, SavingGoalState
from .validation import (
    ValidationError,
    debt_from_payload,
    expense_from_payload,
    goal_from_payload,
    income_from_payload,
    optional_text,
    payment_from_payload,
    plan_inputs_from_payload,
    require_amount,
)

logger = logging.getLogger(__name__)


def _is_nan(value: Any) -> bool:
    try:
        return not math.isfinite(value)
    except (TypeError, ValueError):
        return False


def _sanitize_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    clean_rows: List[Dict[str, Any]] = []
    for row in records:
        clean_rows.append({key: (None if _is_nan(value) else value) for key, value in row.items()})
    return clean_rows


def _request_now() -> dt.datetime:
    raw = request.args.get("now")
    if not raw:
        return utc_now()
    now = parse_timestamp(raw)
    if now is None:
        raise ValidationError("now must be an ISO date or timestamp.")
    return now


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or load_settings_from_env()
    app = Flask(__name__)

    debt_state = DebtState(settings.debts_path)
    goal_state = SavingGoalState(settings.goals_path)
    ledger_state = LedgerState(settings.incomes_path, settings.expenses_path)
    planner = PlanService(debt_state, goal_state, ledger_state, PlanRepository(settings.plan_path))

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": str(exc)}), 400

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/health")
    def healthcheck():
        return jsonify({"status": "ok"})

    # -- debts --------------------------------------------------------------

    @app.get("/api/debts")
    def list_debts():
        debts = debt_state.list_debts()
        status = request.args.get("status", "all")
        if status == "active":
            debts = [d for d in debts if d.is_active]
        elif status == "paid":
            debts = [d for d in debts if not d.is_active]
        return jsonify({"debts": [debt_summary(d) for d in debts]})

    @app.post("/api/debts")
    def create_debt():
        debt = debt_from_payload(_payload(), _request_now())
        debt_state.save(debt)
        logger.info("Created %s debt %s", debt.kind, debt.id)
        return jsonify({"debt": debt_summary(debt)}), 201

    @app.get("/api/debts/export")
    def export_debts():
        return app.response_class(debt_state.export_json(), mimetype="application/json")

    @app.post("/api/debts/import")
    def import_debts():
        count = debt_state.import_json(request.get_data(as_text=True))
        return jsonify({"message": "Debts imported.", "count": count})

    @app.get("/api/debts/<debt_id>")
    def get_debt(debt_id: str):
        debt = debt_state.get(debt_id)
        if debt is None:
            return jsonify({"error": "Debt not found."}), 404
        return jsonify({"debt": debt_summary(debt)})

    @app.put("/api/debts/<debt_id>")
    def update_debt(debt_id: str):
        existing = debt_state.get(debt_id)
        if existing is None:
            return jsonify({"error": "Debt not found."}), 404
        debt = debt_from_payload(_payload(), _request_now(), existing=existing)
        debt_state.save(debt)
        return jsonify({"debt": debt_summary(debt)})

    @app.delete("/api/debts/<debt_id>")
    def delete_debt(debt_id: str):
        if not debt_state.delete(debt_id):
            return jsonify({"error": "Debt not found."}), 404
        return jsonify({"message": "Debt deleted."})

    @app.post("/api/debts/<debt_id>/payments")
    def add_payment(debt_id: str):
        payment = payment_from_payload(_payload(), _request_now())
        debt = debt_state.add_payment(debt_id, payment)
        if debt is None:
            return jsonify({"error": "Debt not found."}), 404
        return jsonify({"debt": debt_summary(debt)}), 201

    @app.delete("/api/debts/<debt_id>/payments/<payment_id>")
    def delete_payment(debt_id: str, payment_id: str):
        debt = debt_state.delete_payment(debt_id, payment_id)
        if debt is None:
            return jsonify({"error": "Payment not found."}), 404
        return jsonify({"debt": debt_summary(debt)})

    # -- savings goals ------------------------------------------------------

    @app.get("/api/goals")
    def list_goals():
        return jsonify({"goals": [goal_to_dict(g) for g in goal_state.list_goals()]})

    @app.post("/api/goals")
    def create_goal():
        goal = goal_from_payload(_payload(), _request_now())
        goal_state.save(goal)
        return jsonify({"goal": goal_to_dict(goal)}), 201

    @app.put("/api/goals/<goal_id>")
    def update_goal(goal_id: str):
        existing = goal_state.get(goal_id)
        if existing is None:
            return jsonify({"error": "Goal not found."}), 404
        goal = goal_from_payload(_payload(), _request_now(), existing=existing)
        goal_state.save(goal)
        return jsonify({"goal": goal_to_dict(goal)})

    @app.delete("/api/goals/<goal_id>")
    def delete_goal(goal_id: str):
        if not goal_state.delete(goal_id):
            return jsonify({"error": "Goal not found."}), 404
        return jsonify({"message": "Goal deleted."})

    @app.post("/api/goals/<goal_id>/contributions")
    def contribute_to_goal(goal_id: str):
        payload = _payload()
        amount = require_amount(payload.get("amount"), "amount", positive=True)
        goal = goal_state.contribute(goal_id, amount, optional_text(payload.get("note")), _request_now())
        if goal is None:
            return jsonify({"error": "Goal not found."}), 404
        return jsonify({"goal": goal_to_dict(goal)})

    # -- income / expense logs ---------------------------------------------

    @app.get("/api/income")
    def list_income():
        now = _request_now()
        return jsonify(
            {
                "entries": [income_to_dict(e) for e in ledger_state.incomes],
                "weeklyTotal": ledger_state.weekly_income_total(now),
            }
        )

    @app.post("/api/income")
    def add_income():
        entry = income_from_payload(_payload(), _request_now())
        ledger_state.add_income(entry)
        return jsonify({"entry": income_to_dict(entry)}), 201

    @app.delete("/api/income/<entry_id>")
    def delete_income(entry_id: str):
        if not ledger_state.delete_income(entry_id):
            return jsonify({"error": "Entry not found."}), 404
        return jsonify({"message": "Entry deleted."})

    @app.get("/api/expenses")
    def list_expenses():
        now = _request_now()
        return jsonify(
            {
                "entries": [expense_to_dict(e) for e in ledger_state.expenses],
                "weeklyTotal": ledger_state.weekly_expense_total(now),
            }
        )

    @app.post("/api/expenses")
    def add_expense():
        entry = expense_from_payload(_payload(), _request_now())
        ledger_state.add_expense(entry)
        return jsonify({"entry": expense_to_dict(entry)}), 201

    @app.delete("/api/expenses/<entry_id>")
    def delete_expense(entry_id: str):
        if not ledger_state.delete_expense(entry_id):
            return jsonify({"error": "Entry not found."}), 404
        return jsonify({"message": "Entry deleted."})

    @app.get("/api/ledger/summary")
    def ledger_summary():
        kind = request.args.get("kind", "income")
        freq = request.args.get("freq", "W").upper()
        if kind not in {"income", "expenses"}:
            raise ValidationError("kind must be one of: income, expenses.")
        if freq not in {"W", "M"}:
            raise ValidationError("freq must be one of: W, M.")
        summary = ledger_state.summary(kind, freq=freq)
        return jsonify({"kind": kind, "freq": freq, "data": _sanitize_records(summary.to_dict(orient="records"))})

    # -- plan ---------------------------------------------------------------

    @app.post("/api/plan/preview")
    def preview_plan():
        inputs = plan_inputs_from_payload(_payload())
        plan = planner.preview(now=_request_now(), **inputs)
        return jsonify({"plan": plan_to_dict(plan)})

    @app.get("/api/plan")
    def get_plan():
        plan = planner.get_plan(_request_now())
        if plan is None:
            return jsonify({"error": "No saved plan."}), 404
        return jsonify({"plan": plan_to_dict(plan)})

    @app.post("/api/plan")
    def save_plan():
        inputs = plan_inputs_from_payload(_payload())
        plan = planner.save_plan(now=_request_now(), **inputs)
        return jsonify({"message": "Plan saved.", "plan": plan_to_dict(plan)}), 201

    @app.post("/api/plan/refresh")
    def refresh_plan():
        plan = planner.refresh_plan(_request_now())
        if plan is None:
            return jsonify({"error": "No saved plan."}), 404
        return jsonify({"message": "Plan updated.", "plan": plan_to_dict(plan)})

    @app.delete("/api/plan")
    def delete_plan():
        planner.delete_plan()
        return jsonify({"message": "Plan deleted."})

    # -- analysis -----------------------------------------------------------

    @app.get("/api/pacing")
    def pacing():
        report = analyze_pacing(debt_state.list_debts(), _request_now())
        return jsonify({"debts": [item.to_dict() for item in report.items], "totalBehind": report.total_behind})

    @app.get("/api/notifications/upcoming")
    def upcoming():
        items = upcoming_due_dates(debt_state.list_debts(), _request_now())
        return jsonify(
            {
                "upcoming": [
                    {"debtId": item.debt.id, "debtName": item.debt.name, "dueDate": item.debt.due_date, "daysLeft": item.days_left}
                    for item in items
                ]
            }
        )

    return app


def main() -> None:
    settings = load_settings_from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    create_app(settings).run(debug=False, port=settings.port)


if __name__ == "__main__":
    main()
