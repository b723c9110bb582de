from .dates import NO_DUE_DATE_DAYS, days_until_due, parse_date, parse_timestamp, utc_now
from .debts import (
    DEBT_KINDS,
    PAYMENT_TYPES,
    RECURRING_FREQUENCY_DAYS,
    CreditCardDebt,
    Debt,
    InstallmentDebt,
    LoanDebt,
    OtherDebt,
    Payment,
    RecurringDebt,
    debt_from_dict,
    debt_summary,
    debt_to_dict,
    payment_from_dict,
    payment_to_dict,
)
from .ledger import DailyExpense, DailyIncome, expense_from_dict, expense_to_dict, income_from_dict, income_to_dict
from .plan import (
    DebtRecommendation,
    PlanProgress,
    SavedFinancialPlan,
    SavingsRecommendation,
    plan_from_dict,
    plan_to_dict,
    progress_to_dict,
    recommendation_to_dict,
    savings_recommendation_to_dict,
)
from .savings import GOAL_PRIORITIES, PRIORITY_WEIGHTS, SavingGoal, goal_from_dict, goal_to_dict

__all__ = [
    "DEBT_KINDS",
    "GOAL_PRIORITIES",
    "NO_DUE_DATE_DAYS",
    "PAYMENT_TYPES",
    "PRIORITY_WEIGHTS",
    "RECURRING_FREQUENCY_DAYS",
    "CreditCardDebt",
    "DailyExpense",
    "DailyIncome",
    "Debt",
    "DebtRecommendation",
    "InstallmentDebt",
    "LoanDebt",
    "OtherDebt",
    "Payment",
    "PlanProgress",
    "RecurringDebt",
    "SavedFinancialPlan",
    "SavingGoal",
    "SavingsRecommendation",
    "days_until_due",
    "debt_from_dict",
    "debt_summary",
    "debt_to_dict",
    "expense_from_dict",
    "expense_to_dict",
    "goal_from_dict",
    "goal_to_dict",
    "income_from_dict",
    "income_to_dict",
    "parse_date",
    "parse_timestamp",
    "payment_from_dict",
    "payment_to_dict",
    "plan_from_dict",
    "plan_to_dict",
    "progress_to_dict",
    "recommendation_to_dict",
    "savings_recommendation_to_dict",
    "utc_now",
]
