from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List

from .base import clean_text, new_id, non_negative, non_negative_int, positive, positive_int
from .dates import parse_date, to_iso_date, to_iso_timestamp, utc_now

PAYMENT_TYPES = ("principal", "interest", "fee")
DEBT_KINDS = ("recurring", "installment", "loan", "credit_card", "other")
RECURRING_FREQUENCY_DAYS = {"weekly": 7, "biweekly": 15, "monthly": 30}
DEFAULT_KIND = "loan"
DEFAULT_FREQUENCY = "monthly"
UNNAMED_DEBT = "Unnamed debt"


@dataclass
class Payment:
    id: str
    amount: float
    date: str
    type: str = "principal"
    note: str | None = None

    def is_principal(self) -> bool:
        return self.type == "principal"


@dataclass
class Debt:
    """Common shape of every debt kind.

    Only principal payments reduce the outstanding balance; interest and fee
    payments are kept for the informational totals.
    """

    id: str
    name: str
    total_amount: float
    start_date: str
    due_date: str | None = None
    payments: List[Payment] = field(default_factory=list)
    created_at: str = ""
    description: str | None = None
    interest_rate: float | None = None

    kind: ClassVar[str] = ""

    @property
    def principal_paid(self) -> float:
        return sum(p.amount for p in self.payments if p.is_principal())

    @property
    def interest_paid(self) -> float:
        return sum(p.amount for p in self.payments if p.type == "interest")

    @property
    def fees_paid(self) -> float:
        return sum(p.amount for p in self.payments if p.type == "fee")

    @property
    def total_paid(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.total_amount - self.principal_paid)

    @property
    def is_active(self) -> bool:
        return self.remaining_amount > 0

    def add_payment(self, payment: Payment) -> None:
        self.payments.append(payment)
        self._payment_added(payment)
        self.refresh_derived()

    def delete_payment(self, payment_id: str) -> bool:
        kept = [p for p in self.payments if p.id != payment_id]
        if len(kept) == len(self.payments):
            return False
        self.payments = kept
        self.refresh_derived()
        return True

    def _payment_added(self, payment: Payment) -> None:
        pass

    def refresh_derived(self) -> None:
        pass


@dataclass
class LoanDebt(Debt):
    kind: ClassVar[str] = "loan"


@dataclass
class CreditCardDebt(Debt):
    kind: ClassVar[str] = "credit_card"


@dataclass
class OtherDebt(Debt):
    kind: ClassVar[str] = "other"


@dataclass
class InstallmentDebt(Debt):
    installment_amount: float | None = None
    total_installments: int | None = None
    completed_installments: int = 0

    kind: ClassVar[str] = "installment"

    def refresh_derived(self) -> None:
        if not self.installment_amount:
            return
        completed = math.floor(self.principal_paid / self.installment_amount)
        if self.total_installments is not None:
            completed = min(self.total_installments, completed)
        self.completed_installments = max(0, completed)


@dataclass
class RecurringDebt(Debt):
    recurring_amount: float = 0.0
    recurring_frequency: str = DEFAULT_FREQUENCY

    kind: ClassVar[str] = "recurring"

    @property
    def is_active(self) -> bool:
        # a recurring bill never reaches a terminal balance
        return True

    @property
    def frequency_days(self) -> int:
        return RECURRING_FREQUENCY_DAYS.get(self.recurring_frequency, RECURRING_FREQUENCY_DAYS[DEFAULT_FREQUENCY])

    @property
    def weekly_amount(self) -> float:
        return self.recurring_amount * 7 / self.frequency_days

    def _payment_added(self, payment: Payment) -> None:
        paid_on = parse_date(payment.date)
        if paid_on is None:
            return
        self.due_date = to_iso_date(paid_on + dt.timedelta(days=self.frequency_days))


DEBT_TYPES: Dict[str, type[Debt]] = {
    cls.kind: cls for cls in (RecurringDebt, InstallmentDebt, LoanDebt, CreditCardDebt, OtherDebt)
}


# -- dict codec -------------------------------------------------------------
# Stored records use the camelCase field names of the exported JSON files.
# Loading is lenient: malformed values fall back to defaults instead of failing.


def payment_from_dict(data: Dict[str, Any]) -> Payment:
    raw_type = data.get("type")
    return Payment(
        id=clean_text(data.get("id")) or new_id(),
        amount=non_negative(data.get("amount")) or 0.0,
        date=clean_text(data.get("date")) or to_iso_timestamp(utc_now()),
        type=raw_type if raw_type in PAYMENT_TYPES else "principal",
        note=clean_text(data.get("note")),
    )


def payment_to_dict(payment: Payment) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": payment.id,
        "amount": payment.amount,
        "date": payment.date,
        "type": payment.type,
    }
    if payment.note:
        row["note"] = payment.note
    return row


def debt_from_dict(data: Dict[str, Any]) -> Debt:
    kind = data.get("kind")
    if kind not in DEBT_TYPES:
        kind = DEFAULT_KIND
    payments = [payment_from_dict(p) for p in data.get("payments") or [] if isinstance(p, dict)]
    common: Dict[str, Any] = {
        "id": clean_text(data.get("id")) or new_id(),
        "name": clean_text(data.get("name")) or UNNAMED_DEBT,
        "total_amount": positive(data.get("totalAmount")) or 0.0,
        "start_date": clean_text(data.get("startDate")) or to_iso_date(utc_now()),
        "due_date": clean_text(data.get("dueDate")),
        "payments": payments,
        "created_at": clean_text(data.get("createdAt")) or to_iso_timestamp(utc_now()),
        "description": clean_text(data.get("description")),
        "interest_rate": non_negative(data.get("interestRate")),
    }
    if kind == "recurring":
        frequency = data.get("recurringFrequency")
        return RecurringDebt(
            **common,
            recurring_amount=positive(data.get("recurringAmount")) or 0.0,
            recurring_frequency=frequency if frequency in RECURRING_FREQUENCY_DAYS else DEFAULT_FREQUENCY,
        )
    if kind == "installment":
        total_installments = positive_int(data.get("totalInstallments"))
        completed = non_negative_int(data.get("completedInstallments")) or 0
        if total_installments is not None:
            completed = min(total_installments, completed)
        return InstallmentDebt(
            **common,
            installment_amount=positive(data.get("installmentAmount")),
            total_installments=total_installments,
            completed_installments=completed,
        )
    return DEBT_TYPES[kind](**common)


def debt_to_dict(debt: Debt) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": debt.id,
        "name": debt.name,
        "totalAmount": debt.total_amount,
        "startDate": debt.start_date,
        "dueDate": debt.due_date,
        "payments": [payment_to_dict(p) for p in debt.payments],
        "createdAt": debt.created_at,
        "kind": debt.kind,
    }
    if debt.description:
        row["description"] = debt.description
    if debt.interest_rate is not None:
        row["interestRate"] = debt.interest_rate
    if isinstance(debt, RecurringDebt):
        row["recurringAmount"] = debt.recurring_amount
        row["recurringFrequency"] = debt.recurring_frequency
    elif isinstance(debt, InstallmentDebt):
        if debt.installment_amount is not None:
            row["installmentAmount"] = debt.installment_amount
        if debt.total_installments is not None:
            row["totalInstallments"] = debt.total_installments
        row["completedInstallments"] = debt.completed_installments
    return row


def debt_summary(debt: Debt) -> Dict[str, Any]:
    """Record plus the derived balances, for API responses."""
    row = debt_to_dict(debt)
    row.update(
        {
            "principalPaid": debt.principal_paid,
            "interestPaid": debt.interest_paid,
            "feesPaid": debt.fees_paid,
            "remainingAmount": debt.remaining_amount,
            "isActive": debt.is_active,
        }
    )
    return row
