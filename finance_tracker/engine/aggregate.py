import datetime as dt
from typing import Dict, Iterable

import pandas as pd

from ..data_model import DailyExpense, DailyIncome, parse_timestamp

INCOME_COLUMNS = ["Date", "Total"]
EXPENSE_COLUMNS = ["Date", "Food", "Gas", "Other", "Total"]
PERIOD_COLUMNS = {"Date", "Period", "PeriodStart", "PeriodEnd"}


def _frame(rows: list[dict], columns: list[str]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows, columns=columns)
    df["Date"] = pd.to_datetime(df["Date"])
    return df.dropna(subset=["Date"]).reset_index(drop=True)


def incomes_frame(incomes: Iterable[DailyIncome]) -> pd.DataFrame:
    rows = [{"Date": parse_timestamp(entry.date), "Total": entry.amount} for entry in incomes]
    return _frame(rows, INCOME_COLUMNS)


def expenses_frame(expenses: Iterable[DailyExpense]) -> pd.DataFrame:
    rows = [
        {
            "Date": parse_timestamp(entry.date),
            "Food": entry.food_amount,
            "Gas": entry.gas_amount,
            "Other": entry.other_amount,
            "Total": entry.total,
        }
        for entry in expenses
    ]
    return _frame(rows, EXPENSE_COLUMNS)


def trailing_totals(df: pd.DataFrame, now: dt.datetime, days: int = 7) -> Dict[str, float]:
    """Sums every value column over entries dated within the last `days` days."""
    value_columns = [col for col in df.columns if col != "Date"]
    if df.empty:
        return {col: 0.0 for col in value_columns}
    start = now - dt.timedelta(days=days)
    window = df[(df["Date"] >= start) & (df["Date"] <= now)]
    return {col: float(window[col].sum()) for col in value_columns}


def weekly_income_total(incomes: Iterable[DailyIncome], now: dt.datetime) -> float:
    return trailing_totals(incomes_frame(incomes), now)["Total"]


def weekly_expense_total(expenses: Iterable[DailyExpense], now: dt.datetime) -> Dict[str, float]:
    totals = trailing_totals(expenses_frame(expenses), now)
    return {
        "food": totals["Food"],
        "gas": totals["Gas"],
        "other": totals["Other"],
        "total": totals["Total"],
    }


def summarize_ledger(df: pd.DataFrame, freq: str = "W") -> pd.DataFrame:
    """Groups ledger entries into Sunday-based weeks or calendar months, newest first."""
    if df.empty:
        return df

    freq = (freq or "W").upper()
    df = df.copy()
    day = df["Date"].dt.normalize()

    if freq == "M":
        months = day.dt.to_period("M")
        df["Period"] = months.astype(str)
        df["PeriodStart"] = months.dt.start_time
        df["PeriodEnd"] = months.dt.end_time.dt.normalize()
    else:
        df["PeriodStart"] = day - pd.to_timedelta((day.dt.dayofweek + 1) % 7, unit="D")
        df["PeriodEnd"] = df["PeriodStart"] + pd.Timedelta(days=6)
        df["Period"] = df["PeriodStart"].dt.strftime("%Y-%m-%d")

    value_columns = [col for col in df.columns if col not in PERIOD_COLUMNS]
    aggregations = {col: (col, "sum") for col in value_columns}
    summary = df.groupby("Period", as_index=False).agg(
        PeriodStart=("PeriodStart", "first"),
        PeriodEnd=("PeriodEnd", "first"),
        Entries=("Total", "size"),
        **aggregations,
    )
    summary["Average"] = summary["Total"] / summary["Entries"]
    summary["PeriodStart"] = summary["PeriodStart"].dt.strftime("%Y-%m-%d")
    summary["PeriodEnd"] = summary["PeriodEnd"].dt.strftime("%Y-%m-%d")
    return summary.sort_values("Period", ascending=False).reset_index(drop=True)
