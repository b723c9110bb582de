from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class Settings:
    data_dir: str = "user_data"
    log_level: str = "INFO"
    port: int = 8000

    @property
    def debts_path(self) -> str:
        return os.path.join(self.data_dir, "debts.json")

    @property
    def goals_path(self) -> str:
        return os.path.join(self.data_dir, "saving_goals.json")

    @property
    def incomes_path(self) -> str:
        return os.path.join(self.data_dir, "daily_incomes.json")

    @property
    def expenses_path(self) -> str:
        return os.path.join(self.data_dir, "daily_expenses.json")

    @property
    def plan_path(self) -> str:
        return os.path.join(self.data_dir, "financial_plan.json")


def load_settings_from_env() -> Settings:
    """Reads settings from env vars.

    Env vars:
      FINANCE_TRACKER_DATA_DIR=<dir>     -> folder holding the JSON data files
      FINANCE_TRACKER_LOG_LEVEL=INFO     -> logging level name
      FINANCE_TRACKER_PORT=8000          -> port for `python -m finance_tracker.app`
    """
    return Settings(
        data_dir=os.getenv("FINANCE_TRACKER_DATA_DIR", "user_data"),
        log_level=os.getenv("FINANCE_TRACKER_LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("FINANCE_TRACKER_PORT", 8000)),
    )
