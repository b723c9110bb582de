import json
import logging
import math
import os
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def ensure_user_data_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_sanitize_json_compat(item) for item in value]
    return value


def _read_json(path: str) -> Any:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return None
            return _sanitize_json_compat(json.loads(raw_text))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable data file %s: %s", path, exc)
        return None


def _write_json(path: str, data: Any) -> None:
    ensure_user_data_dir(path)
    tmp_path = f"{path}.tmp"
    clean = _sanitize_json_compat(data)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(clean, f, allow_nan=False, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)


def load_records(path: str) -> List[Dict[str, Any]]:
    data = _read_json(path)
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


def save_records(path: str, records: List[Dict[str, Any]]) -> None:
    _write_json(path, records)


def load_record(path: str) -> Dict[str, Any] | None:
    data = _read_json(path)
    return data if isinstance(data, dict) else None


def save_record(path: str, record: Dict[str, Any]) -> None:
    _write_json(path, record)


def delete_record(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)
