from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from fire_core.domain.models import FinanceSnapshot
from fire_core.io.config import normalize_keys, snapshot_from_dict

logger = logging.getLogger(__name__)

INPUTS_PATH_ENV = "FIRE_INPUTS_PATH"
SCHEMA_VERSION = 2

DEFAULT_INPUTS: Dict[str, Any] = {
    "current_age": 35,
    "target_retirement_age": 55,
    "monthly_spending_in_retirement": 2000.0,
    "withdrawal_rate_percent": 4.0,
    "isa_balance": 0.0,
    "pension_balance": 50000.0,
    "gia_balance": 0.0,
    "monthly_gross_income": 4000.0,
    "monthly_isa_contributions": 500.0,
    "monthly_pension_contributions": 500.0,
    "expected_annual_return_percent": 6.0,
}


def default_snapshot() -> FinanceSnapshot:
    return snapshot_from_dict(DEFAULT_INPUTS)


def inputs_path() -> Path:
    override = os.environ.get(INPUTS_PATH_ENV)
    if override:
        return Path(override)
    return Path.home() / ".fire_inputs.json"


def migrate_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Upgrade a stored record to the current schema.

    v1 kept one net worth and one contribution figure. Those move into the
    pension bucket, the best guess for where the money sits, and the other
    wrappers start empty rather than picking up the defaults.
    """
    upgraded = normalize_keys(record)
    version = int(upgraded.get("schema_version", 1))

    if version < 2:
        if "current_net_worth" in upgraded and "isa_balance" not in upgraded:
            upgraded["pension_balance"] = upgraded.pop("current_net_worth")
            upgraded["monthly_pension_contributions"] = upgraded.pop("monthly_contributions", None) or 0.0
            upgraded.setdefault("isa_balance", 0.0)
            upgraded.setdefault("gia_balance", 0.0)
            upgraded.setdefault("monthly_isa_contributions", 0.0)
        upgraded["schema_version"] = 2
    return upgraded


def load_inputs(path: Optional[Path] = None) -> FinanceSnapshot:
    """
    Saved inputs merged over DEFAULT_INPUTS. Missing or unreadable files fall
    back to the defaults.
    """
    path = path or inputs_path()
    if not path.exists():
        return default_snapshot()

    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(stored, dict):
            raise ValueError("stored inputs are not an object")
        merged = {**DEFAULT_INPUTS, **migrate_record(stored)}
        return snapshot_from_dict(merged)
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Ignoring saved inputs at %s: %s", path, exc)
        return default_snapshot()


def save_inputs(snapshot: FinanceSnapshot, path: Optional[Path] = None) -> Path:
    """Persist the snapshot in breakdown form; aggregate fields are not stored."""
    path = path or inputs_path()
    holdings = snapshot.holdings()
    payload = {
        k: v
        for k, v in snapshot.to_dict().items()
        if v is not None and k not in ("current_net_worth", "monthly_contributions")
    }
    payload.update(
        {
            "isa_balance": holdings.isa,
            "pension_balance": holdings.pension,
            "gia_balance": holdings.gia,
            "monthly_isa_contributions": holdings.isa_contribution,
            "monthly_pension_contributions": holdings.pension_contribution,
            "schema_version": SCHEMA_VERSION,
        }
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def clear_inputs(path: Optional[Path] = None) -> bool:
    path = path or inputs_path()
    if not path.exists():
        return False
    path.unlink()
    return True
