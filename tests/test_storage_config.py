import json
import logging
from pathlib import Path

import pytest

from fire_core.domain.models import FinanceSnapshot
from fire_core.io import config as config_io
from fire_core.io import storage


def test_load_inputs_defaults_when_missing(tmp_path: Path):
    snap = storage.load_inputs(tmp_path / "missing.json")
    assert snap == storage.default_snapshot()
    assert snap.holdings().pension == 50000
    assert snap.holdings().total_contribution == 1000


def test_v1_record_is_migrated_to_pension(tmp_path: Path):
    path = tmp_path / "inputs.json"
    path.write_text(
        json.dumps(
            {
                "currentAge": 30,
                "targetRetirementAge": 50,
                "monthlySpending": 1800,
                "withdrawalRate": 3.5,
                "currentNetWorth": 80000,
                "monthlyIncome": 5000,
                "monthlyContributions": 700,
                "expectedReturn": 5,
            }
        )
    )
    snap = storage.load_inputs(path)
    holdings = snap.holdings()
    assert snap.current_age == 30
    assert snap.withdrawal_rate_percent == 3.5
    assert holdings.pension == 80000
    assert holdings.pension_contribution == 700
    assert holdings.isa == 0
    assert holdings.isa_contribution == 0


def test_migrate_record_leaves_v2_alone():
    record = {"schema_version": 2, "isa_balance": 100.0, "pension_balance": 5.0}
    assert storage.migrate_record(record) == record


def test_save_and_load_round_trip(tmp_path: Path):
    path = tmp_path / "nested" / "inputs.json"
    snap = FinanceSnapshot(
        current_age=40,
        target_retirement_age=52,
        monthly_spending_in_retirement=2500,
        withdrawal_rate_percent=4,
        monthly_gross_income=6000,
        expected_annual_return_percent=5,
        isa_balance=30000,
        pension_balance=120000,
        gia_balance=8000,
        monthly_isa_contributions=800,
        monthly_pension_contributions=600,
    )
    storage.save_inputs(snap, path)
    assert json.loads(path.read_text())["schema_version"] == storage.SCHEMA_VERSION
    assert storage.load_inputs(path) == snap


def test_aggregate_snapshot_is_saved_as_breakdown(tmp_path: Path):
    path = tmp_path / "inputs.json"
    snap = FinanceSnapshot(
        current_age=40,
        target_retirement_age=52,
        monthly_spending_in_retirement=2500,
        withdrawal_rate_percent=4,
        current_net_worth=90000,
        monthly_contributions=400,
    )
    storage.save_inputs(snap, path)
    stored = json.loads(path.read_text())
    assert "current_net_worth" not in stored
    loaded = storage.load_inputs(path)
    assert loaded.holdings() == snap.holdings()


def test_corrupt_inputs_fall_back_to_defaults(tmp_path: Path, caplog):
    path = tmp_path / "inputs.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="fire_core.io.storage"):
        snap = storage.load_inputs(path)
    assert snap == storage.default_snapshot()
    assert "Ignoring saved inputs" in caplog.text

    path.write_text("[1, 2, 3]")
    assert storage.load_inputs(path) == storage.default_snapshot()


def test_clear_inputs(tmp_path: Path):
    path = tmp_path / "inputs.json"
    storage.save_inputs(storage.default_snapshot(), path)
    assert storage.clear_inputs(path) is True
    assert not path.exists()
    assert storage.clear_inputs(path) is False


def test_inputs_path_env_override(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(storage.INPUTS_PATH_ENV, str(tmp_path / "custom.json"))
    assert storage.inputs_path() == tmp_path / "custom.json"


def test_load_snapshot_accepts_camel_case(tmp_path: Path):
    path = tmp_path / "snap.json"
    path.write_text(
        json.dumps(
            {
                "currentAge": 35,
                "targetRetirementAge": 50,
                "monthlySpendingInRetirement": 2000,
                "withdrawalRatePercent": 4,
                "isaBalance": 1000,
                "monthlyISAContributions": 100,
                "ignored": "yes",
            }
        )
    )
    snap = config_io.load_snapshot(path)
    assert snap.target_retirement_age == 50
    assert snap.isa_balance == 1000
    assert snap.monthly_isa_contributions == 100
    assert snap.pension_balance is None


def test_snapshot_from_dict_validates():
    with pytest.raises(ValueError, match="Missing"):
        config_io.snapshot_from_dict({"current_age": 30})
    with pytest.raises(ValueError, match="Invalid value"):
        config_io.snapshot_from_dict(
            {
                "current_age": "thirty",
                "target_retirement_age": 50,
                "monthly_spending_in_retirement": 2000,
                "withdrawal_rate_percent": 4,
            }
        )


def test_load_snapshot_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        config_io.load_snapshot(tmp_path / "nope.json")


def test_engine_config_from_file_and_env(tmp_path: Path, monkeypatch):
    monkeypatch.delenv(config_io.PENSION_AGE_ENV, raising=False)
    assert config_io.load_engine_config().pension_access_age == 57

    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"pension_access_age": 58}))
    assert config_io.load_engine_config(path).pension_access_age == 58

    monkeypatch.setenv(config_io.PENSION_AGE_ENV, "55")
    assert config_io.load_engine_config(path).pension_access_age == 55

    monkeypatch.setenv(config_io.PENSION_AGE_ENV, "soon")
    with pytest.raises(ValueError):
        config_io.load_engine_config()


def test_load_scenario_delta(tmp_path: Path):
    path = tmp_path / "delta.json"
    path.write_text(json.dumps({"isa_contribution_delta": 250, "target_retirement_age": 55}))
    delta = config_io.load_scenario_delta(path)
    assert delta.isa_contribution_delta == 250
    assert delta.pension_contribution_delta == 0
    assert delta.target_retirement_age == 55


def test_null_schema_version_falls_back_to_defaults(tmp_path: Path, caplog):
    path = tmp_path / "inputs.json"
    path.write_text(json.dumps({"schema_version": None, "current_age": 30}))
    with caplog.at_level(logging.WARNING, logger="fire_core.io.storage"):
        snap = storage.load_inputs(path)
    assert snap == storage.default_snapshot()
    assert "Ignoring saved inputs" in caplog.text
