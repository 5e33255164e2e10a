import json
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from fire_core.cli import app
from fire_core.io import storage


runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_inputs(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(storage.INPUTS_PATH_ENV, str(tmp_path / "inputs.json"))
    monkeypatch.delenv("FIRE_PENSION_ACCESS_AGE", raising=False)


def _write_snapshot(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "current_age": 35,
                "target_retirement_age": 50,
                "monthly_spending_in_retirement": 2000,
                "withdrawal_rate_percent": 4,
                "monthly_gross_income": 4000,
                "expected_annual_return_percent": 6,
                "isa_balance": 10000,
                "pension_balance": 40000,
                "gia_balance": 0,
                "monthly_isa_contributions": 500,
                "monthly_pension_contributions": 500,
            }
        )
    )
    return path


def test_cli_project_writes_json(tmp_path: Path):
    snapshot_path = _write_snapshot(tmp_path)
    out_path = tmp_path / "out" / "projection.json"

    result = runner.invoke(app, ["project", "--snapshot", str(snapshot_path), "--out", str(out_path)])
    assert result.exit_code == 0, result.stdout
    assert out_path.exists()

    payload = json.loads(out_path.read_text())
    assert payload["fire_number"] == pytest.approx(600000)
    assert payload["total_net_worth"] == 50000
    assert payload["requires_bridge"] is True
    assert payload["bridge_amount_needed"] == 168000
    assert "bridge_shortfall" in payload


def test_cli_project_overrides_and_table(tmp_path: Path):
    snapshot_path = _write_snapshot(tmp_path)
    result = runner.invoke(
        app,
        ["project", "--snapshot", str(snapshot_path), "--retire-age", "60", "--json"],
    )
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["requires_bridge"] is False
    assert "bridge_amount_needed" not in payload

    table = runner.invoke(app, ["project", "--snapshot", str(snapshot_path)])
    assert table.exit_code == 0, table.stdout
    assert "£600,000" in table.stdout
    assert "ISA bridge" in table.stdout


def test_cli_project_uses_saved_inputs_and_config(tmp_path: Path):
    config_path = tmp_path / "engine.json"
    config_path.write_text(json.dumps({"pension_access_age": 55}))
    result = runner.invoke(app, ["project", "--config", str(config_path), "--json"])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    # defaults retire at 55, so no bridge with access at 55
    assert payload["requires_bridge"] is False
    assert payload["years_until_pension_access"] == 0


def test_cli_rejects_bad_snapshot(tmp_path: Path):
    result = runner.invoke(app, ["project", "--snapshot", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_cli_schedule_and_sweep_csv(tmp_path: Path):
    snapshot_path = _write_snapshot(tmp_path)
    schedule_path = tmp_path / "schedule.csv"
    result = runner.invoke(
        app,
        ["schedule", "--snapshot", str(snapshot_path), "--years", "5", "--out", str(schedule_path)],
    )
    assert result.exit_code == 0, result.stdout
    assert len(pd.read_csv(schedule_path)) == 6

    sweep_path = tmp_path / "sweep.csv"
    result = runner.invoke(
        app,
        [
            "sweep",
            "--snapshot",
            str(snapshot_path),
            "--field",
            "monthlyISAContributions",
            "--values",
            "250,500,1000",
            "--out",
            str(sweep_path),
        ],
    )
    assert result.exit_code == 0, result.stdout
    df = pd.read_csv(sweep_path)
    assert list(df["monthly_isa_contributions"]) == [250, 500, 1000]

    bad = runner.invoke(app, ["sweep", "--field", "nope", "--values", "1"])
    assert bad.exit_code != 0


def test_cli_scenario(tmp_path: Path):
    snapshot_path = _write_snapshot(tmp_path)
    delta_path = tmp_path / "delta.json"
    delta_path.write_text(json.dumps({"pension_contribution_delta": 300}))
    result = runner.invoke(app, ["scenario", "--snapshot", str(snapshot_path), "--delta", str(delta_path)])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["delta"]["total_monthly_contributions"] == pytest.approx(300)
    assert payload["delta"]["years_to_target"] < 0


def test_cli_interactive_saves_then_reset(tmp_path: Path):
    answers = "\n".join(
        ["30", "50", "2000", "20000", "30000", "0", "5000", "800", "400", "4", "6"]
    )
    result = runner.invoke(app, ["interactive"], input=answers + "\n")
    assert result.exit_code == 0, result.stdout

    saved = storage.load_inputs()
    assert saved.current_age == 30
    assert saved.isa_balance == 20000
    assert saved.monthly_isa_contributions == 800

    cleared = runner.invoke(app, ["reset"])
    assert "cleared" in cleared.stdout
    assert runner.invoke(app, ["reset"]).stdout.strip() == "No saved inputs found."


def test_cli_explains_why_target_is_unreachable(tmp_path: Path):
    snapshot_path = _write_snapshot(tmp_path)

    no_rate = runner.invoke(app, ["project", "--snapshot", str(snapshot_path), "--withdrawal-rate", "0"])
    assert no_rate.exit_code == 0, no_rate.stdout
    assert "withdrawal rate" in no_rate.stdout
    assert "100 years" not in no_rate.stdout

    as_json = runner.invoke(
        app, ["project", "--snapshot", str(snapshot_path), "--withdrawal-rate", "0", "--json"]
    )
    assert json.loads(as_json.stdout)["fire_number"] is None

    config_path = tmp_path / "engine.json"
    config_path.write_text(json.dumps({"max_horizon_months": 120}))
    capped = runner.invoke(
        app,
        ["project", "--snapshot", str(snapshot_path), "--config", str(config_path), "--spending", "50000"],
    )
    assert capped.exit_code == 0, capped.stdout
    assert "within 10 years" in capped.stdout
