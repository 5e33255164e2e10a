from __future__ import annotations

import dataclasses
import json
import logging
import math
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fire_core.domain.models import EngineConfig, FinanceSnapshot, ProjectionResult
from fire_core.formatting import format_currency, format_month_year, format_percent, format_years
from fire_core.io import config as config_io
from fire_core.io import storage
from fire_core.services import pipeline, projector, schedule

app = typer.Typer(help="UK FIRE calculator: FIRE number, projected date and ISA bridge.")
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _load_snapshot(snapshot: Optional[Path]) -> FinanceSnapshot:
    if snapshot is None:
        return storage.load_inputs()
    try:
        return config_io.load_snapshot(snapshot)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--snapshot") from exc


def _load_config(config: Optional[Path]) -> EngineConfig:
    try:
        return config_io.load_engine_config(config)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _with_overrides(snapshot: FinanceSnapshot, **overrides) -> FinanceSnapshot:
    changes = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(snapshot, **changes) if changes else snapshot


def _unreachable_reason(snapshot: FinanceSnapshot, result: ProjectionResult, config: EngineConfig) -> str:
    if math.isinf(result.fire_number):
        return "A withdrawal rate of 0% or less can never fund retirement. Choose a positive rate."
    if snapshot.expected_annual_return_percent == 0 and result.total_monthly_contributions <= 0:
        return "With no investment growth and no contributions the FIRE number is never reached."
    years = config.max_horizon_months / 12
    return (
        f"The FIRE number is not reached within {years:g} years at these contributions and returns. "
        "Try increasing your monthly contributions or return rate."
    )


def _render_result(snapshot: FinanceSnapshot, result: ProjectionResult, config: EngineConfig) -> None:
    table = Table(title="FIRE projection", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("FIRE number", format_currency(result.fire_number))
    table.add_row("Annual expenses", format_currency(result.annual_expenses))
    table.add_row("Net worth", format_currency(result.total_net_worth))
    table.add_row("Monthly contributions", format_currency(result.total_monthly_contributions))
    table.add_row("Gap to target", format_currency(result.gap_to_target))
    table.add_row("Progress", format_percent(result.progress_percent))
    table.add_row("Savings rate", format_percent(result.savings_rate_percent))
    table.add_row("Time to FIRE", format_years(result.years_to_target))
    if result.projected_target_date:
        table.add_row("Projected date", format_month_year(result.projected_target_date))
    table.add_row("Years to retirement", str(result.years_to_retirement))
    console.print(table)

    if not result.reachable:
        console.print(f"[red]{_unreachable_reason(snapshot, result, config)}[/red]")

    bridge = result.bridge
    if bridge is None:
        console.print(
            f"[green]No bridge needed:[/green] pension is accessible at retirement "
            f"({snapshot.target_retirement_age} >= {config.pension_access_age})."
        )
        return

    console.print(
        f"\n[bold]ISA bridge[/bold] (age {snapshot.target_retirement_age} -> {config.pension_access_age}, "
        f"{bridge.gap_years} years)"
    )
    console.print(f"  Needed:            {format_currency(bridge.amount_needed)}")
    console.print(f"  ISA at retirement: {format_currency(bridge.projected_isa_at_retirement)}")
    console.print(f"  GIA at retirement: {format_currency(bridge.projected_gia_at_retirement)}")
    console.print(f"  Accessible total:  {format_currency(bridge.projected_accessible_at_retirement)}")
    if bridge.is_viable:
        console.print("  [green]Bridge covered by ISA + GIA.[/green]")
    else:
        console.print(f"  [yellow]Bridge shortfall: {format_currency(bridge.shortfall)}[/yellow]")


@app.command()
def project(
    snapshot: Optional[Path] = typer.Option(None, help="Snapshot JSON (defaults to saved inputs)"),
    config: Optional[Path] = typer.Option(None, help="Engine config JSON"),
    spending: Optional[float] = typer.Option(None, help="Override monthly spending in retirement"),
    withdrawal_rate: Optional[float] = typer.Option(None, help="Override withdrawal rate (%)"),
    return_pct: Optional[float] = typer.Option(None, help="Override expected annual return (%)"),
    retire_age: Optional[int] = typer.Option(None, help="Override target retirement age"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    out: Optional[Path] = typer.Option(None, help="Output path for projection JSON"),
):
    """Project FIRE number, date and bridge for one snapshot."""
    snap = _with_overrides(
        _load_snapshot(snapshot),
        monthly_spending_in_retirement=spending,
        withdrawal_rate_percent=withdrawal_rate,
        expected_annual_return_percent=return_pct,
        target_retirement_age=retire_age,
    )
    engine_config = _load_config(config)
    result = projector.project(snap, engine_config)
    payload = result.to_dict()
    if out:
        _save_json(out, payload)
        typer.echo(f"Projection written to {out}")
    elif as_json:
        typer.echo(json.dumps(payload, indent=2))
    else:
        _render_result(snap, result, engine_config)


@app.command("schedule")
def schedule_cmd(
    snapshot: Optional[Path] = typer.Option(None, help="Snapshot JSON (defaults to saved inputs)"),
    config: Optional[Path] = typer.Option(None, help="Engine config JSON"),
    years: Optional[int] = typer.Option(None, help="Years to project (default: to pension access)"),
    out: Optional[Path] = typer.Option(None, help="Write the schedule as CSV"),
):
    """Year-by-year wealth per wrapper."""
    snap = _load_snapshot(snapshot)
    df = schedule.wealth_schedule(snap, years=years, config=_load_config(config))
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        typer.echo(f"Schedule written to {out}")
        return

    table = Table(title="Wealth schedule")
    for col in ("Age", "ISA", "Pension", "GIA", "Total"):
        table.add_column(col, justify="right")
    for row in df.itertuples(index=False):
        style = "green" if row.reached else None
        table.add_row(
            str(row.age),
            format_currency(row.isa),
            format_currency(row.pension),
            format_currency(row.gia),
            format_currency(row.total),
            style=style,
        )
    console.print(table)


@app.command()
def scenario(
    delta: Path = typer.Option(..., help="Scenario delta JSON"),
    snapshot: Optional[Path] = typer.Option(None, help="Snapshot JSON (defaults to saved inputs)"),
    config: Optional[Path] = typer.Option(None, help="Engine config JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for comparison JSON"),
):
    """Compare the snapshot against an adjusted scenario."""
    snap = _load_snapshot(snapshot)
    try:
        delta_obj = config_io.load_scenario_delta(delta)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--delta") from exc

    comparison = pipeline.compare_scenario(snap, delta_obj, _load_config(config))
    payload = {
        "baseline": comparison.baseline.to_dict(),
        "scenario": comparison.scenario.to_dict(),
        "delta": comparison.delta,
    }
    if out:
        _save_json(out, payload)
        typer.echo(f"Scenario comparison written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


@app.command("sweep")
def sweep_cmd(
    field: str = typer.Option(..., help="Snapshot field to vary, e.g. monthly_isa_contributions"),
    values: str = typer.Option(..., help="Comma-separated values, e.g. 500,750,1000"),
    snapshot: Optional[Path] = typer.Option(None, help="Snapshot JSON (defaults to saved inputs)"),
    config: Optional[Path] = typer.Option(None, help="Engine config JSON"),
    out: Optional[Path] = typer.Option(None, help="Write the sweep as CSV"),
):
    """Run one projection per value of a single field."""
    try:
        parsed = [float(v) for v in values.split(",") if v.strip()]
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--values") from exc

    snap = _load_snapshot(snapshot)
    field = config_io.KEY_ALIASES.get(field, field)
    try:
        df = pipeline.sweep(snap, field, parsed, _load_config(config))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--field") from exc

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        typer.echo(f"Sweep written to {out}")
    else:
        typer.echo(df.to_string(index=False))


def _prompt_number(label: str, default: Optional[float], minimum: float = 0.0) -> float:
    value = typer.prompt(label, default=default if default is not None else 0.0, type=float)
    if value < minimum:
        raise typer.BadParameter(f"{label} must be at least {minimum:g}")
    return value


@app.command()
def interactive(
    config: Optional[Path] = typer.Option(None, help="Engine config JSON"),
):
    """
    Step through each input with the saved value as default, save, then project.
    """
    console.print("[bold cyan]FIRE calculator[/bold cyan]\n")
    saved = storage.load_inputs()
    holdings = saved.holdings()

    current_age = int(_prompt_number("Current age", saved.current_age, minimum=1))
    retire_age = int(_prompt_number("Target retirement age", saved.target_retirement_age, minimum=1))
    if retire_age <= current_age:
        raise typer.BadParameter("Target retirement age must be after current age")

    snap = FinanceSnapshot(
        current_age=current_age,
        target_retirement_age=retire_age,
        monthly_spending_in_retirement=_prompt_number(
            "Monthly spending in retirement (£)", saved.monthly_spending_in_retirement
        ),
        isa_balance=_prompt_number("ISA balance (£)", holdings.isa),
        pension_balance=_prompt_number("Pension / SIPP balance (£)", holdings.pension),
        gia_balance=_prompt_number("General investment account balance (£)", holdings.gia),
        monthly_gross_income=_prompt_number("Gross monthly income (£)", saved.monthly_gross_income),
        monthly_isa_contributions=_prompt_number("Monthly ISA contributions (£)", holdings.isa_contribution),
        monthly_pension_contributions=_prompt_number(
            "Monthly pension contributions incl. employer (£)", holdings.pension_contribution
        ),
        withdrawal_rate_percent=_prompt_number("Safe withdrawal rate (%)", saved.withdrawal_rate_percent),
        expected_annual_return_percent=_prompt_number(
            "Expected annual return (%)", saved.expected_annual_return_percent
        ),
    )
    path = storage.save_inputs(snap)
    console.print(f"[green]Inputs saved to {path}[/green]\n")

    engine_config = _load_config(config)
    _render_result(snap, projector.project(snap, engine_config), engine_config)


@app.command()
def reset():
    """Clear saved inputs."""
    if storage.clear_inputs():
        typer.echo("Saved inputs cleared.")
    else:
        typer.echo("No saved inputs found.")


if __name__ == "__main__":
    app()
