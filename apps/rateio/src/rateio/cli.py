"""CLI bootstrap for rateio."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer

from rateio.core.settings import get_settings
from rateio.domain.errors import SplitError
from rateio.properties.generator import Strategy
from rateio.properties.harness import replay_case, run_properties
from rateio.properties.invariants import Invariant
from rateio.properties.schemas import MAX_SEED, HarnessConfig, Report
from rateio.services.splitter import split

app = typer.Typer(help="Split amounts exactly and check the splitter's properties.")

SCALE_OPTION = typer.Option(2, "--scale", min=0, help="Fractional digits per share.")
TRIALS_OPTION = typer.Option(None, "--trials", min=0)
SEED_OPTION = typer.Option(None, "--seed", min=0, max=MAX_SEED)
STRATEGY_OPTION = typer.Option(None, "--strategy", help="Repeat to select several.")
INVARIANT_OPTION = typer.Option(None, "--invariant", help="Repeat to select several.")
WORKERS_OPTION = typer.Option(None, "--workers", min=1, max=64)
OUTPUT_OPTION = typer.Option(None, "--output", dir_okay=False, writable=True)
REPORT_OPTION = typer.Option(
    None,
    "--report",
    exists=True,
    dir_okay=False,
    help="Report file whose bounds and sign setting the case was drawn with.",
)


@app.callback()
def configure() -> None:
    """Configure logging from settings before any command runs."""
    logging.basicConfig(level=get_settings().log_level.upper())


@app.command("split")
def split_command(
    amount: str,
    recipients: int,
    scale: int = SCALE_OPTION,
) -> None:
    """Split AMOUNT among RECIPIENTS and print one share per line."""
    try:
        amount_decimal = Decimal(amount)
    except InvalidOperation as exc:
        raise typer.BadParameter(
            f"{amount!r} is not a decimal number", param_hint="AMOUNT"
        ) from exc

    try:
        shares = split(
            amount_decimal,
            recipients,
            scale,
            allow_negative=get_settings().allow_negative,
        )
    except SplitError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=1) from exc

    for share in shares:
        typer.echo(str(share))
    typer.echo(f"Total: {shares.total()}")


@app.command("check")
def check(
    trials: Optional[int] = TRIALS_OPTION,
    seed: Optional[int] = SEED_OPTION,
    strategy: Optional[list[Strategy]] = STRATEGY_OPTION,
    invariant: Optional[list[Invariant]] = INVARIANT_OPTION,
    fail_fast: bool = typer.Option(False, "--fail-fast"),
    workers: Optional[int] = WORKERS_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
) -> None:
    """Run a property campaign against the splitter."""
    config = HarnessConfig.from_settings(
        trials=trials,
        seed=seed,
        strategies=frozenset(strategy) if strategy else None,
        invariants=frozenset(invariant) if invariant else None,
        fail_fast=fail_fast,
        workers=workers,
    )
    report = run_properties(config)
    _echo_report(report)

    if output is not None:
        output.write_text(report.model_dump_json(indent=2), encoding="utf-8")
        typer.echo(f"Report: {output}")

    if not report.ok:
        raise typer.Exit(code=1)


@app.command("replay")
def replay(
    seed: int = typer.Option(..., "--seed", min=0, help="Case seed from a report."),
    strategy: Strategy = typer.Option(..., "--strategy"),
    index: int = typer.Option(..., "--index", min=0),
    report: Optional[Path] = REPORT_OPTION,
) -> None:
    """Re-run one recorded case and shrink it again if it still fails."""
    config = None
    if report is not None:
        recorded = Report.model_validate_json(report.read_text(encoding="utf-8"))
        config = HarnessConfig.from_settings(
            invariants=frozenset(recorded.invariants),
            allow_negative=recorded.allow_negative,
            bounds=recorded.bounds,
        )
    record = replay_case(seed, strategy, index, config)
    outcome = record.case.outcome
    typer.echo(f"Case: {record.case.input.describe()}")
    if not outcome.is_failure:
        typer.echo("Outcome: passed")
        return

    typer.echo(f"Outcome: {outcome.kind.value} ({outcome.violation})")
    typer.echo(f"Minimal: {record.minimal_input.describe()}")
    raise typer.Exit(code=1)


def _echo_report(report: Report) -> None:
    typer.echo(f"Seed: {report.seed}")
    typer.echo(
        f"Passed: {report.passed} | "
        f"Failed: {report.failed} | "
        f"Errored: {report.errored}"
    )
    for failure in report.failures:
        original = failure.original_input
        minimal = failure.minimal_input
        typer.echo(
            f"- {failure.strategy.value}#{failure.index} "
            f"seed={failure.seed} {failure.violation}: "
            f"{original.amount} / {original.recipients} @ {original.scale}"
            f" -> {minimal.amount} / {minimal.recipients} @ {minimal.scale}"
        )


def main() -> None:
    """Run the rateio CLI application."""
    app()


if __name__ == "__main__":
    main()
