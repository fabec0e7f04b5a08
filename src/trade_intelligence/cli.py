"""CLI entry point for the trade intelligence engine.

Every command reads JSON from a file (or ``-`` for stdin) and prints a
JSON result on stdout.
"""

from __future__ import annotations

import json
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.enums import ProfitFactorMode
from .core.errors import ConfigError, InvalidInput
from .observability.logger import get_logger, new_trace_id, setup_logging

# Exit code for input the engine cannot interpret
EXIT_INVALID_INPUT = 2

logger = get_logger(__name__)


def _load_json(stream: Any) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"not valid JSON: {exc}") from exc


def _trade_list(payload: Any) -> list[Any]:
    if isinstance(payload, dict) and "trades" in payload:
        payload = payload["trades"]
    if not isinstance(payload, list):
        raise InvalidInput("expected a JSON list of trades")
    return payload


def _emit(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    raise click.exceptions.Exit(EXIT_INVALID_INPUT)


@click.group()
@click.option("--config", default=None, help="TOML config file path")
@click.option("--log-level", default=None, help="Override configured log level")
@click.pass_context
def main(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """Trade validation and performance intelligence."""
    try:
        settings = load_settings(config)
    except ConfigError as exc:
        _fail(exc)
    setup_logging(
        level=log_level or settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_trace_id()
    ctx.obj = settings


@main.command()
@click.argument("intent_file", type=click.File("r"))
def validate(intent_file: Any) -> None:
    """Validate a trade intent checklist."""
    from .validation.trade_rules import validate_trade_intent

    try:
        result = validate_trade_intent(_load_json(intent_file))
    except InvalidInput as exc:
        _fail(exc)
    logger.info("intent_validated", valid=result.valid, reason=result.reason)
    _emit(result.to_dict())


@main.command()
@click.argument("trades_file", type=click.File("r"))
@click.option(
    "--profit-factor",
    type=click.Choice([m.value for m in ProfitFactorMode]),
    default=None,
    help="Profit factor formula (default from config)",
)
@click.option("--max-risk-percent", type=float, default=None, help="Over-risk threshold")
@click.pass_obj
def performance(
    settings: Settings,
    trades_file: Any,
    profit_factor: str | None,
    max_risk_percent: float | None,
) -> None:
    """Aggregate a trade history into a performance summary."""
    from .journal.performance import aggregate_performance

    try:
        trades = _trade_list(_load_json(trades_file))
        summary = aggregate_performance(
            trades,
            profit_factor_mode=profit_factor,
            max_risk_percent=max_risk_percent,
            settings=settings,
        )
    except InvalidInput as exc:
        _fail(exc)
    logger.info("performance_aggregated", trades=summary.total_trades)
    _emit(summary.to_dict())


@main.command()
@click.argument("trades_file", type=click.File("r"))
def sessions(trades_file: Any) -> None:
    """Per-session metrics for a trade history."""
    from .journal.session_analysis import analyse_sessions

    try:
        result = analyse_sessions(_trade_list(_load_json(trades_file)))
    except InvalidInput as exc:
        _fail(exc)
    logger.info("sessions_analysed", trades=result.total_trades)
    _emit(result.to_dict())


@main.command()
@click.argument("timestamp")
def session(timestamp: str) -> None:
    """Classify one timestamp into its market session."""
    from .journal.sessions import classify_pnl_session, classify_session, session_info

    try:
        label = classify_session(timestamp)
        pnl_label = classify_pnl_session(timestamp)
    except InvalidInput as exc:
        _fail(exc)
    payload = session_info(label).to_dict()
    payload["pnlSession"] = pnl_label.value
    _emit(payload)


if __name__ == "__main__":
    main()
