from __future__ import annotations

import sys
from typing import Callable, Dict, Optional

import typer

from apps.render import render_controls, render_snapshot
from config.settings import StopwatchConfig, get_config
from core.timing.stopwatch import StopwatchEngine


app = typer.Typer(add_completion=False, no_args_is_help=True)


def _commands(engine: StopwatchEngine) -> Dict[str, Callable[[], bool]]:
    return {
        "s": engine.press_start,
        "l": engine.lap,
        "x": engine.stop,
        "r": engine.reset,
    }


@app.command()
def run(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Session name used for the journal file"),
    interval_ms: Optional[int] = typer.Option(None, "--interval-ms", help="Tick interval in milliseconds"),
    log: Optional[bool] = typer.Option(None, "--log/--no-log", help="Write the transition journal"),
) -> None:
    """Interactive stopwatch: type a command letter and press Enter."""

    cfg = get_config()
    overrides = {}
    if interval_ms is not None:
        overrides["tick_interval_ms"] = interval_ms
    if log is not None:
        overrides["event_log"] = log
    if overrides:
        cfg = StopwatchConfig.model_validate({**cfg.model_dump(), **overrides})

    engine = StopwatchEngine.from_config(cfg, session=name)
    if engine.events_writer is not None:
        typer.echo(f"[lapwatch] journal → {engine.events_writer.path}")

    commands = _commands(engine)
    with engine:
        typer.echo(render_snapshot(engine.snapshot()))
        typer.echo(render_controls(engine.snapshot()))
        for raw in sys.stdin:
            key = raw.strip().lower()
            if not key:
                continue
            if key == "q":
                break
            if key != "p":
                action = commands.get(key)
                if action is None:
                    typer.echo(f"[lapwatch] unknown command {key!r}", err=True)
                    continue
                if not action():
                    typer.echo(f"[lapwatch] '{key}' not available while {engine.snapshot().state}", err=True)
            snap = engine.snapshot()
            typer.echo(render_snapshot(snap))
            typer.echo(render_controls(snap))
    if engine.journal_error:
        typer.echo(f"[lapwatch] journal disabled: {engine.journal_error}", err=True)


@app.command()
def paths() -> None:
    """Show where journals are written and whether that location is writeable."""

    p = get_config().paths.resolve()
    try:
        p.verify_writeable()
    except OSError as e:
        typer.echo(f"[WARN] Writeability check failed: {e}", err=True)
    typer.echo(f"Logs root:     {p.logs_root}")
    typer.echo(f"Sessions root: {p.sessions_root}")


if __name__ == "__main__":
    app()
