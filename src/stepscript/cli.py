from __future__ import annotations

import logging

import typer

from stepscript import __version__
from stepscript.core import config as config_core, envelope, ids
from stepscript.core.driver import replay as replay_plan
from stepscript.core.errors import (
    AmbiguousStepError,
    PlanError,
    StepArgumentError,
    TraceFormatError,
    UnmatchedStepError,
)
from stepscript.core.logging_config import setup_logging
from stepscript.core.plan import load_plan
from stepscript.core.recorder import TraceRecorder
from stepscript.core.sink import TraceSink, open_file_sink
from stepscript.core.steps import registry

app = typer.Typer(add_completion=False, help="stepscript - replay structured scenarios into a step trace")

log = logging.getLogger(__name__)


def _emit(out: dict) -> None:
    typer.echo(envelope.dumps(out))
    if out.get("ok") is True:
        raise typer.Exit(code=0)
    raise typer.Exit(code=1)


@app.command()
def version(json_output: bool = typer.Option(False, "--json", help="Output JSON envelope")):
    if json_output:
        _emit(envelope.ok(command="version", data={"version": __version__}))
    typer.echo(f"stepscript {__version__}")


@app.command()
def steps(json_output: bool = typer.Option(True, "--json")):
    """List the registered step definitions."""
    definitions = [
        {"kind": d.kind.value, "pattern": d.pattern, "handler": d.handler.__name__}
        for d in registry
    ]
    _emit(envelope.ok(command="steps", data={"steps": definitions}))


@app.command()
def replay(
    plan_path: str = typer.Option(..., "--plan", help="JSON plan of features, scenarios and steps"),
    out_path: str | None = typer.Option(None, "--out", help="Trace file (appended); defaults to stderr"),
    log_level: str | None = typer.Option(None, "--log-level"),
    json_output: bool = typer.Option(True, "--json"),
):
    """Replay a plan through the step trace recorder."""
    try:
        setup_logging(config_core.log_level(log_level))
    except ValueError as exc:
        _emit(
            envelope.err(
                command="replay",
                error_type="INVALID_ARGUMENT",
                message=str(exc),
                details={"log_level": log_level},
            )
        )

    run = ids.run_id()
    target = config_core.trace_output(out_path)
    details = {"plan": plan_path, "out": str(target) if target else None, "run_id": run}
    try:
        plan = load_plan(plan_path)
        handle = None
        if target is not None:
            sink, handle = open_file_sink(target)
        else:
            sink = TraceSink()
        try:
            log.info("replaying %s as %s", plan_path, run)
            replay_plan(plan, TraceRecorder(sink), registry)
        finally:
            if handle is not None:
                handle.close()
        out = envelope.ok(
            command="replay",
            data={
                "run_id": run,
                "out": details["out"],
                "features": len(plan.features),
                "scenarios": plan.scenario_count,
                "lines": sink.lines_written,
            },
        )
    except FileNotFoundError as exc:
        out = envelope.err(command="replay", error_type="NOT_FOUND", message=str(exc), details=details)
    except (PlanError, StepArgumentError, TraceFormatError, UnmatchedStepError, AmbiguousStepError) as exc:
        out = envelope.err(command="replay", error_type=exc.error_type, message=str(exc), details=details)
    except (ValueError, OSError) as exc:
        out = envelope.err(command="replay", error_type="INVALID_ARGUMENT", message=str(exc), details=details)
    _emit(out)


if __name__ == "__main__":
    app()
