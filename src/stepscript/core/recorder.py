from __future__ import annotations

import logging

from stepscript.core.errors import TraceFormatError
from stepscript.core.literals import check_literal, describe_context, describe_table
from stepscript.core.model import Context, StepKind, Table
from stepscript.core.sink import TraceSink

log = logging.getLogger(__name__)


def mark_argument(value: object) -> str:
    return f"Argument({value})"


PLACEHOLDER = "{}"


def substitute_arguments(pattern: str, arguments: tuple) -> str:
    """Replace each `{}` in order; any other brace is literal text."""
    pieces = pattern.split(PLACEHOLDER)
    if len(pieces) - 1 != len(arguments):
        raise TraceFormatError(
            f"Step pattern {pattern!r} has {len(pieces) - 1} placeholder(s) but {len(arguments)} argument(s)"
        )
    text = pieces[0]
    for argument, piece in zip(arguments, pieces[1:]):
        text += mark_argument(argument) + piece
    return text


def render_step(kind: StepKind | str, pattern: str, *arguments: object, table: Table | None = None) -> str:
    """Render one step line.

    `pattern` carries `{}` placeholders for the values the driver captured;
    each one is wrapped as `Argument(<value>)` so dynamic tokens stay visible
    when traces are diffed.
    """
    kind = kind if isinstance(kind, StepKind) else StepKind.parse(kind)
    text = check_literal("step text", substitute_arguments(pattern, arguments))
    line = f"(Step -{kind.value.lower()} '{text}'"
    if table is not None:
        line += f" -tableArgument {describe_table(table)}"
    return line + "),"


def render_hook(name: str, context_literal: str | None = None) -> str:
    if context_literal is None:
        return f"(Hook '{name}'),"
    return f"(Hook '{name}' -withContext {context_literal}),"


def _kind_literal(field: str, kind: StepKind | str) -> str:
    kind = kind if isinstance(kind, StepKind) else StepKind.parse(kind)
    return f"@{{ {field} = $StepTypeEnum.{kind.value} }}"


class TraceRecorder:
    """Turns driver events into trace lines, in call order.

    Every hook takes its context explicitly; the recorder keeps no notion of
    a current feature or scenario. Lines are formatted completely before they
    reach the sink, so a formatting error writes nothing.
    """

    def __init__(self, sink: TraceSink | None = None) -> None:
        self.sink = sink if sink is not None else TraceSink()

    def _emit(self, line: str) -> str:
        self.sink.write_line(line)
        log.debug("trace line: %s", line)
        return line

    # ---- Run ----
    def before_test_run(self) -> str:
        return self._emit(render_hook("BeforeTestRun"))

    def after_test_run(self) -> str:
        return self._emit(render_hook("AfterTestRun"))

    # ---- Feature ----
    def before_feature(self, context: Context) -> str:
        return self._emit(render_hook("BeforeFeature", describe_context(context)))

    def after_feature(self) -> str:
        return self._emit(render_hook("AfterFeature"))

    # ---- Scenario ----
    def before_scenario(self, context: Context) -> str:
        return self._emit(render_hook("BeforeScenario", describe_context(context)))

    def after_scenario(self) -> str:
        return self._emit(render_hook("AfterScenario"))

    # ---- Block ----
    def before_scenario_block(self, kind: StepKind | str) -> str:
        return self._emit(render_hook("BeforeScenarioBlock", _kind_literal("BlockType", kind)))

    def after_scenario_block(self) -> str:
        return self._emit(render_hook("AfterScenarioBlock"))

    # ---- Step ----
    def before_step(self, kind: StepKind | str) -> str:
        return self._emit(render_hook("BeforeStep", _kind_literal("StepType", kind)))

    def after_step(self) -> str:
        return self._emit(render_hook("AfterStep"))

    def step(self, kind: StepKind | str, pattern: str, *arguments: object, table: Table | None = None) -> str:
        return self._emit(render_step(kind, pattern, *arguments, table=table))
