"""Step definitions and the registry that matches step text against them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from stepscript.core.errors import AmbiguousStepError, StepArgumentError, UnmatchedStepError
from stepscript.core.model import StepKind, Table
from stepscript.core.recorder import TraceRecorder

log = logging.getLogger(__name__)

Converter = Callable[[str], Any]
Handler = Callable[..., Any]


@dataclass(frozen=True)
class StepDefinition:
    kind: StepKind
    pattern: str
    handler: Handler
    converters: tuple[Converter | None, ...] = ()

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern)

    def convert(self, groups: Sequence[str]) -> list[Any]:
        values: list[Any] = []
        for i, raw in enumerate(groups):
            converter = self.converters[i] if i < len(self.converters) else None
            if converter is None:
                values.append(raw)
                continue
            try:
                values.append(converter(raw))
            except (TypeError, ValueError) as exc:
                raise StepArgumentError(self.pattern, raw, str(exc)) from exc
        return values


@dataclass(frozen=True)
class StepMatch:
    definition: StepDefinition
    arguments: tuple[Any, ...]

    def run(self, recorder: TraceRecorder, table: Table | None = None) -> Any:
        if table is not None:
            return self.definition.handler(recorder, *self.arguments, table)
        return self.definition.handler(recorder, *self.arguments)


class StepRegistry:
    def __init__(self) -> None:
        self._definitions: list[StepDefinition] = []

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def register(self, kind: StepKind, pattern: str, handler: Handler, converters: Sequence[Converter | None] = ()) -> StepDefinition:
        definition = StepDefinition(kind=kind, pattern=pattern, handler=handler, converters=tuple(converters))
        self._definitions.append(definition)
        return definition

    def _decorator(self, kind: StepKind, pattern: str, converters: Sequence[Converter | None]):
        def decorate(handler: Handler) -> Handler:
            self.register(kind, pattern, handler, converters)
            return handler

        return decorate

    def given(self, pattern: str, *, converters: Sequence[Converter | None] = ()):
        return self._decorator(StepKind.GIVEN, pattern, converters)

    def when(self, pattern: str, *, converters: Sequence[Converter | None] = ()):
        return self._decorator(StepKind.WHEN, pattern, converters)

    def then(self, pattern: str, *, converters: Sequence[Converter | None] = ()):
        return self._decorator(StepKind.THEN, pattern, converters)

    def match(self, kind: StepKind, text: str) -> StepMatch:
        found: list[tuple[StepDefinition, re.Match[str]]] = []
        for definition in self._definitions:
            if definition.kind is not kind:
                continue
            m = definition.regex.fullmatch(text)
            if m:
                found.append((definition, m))
        if not found:
            raise UnmatchedStepError(kind.value, text)
        if len(found) > 1:
            raise AmbiguousStepError(kind.value, text, [d.pattern for d, _ in found])
        definition, m = found[0]
        log.debug("matched %s %r to %r", kind.value, text, definition.pattern)
        return StepMatch(definition=definition, arguments=tuple(definition.convert(m.groups())))


# ---- Logging step library ----
registry = StepRegistry()


@registry.given(r"I have these friends")
def have_these_friends(recorder: TraceRecorder, table: Table) -> str:
    return recorder.step(StepKind.GIVEN, "I have these friends", table=table)


@registry.given(r"Call me (.*)")
def call_me_like_this(recorder: TraceRecorder, name: str) -> str:
    return recorder.step(StepKind.GIVEN, "Call me {}", name)


@registry.when(r"(\d+) plus (\d+) gives (\d+)", converters=(int, int, int))
def some_plus_some_gives_some(recorder: TraceRecorder, first: int, second: int, total: int) -> str:
    return recorder.step(StepKind.WHEN, "{} plus {} gives {}", first, second, total)


@registry.when(r"I borrow (.*) dollars from", converters=(int,))
def borrow_dollars_from(recorder: TraceRecorder, amount: int, table: Table) -> str:
    return recorder.step(StepKind.WHEN, "I borrow {} dollars from", amount, table=table)


@registry.then(r"I should have only (.*) left as a friend")
def should_have_only_friend(recorder: TraceRecorder, friend_name: str) -> str:
    return recorder.step(StepKind.THEN, "I should have only {} left as a friend", friend_name)


@registry.then(r"everything should be alright")
def everything_should_be_alright(recorder: TraceRecorder) -> str:
    return recorder.step(StepKind.THEN, "everything should be alright")
