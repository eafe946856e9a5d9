from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import jsonschema

from stepscript.core.errors import PlanError
from stepscript.core.model import Context, StepKind, Table

CONTINUATION_KEYWORDS = ("And", "But")

_TABLE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["header", "rows"],
    "additionalProperties": False,
    "properties": {
        "header": {"type": "array", "items": {"type": "string"}, "minItems": 1},
        "rows": {
            "type": "array",
            "items": {"type": "array", "items": {"type": ["string", "null"]}},
        },
    },
}

PLAN_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["features"],
    "properties": {
        "features": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["title"],
                "properties": {
                    "title": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "scenarios": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["title"],
                            "properties": {
                                "title": {"type": "string"},
                                "tags": {"type": "array", "items": {"type": "string"}},
                                "steps": {
                                    "type": "array",
                                    "items": {
                                        "type": "object",
                                        "required": ["keyword", "text"],
                                        "additionalProperties": False,
                                        "properties": {
                                            "keyword": {"enum": ["Given", "When", "Then", "And", "But"]},
                                            "text": {"type": "string"},
                                            "table": _TABLE_SCHEMA,
                                        },
                                    },
                                },
                                "examples": _TABLE_SCHEMA,
                            },
                        },
                    },
                },
            },
        },
    },
}

_PLACEHOLDER_RE = re.compile(r"<([^<>]+)>")


@dataclass(frozen=True)
class PlannedStep:
    kind: StepKind
    text: str
    table: Table | None = None


@dataclass(frozen=True)
class PlannedScenario:
    context: Context
    steps: tuple[PlannedStep, ...] = ()


@dataclass(frozen=True)
class PlannedFeature:
    context: Context
    scenarios: tuple[PlannedScenario, ...] = ()


@dataclass(frozen=True)
class Plan:
    features: tuple[PlannedFeature, ...] = field(default_factory=tuple)

    @property
    def scenario_count(self) -> int:
        return sum(len(f.scenarios) for f in self.features)


def _substitute(text: str | None, values: Dict[str, str | None]) -> str | None:
    if text is None:
        return None
    whole = _PLACEHOLDER_RE.fullmatch(text)
    if whole and whole.group(1) in values and values[whole.group(1)] is None:
        # A cell that is only a null placeholder stays null.
        return None

    def repl(m: re.Match[str]) -> str:
        name = m.group(1)
        if name not in values:
            return m.group(0)
        value = values[name]
        return "" if value is None else value

    return _PLACEHOLDER_RE.sub(repl, text)


def _build_table(raw: Dict[str, Any] | None, values: Dict[str, str | None]) -> Table | None:
    if raw is None:
        return None
    rows = [[_substitute(cell, values) for cell in row] for row in raw["rows"]]
    return Table.from_cells(raw["header"], rows)


def _build_steps(raw_steps: list[dict], values: Dict[str, str | None], scenario_title: str) -> tuple[PlannedStep, ...]:
    steps: list[PlannedStep] = []
    previous: StepKind | None = None
    for raw in raw_steps:
        keyword = raw["keyword"]
        if keyword in CONTINUATION_KEYWORDS:
            if previous is None:
                raise PlanError(f"Scenario {scenario_title!r} starts with {keyword!r}; it has no step to continue")
            kind = previous
        else:
            kind = StepKind.parse(keyword)
        steps.append(
            PlannedStep(
                kind=kind,
                text=_substitute(raw["text"], values) or "",
                table=_build_table(raw.get("table"), values),
            )
        )
        previous = kind
    return tuple(steps)


def _expand_scenario(raw: dict) -> list[PlannedScenario]:
    context = Context(title=raw["title"], tags=tuple(raw.get("tags", ())))
    examples = raw.get("examples")
    if examples is None:
        return [PlannedScenario(context=context, steps=_build_steps(raw.get("steps", []), {}, context.title))]
    header = examples["header"]
    # Validates the examples block the same way as any step table.
    Table.from_cells(header, examples["rows"])
    return [
        PlannedScenario(
            context=context,
            steps=_build_steps(raw.get("steps", []), dict(zip(header, row)), context.title),
        )
        for row in examples["rows"]
    ]


def parse_plan(data: Any) -> Plan:
    try:
        jsonschema.validate(data, PLAN_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise PlanError(f"Invalid plan: {exc.message}") from exc
    features = []
    for raw in data["features"]:
        scenarios: list[PlannedScenario] = []
        for raw_scenario in raw.get("scenarios", []):
            scenarios.extend(_expand_scenario(raw_scenario))
        features.append(
            PlannedFeature(
                context=Context(title=raw["title"], tags=tuple(raw.get("tags", ()))),
                scenarios=tuple(scenarios),
            )
        )
    return Plan(features=tuple(features))


def load_plan(path: str | Path) -> Plan:
    p = Path(path).expanduser()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise PlanError(f"Plan is not UTF-8 text: {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PlanError(f"Plan is not valid JSON: {p}: {exc}") from exc
    return parse_plan(data)
