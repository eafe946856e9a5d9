from __future__ import annotations

import json

import pytest

from stepscript.core.errors import PlanError, TableIntegrityError
from stepscript.core.literals import describe_table
from stepscript.core.model import StepKind
from stepscript.core.plan import load_plan, parse_plan


def _plan(*steps: dict, **scenario) -> dict:
    return {
        "features": [
            {
                "title": "f",
                "scenarios": [{"title": "s", "steps": list(steps), **scenario}],
            }
        ]
    }


def test_parse_minimal_plan() -> None:
    plan = parse_plan({"features": [{"title": "f", "tags": ["x", "x", "y"]}]})
    assert len(plan.features) == 1
    assert plan.features[0].context.tags == ("x", "y")
    assert plan.scenario_count == 0


def test_schema_violation_raises_plan_error() -> None:
    with pytest.raises(PlanError, match="Invalid plan"):
        parse_plan({"features": [{"tags": []}]})
    with pytest.raises(PlanError):
        parse_plan(_plan({"keyword": "Maybe", "text": "x"}))


def test_and_but_take_previous_kind() -> None:
    plan = parse_plan(
        _plan(
            {"keyword": "Given", "text": "a"},
            {"keyword": "And", "text": "b"},
            {"keyword": "Then", "text": "c"},
            {"keyword": "But", "text": "d"},
        )
    )
    kinds = [step.kind for step in plan.features[0].scenarios[0].steps]
    assert kinds == [StepKind.GIVEN, StepKind.GIVEN, StepKind.THEN, StepKind.THEN]


def test_leading_continuation_is_rejected() -> None:
    with pytest.raises(PlanError, match="no step to continue"):
        parse_plan(_plan({"keyword": "And", "text": "a"}))


def test_step_table_is_built() -> None:
    plan = parse_plan(
        _plan({"keyword": "Given", "text": "t", "table": {"header": ["a", "b"], "rows": [["1", None]]}})
    )
    table = plan.features[0].scenarios[0].steps[0].table
    assert table.rows == ({"a": "1", "b": None},)


def test_malformed_step_table_is_rejected() -> None:
    with pytest.raises(TableIntegrityError):
        parse_plan(_plan({"keyword": "Given", "text": "t", "table": {"header": ["a", "b"], "rows": [["1"]]}}))


def test_outline_expands_one_scenario_per_example() -> None:
    plan = parse_plan(
        _plan(
            {"keyword": "When", "text": "I borrow <amount> dollars from"},
            {"keyword": "Then", "text": "<who> and <unknown>", "table": {"header": ["n"], "rows": [["<who>"]]}},
            examples={"header": ["amount", "who"], "rows": [["42", "Sam"], ["1923", "Tom"]]},
        )
    )
    scenarios = plan.features[0].scenarios
    assert [s.steps[0].text for s in scenarios] == ["I borrow 42 dollars from", "I borrow 1923 dollars from"]
    assert scenarios[1].steps[1].text == "Tom and <unknown>"
    assert scenarios[1].steps[1].table.rows == ({"n": "Tom"},)
    assert all(s.context.title == "s" for s in scenarios)


def test_load_plan_reads_json(tmp_path) -> None:
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(_plan({"keyword": "Then", "text": "x"})), encoding="utf-8")
    assert load_plan(path).scenario_count == 1


def test_load_plan_rejects_bad_json(tmp_path) -> None:
    path = tmp_path / "plan.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PlanError, match="not valid JSON"):
        load_plan(path)


def test_load_plan_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_plan(tmp_path / "missing.json")


def test_null_example_value_keeps_whole_cell_null() -> None:
    plan = parse_plan(
        _plan(
            {"keyword": "Given", "text": "t", "table": {"header": ["n", "m"], "rows": [["<who>", "hi <who>"]]}},
            examples={"header": ["who"], "rows": [[None]]},
        )
    )
    table = plan.features[0].scenarios[0].steps[0].table
    assert table.rows == ({"n": None, "m": "hi "},)
    assert "'n' = '$Null'" in describe_table(table)
