from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Sequence

from stepscript.core.errors import TableIntegrityError


class StepKind(str, Enum):
    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"

    @classmethod
    def parse(cls, value: str) -> "StepKind":
        normalized = value.strip().capitalize()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Invalid step kind: {value!r} (expected Given, When or Then)")


@dataclass(frozen=True)
class Context:
    """Read-only title and tags handed to feature and scenario hooks."""

    title: str
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Tags form an ordered set: first occurrence wins.
        object.__setattr__(self, "tags", tuple(dict.fromkeys(self.tags or ())))


@dataclass(frozen=True)
class Table:
    header: tuple[str, ...]
    rows: tuple[Mapping[str, str | None], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        header = tuple(self.header)
        if not header:
            raise TableIntegrityError("Table header must name at least one column")
        seen: set[str] = set()
        for name in header:
            if name in seen:
                raise TableIntegrityError(f"Duplicate table column: {name!r}")
            seen.add(name)
        rows = tuple(dict(row) for row in self.rows)
        for i, row in enumerate(rows):
            if set(row) != seen or len(row) != len(header):
                raise TableIntegrityError(
                    f"Table row {i} has columns {sorted(row)}, expected {list(header)}"
                )
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_cells(cls, header: Sequence[str], rows: Iterable[Sequence[str | None]]) -> "Table":
        mapped = []
        for i, cells in enumerate(rows):
            if len(cells) != len(header):
                raise TableIntegrityError(f"Table row {i} has {len(cells)} cells, expected {len(header)}")
            mapped.append(dict(zip(header, cells)))
        return cls(header=tuple(header), rows=tuple(mapped))

    @property
    def row_count(self) -> int:
        return len(self.rows)
