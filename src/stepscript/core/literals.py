"""Render titles, tag sets and tables as single-line PowerShell-style literals.

Nothing is escaped. Text that would break out of the literal it is placed in
is rejected with `LiteralDelimiterError` instead.
"""

from __future__ import annotations

from typing import Iterable

from stepscript.core.errors import LiteralDelimiterError
from stepscript.core.model import Context, Table

NULL_SENTINEL = "$Null"
EMPTY_COLLECTION = "@()"

_LINE_BREAKS = ("\n", "\r")
# Quoted text only has to avoid the closing quote.
QUOTED_DELIMITERS = ("'", *_LINE_BREAKS)
# Tags are emitted bare, so record and sequence punctuation is off limits too.
BARE_DELIMITERS = ("'", ",", ";", "{", "}", "(", ")", *_LINE_BREAKS)


def check_literal(what: str, value: str, delimiters: Iterable[str] = QUOTED_DELIMITERS) -> str:
    for delimiter in delimiters:
        if delimiter in value:
            raise LiteralDelimiterError(what, value, delimiter)
    return value


def describe_tags(tags: Iterable[str]) -> str:
    tags = [check_literal("tag", tag, BARE_DELIMITERS) for tag in tags]
    if not tags:
        return EMPTY_COLLECTION
    return ",".join(tags)


def describe_context(context: Context) -> str:
    title = check_literal("title", context.title)
    return f"@{{ Name = '{title}'; Description = {NULL_SENTINEL}; Tags = {describe_tags(context.tags)} }}"


def _describe_cell(value: str | None) -> str:
    if value is None:
        return NULL_SENTINEL
    return check_literal("table cell", value)


def describe_row(table: Table, row) -> str:
    cells = "; ".join(f"'{name}' = '{_describe_cell(row[name])}'" for name in table.header)
    return f"@{{ {cells} }}"


def describe_table(table: Table) -> str:
    header = "', '".join(check_literal("table column", name) for name in table.header)
    rows = ", ".join(describe_row(table, row) for row in table.rows)
    if table.row_count == 1:
        # A leading comma keeps a single row an array rather than a scalar.
        rows = "," + rows
    return f"@{{ Header = '{header}'; Rows = {rows} }}"
