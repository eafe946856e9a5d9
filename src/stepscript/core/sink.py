from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import TextIO


class TraceSink:
    """Append-only line sink. One lock covers each complete line write."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self.lines_written = 0

    @property
    def stream(self) -> TextIO:
        # Resolve lazily so pytest's capture replaces stderr before first use.
        return self._stream if self._stream is not None else sys.stderr

    def write_line(self, line: str) -> None:
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()
            self.lines_written += 1


class MemorySink(TraceSink):
    """Sink that keeps lines in memory, for tests and in-process callers."""

    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        with self._lock:
            self.lines.append(line)
            self.lines_written += 1

    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


def open_file_sink(path: str | Path) -> tuple[TraceSink, TextIO]:
    resolved = Path(path).expanduser()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    handle = resolved.open("a", encoding="utf-8")
    return TraceSink(handle), handle
