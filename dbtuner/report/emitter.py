"""Line emission with positional token substitution and long-line chunking."""

from __future__ import annotations

import re
from typing import Any, Protocol, TextIO

from dbtuner.report.resultset import format_scalar

CHUNK_SIZE = 4000
MAX_PARAMS = 8
TOKEN_PATTERN = re.compile(r"\{%([1-8])\}")


class LineSink(Protocol):
    """Destination for emitted lines. ``chunks`` joined together form one line."""

    def write_line(self, chunks: list[str]) -> None: ...


def substitute_tokens(template: str | None, params: tuple[Any, ...] = ()) -> str:
    """Replace ``{%1}``..``{%8}`` with supplied params in a single pass.

    Tokens whose param is missing or ``None`` stay verbatim. Replacement text
    is never re-scanned, so the result does not depend on token order.
    """
    if len(params) > MAX_PARAMS:
        raise ValueError(f"At most {MAX_PARAMS} params are supported, got {len(params)}")
    text = template or ""
    supplied = {
        str(idx): format_scalar(value)
        for idx, value in enumerate(params, start=1)
        if value is not None
    }
    if not supplied:
        return text
    return TOKEN_PATTERN.sub(lambda m: supplied.get(m.group(1), m.group(0)), text)


def split_chunks(text: str, size: int = CHUNK_SIZE) -> list[str]:
    """Split text into fixed-size chunks; an empty string yields one empty chunk."""
    if not text:
        return [""]
    return [text[i : i + size] for i in range(0, len(text), size)]


class ReportDocument:
    """Append-only sequence of report lines, each kept as its list of chunks."""

    def __init__(self) -> None:
        self._lines: list[tuple[str, ...]] = []

    def write_line(self, chunks: list[str]) -> None:
        self._lines.append(tuple(chunks))

    @property
    def lines(self) -> list[str]:
        return ["".join(chunks) for chunks in self._lines]

    @property
    def chunked_lines(self) -> list[tuple[str, ...]]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def render(self) -> str:
        """Full document text; every line ends with a newline."""
        return "".join(line + "\n" for line in self.lines)


class StreamSink:
    """Writes each chunk as a separate write call, terminating the line after the last."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write_line(self, chunks: list[str]) -> None:
        for chunk in chunks:
            self.stream.write(chunk)
        self.stream.write("\n")


class TextEmitter:
    """Appends substituted, chunked lines to a sink (usually a ReportDocument)."""

    def __init__(self, sink: LineSink, *, chunk_size: int = CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be a positive integer")
        self.sink = sink
        self.chunk_size = chunk_size

    def emit(self, template: str | None = "", *params: Any) -> None:
        text = substitute_tokens(template, params)
        self.sink.write_line(split_chunks(text, self.chunk_size))

    def blank(self) -> None:
        self.emit("")

    def fence(self, tag: str = "") -> None:
        self.emit("```" + tag)
