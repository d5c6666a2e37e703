"""Styled text runs and the containers that receive them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class StyledRun:
    """A piece of literal text with the style it is rendered in."""

    text: str
    color: str | None = None
    link: str | None = None
    bold: bool = False
    italic: bool = False
    monospace: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RunSink(Protocol):
    """Destination for parsed runs.

    The parser only ever appends to the end of the sequence. Any host
    text/message tree can be adapted by implementing append().
    """

    def append(self, run: StyledRun) -> None:
        """Append a run after all previously appended runs."""
        ...


class StyledText:
    """Default RunSink: an ordered, list-backed sequence of runs."""

    def __init__(self) -> None:
        self._runs: list[StyledRun] = []

    def append(self, run: StyledRun) -> None:
        self._runs.append(run)

    @property
    def runs(self) -> list[StyledRun]:
        return list(self._runs)

    @property
    def plain_text(self) -> str:
        """The text of every run concatenated, without styling."""
        return "".join(run.text for run in self._runs)

    def __iter__(self) -> Iterator[StyledRun]:
        return iter(self._runs)

    def __len__(self) -> int:
        return len(self._runs)

    def __getitem__(self, index: int) -> StyledRun:
        return self._runs[index]

    def __repr__(self) -> str:
        return f"StyledText({self._runs!r})"
