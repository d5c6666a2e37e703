"""Renderings of a run sequence for terminals and tooling."""

from __future__ import annotations

import json
from collections.abc import Iterable

from .color import is_hex_color, parse_hex
from .runs import StyledRun

ANSI_RESET = "\x1b[0m"
ANSI_BOLD = "1"
ANSI_ITALIC = "3"


def to_plain(runs: Iterable[StyledRun]) -> str:
    """Concatenate run text, dropping all styling."""
    return "".join(run.text for run in runs)


def to_ansi(runs: Iterable[StyledRun]) -> str:
    """Render runs with 24-bit ANSI colors; links become OSC 8 hyperlinks.

    Monospace has no terminal attribute and renders unchanged.
    """
    parts: list[str] = []
    for run in runs:
        if not run.text:
            continue

        codes: list[str] = []
        if run.bold:
            codes.append(ANSI_BOLD)
        if run.italic:
            codes.append(ANSI_ITALIC)
        if run.color and is_hex_color(run.color):
            rgba = parse_hex(run.color)
            codes.append(f"38;2;{rgba.red};{rgba.green};{rgba.blue}")

        text = run.text
        if run.link:
            text = f"\x1b]8;;{run.link}\x1b\\{text}\x1b]8;;\x1b\\"
        if codes:
            text = f"\x1b[{';'.join(codes)}m{text}{ANSI_RESET}"
        parts.append(text)
    return "".join(parts)


def to_json(runs: Iterable[StyledRun], indent: int | None = 2) -> str:
    """Serialize runs as a JSON array of objects."""
    return json.dumps([run.to_dict() for run in runs], indent=indent, ensure_ascii=False)
