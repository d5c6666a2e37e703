"""Markup parser: turns tagged text into a sequence of styled runs.

The parser scans left to right, buffering literal text. Each ``<...>`` body
is offered, in order, to placeholder resolution, gradient opening, and the
style tag handler; a body nobody accepts is emitted as literal text. The
parser is total over all strings: malformed markup never raises.
"""

from __future__ import annotations

from collections.abc import Mapping

from .aliases import ColorAliasTable, default_aliases
from .gradient import Gradient
from .logger import get_logger
from .placeholders.context import DEFAULT_CONTEXT, ContextSet
from .placeholders.engine import PlaceholderEngine, is_placeholder_tag, try_resolve_placeholder_tag
from .runs import RunSink, StyledRun, StyledText
from .style import (
    DEFAULT_COLOR,
    GRADIENT,
    GRADIENT_PREFIXES,
    StyleStack,
    StyleState,
    TagResult,
    canonical_tag_name,
    handle_style_tag,
    strip_prefix,
)

logger = get_logger()

EMPTY_TAG = "<>"


def parse_gradient_open(body: str, aliases: ColorAliasTable) -> tuple[str, str] | None:
    """Recognize ``gradient:<start>:<end>`` / ``g:<start>:<end>``.

    Both endpoints may be aliases or hex colors.

    Returns:
        (start_hex, end_hex), or None if the body is not a valid gradient open
    """
    value = strip_prefix(body, GRADIENT_PREFIXES)
    if value is None:
        return None

    parts = value.split(":")
    if len(parts) != 2:  # noqa: PLR2004 - start and end
        return None

    start = aliases.resolve(parts[0])
    end = aliases.resolve(parts[1])
    if start is None or end is None:
        return None
    return start, end


def count_gradient_span(text: str, start: int, aliases: ColorAliasTable | None = None) -> int:
    """Count renderable characters from start up to the matching gradient close.

    Tags inside the span are skipped, except an empty ``<>`` which renders
    literally. Text inside a nested gradient belongs to that gradient and is
    not counted. A gradient open whose endpoints do not resolve opens no
    scope, so it does not nest. An unterminated ``<`` renders the rest of the
    input literally, so it is counted. Without a matching close the span runs
    to the end of the input.
    """
    table = aliases if aliases is not None else default_aliases()
    count = 0
    depth = 0
    index = start
    length = len(text)

    while index < length:
        if text[index] != "<":
            if depth == 0:
                count += 1
            index += 1
            continue

        close = text.find(">", index + 1)
        if close < 0:
            if depth == 0:
                count += length - index
            break

        body = text[index + 1 : close].strip()
        if body.startswith("/") and canonical_tag_name(body[1:]) == GRADIENT:
            if depth == 0:
                break
            depth -= 1
        elif parse_gradient_open(body, table) is not None:
            depth += 1
        elif depth == 0 and not body:
            count += len(EMPTY_TAG)
        index = close + 1

    return count


def apply_replacements(text: str, replacements: Mapping[str, str | None]) -> str:
    """Replace every non-blank key with its value (None becomes "") in mapping order."""
    for key, value in replacements.items():
        if not key or not key.strip():
            continue
        text = text.replace(key, value if value is not None else "")
    return text


class MarkupParser:
    """Parser bound to a placeholder engine, contexts, and alias table.

    A parser holds only read-only collaborators; each call owns its style
    stack and gradient cursors, so one parser can serve concurrent calls.
    """

    def __init__(  # noqa: PLR0913 - configuration surface
        self,
        engine: PlaceholderEngine | None = None,
        contexts: ContextSet | None = None,
        *,
        aliases: ColorAliasTable | None = None,
        default_context: str = DEFAULT_CONTEXT,
        default_color: str | None = DEFAULT_COLOR,
        placeholders_enabled: bool = True,
    ) -> None:
        self.engine = engine
        self.contexts = contexts
        self.aliases = aliases if aliases is not None else default_aliases()
        self.default_context = _normalize_context(default_context)
        self.default_color = default_color
        self.placeholders_enabled = placeholders_enabled

    def parse(
        self,
        text: str | None,
        *,
        contexts: ContextSet | None = None,
        default_context: str | None = None,
        replacements: Mapping[str, str | None] | None = None,
        placeholders: bool | None = None,
    ) -> StyledText:
        """Parse text into a new StyledText.

        Args:
            text: Markup to parse; None and "" yield a single empty run
            contexts: Overrides the parser's context set for this call
            default_context: Overrides the context tag for tokens without ``@context``
            replacements: Literal substring replacements applied before parsing
            placeholders: Overrides whether ``ph:`` tags are resolved

        Returns:
            The styled runs, in order
        """
        sink = StyledText()
        self.parse_into(
            text,
            sink,
            contexts=contexts,
            default_context=default_context,
            replacements=replacements,
            placeholders=placeholders,
        )
        return sink

    def parse_into(  # noqa: PLR0913
        self,
        text: str | None,
        sink: RunSink,
        *,
        contexts: ContextSet | None = None,
        default_context: str | None = None,
        replacements: Mapping[str, str | None] | None = None,
        placeholders: bool | None = None,
    ) -> None:
        """Parse text, appending runs to an existing sink."""
        base = StyleState.base(self.default_color)
        if not text:
            sink.append(_make_run("", base))
            return

        if replacements:
            text = apply_replacements(text, replacements)

        scan = _Scan(
            text=text,
            sink=sink,
            stack=StyleStack(base),
            engine=self.engine,
            contexts=contexts if contexts is not None else self.contexts,
            aliases=self.aliases,
            default_context=(
                _normalize_context(default_context)
                if default_context is not None
                else self.default_context
            ),
            placeholders=self.placeholders_enabled if placeholders is None else placeholders,
        )
        scan.run()


class _Scan:
    """State for a single parse call."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        text: str,
        sink: RunSink,
        stack: StyleStack,
        engine: PlaceholderEngine | None,
        contexts: ContextSet | None,
        aliases: ColorAliasTable,
        default_context: str,
        placeholders: bool,
    ) -> None:
        self.text = text
        self.sink = sink
        self.stack = stack
        self.engine = engine
        self.contexts = contexts
        self.aliases = aliases
        self.default_context = default_context
        self.placeholders = placeholders
        self.buffer: list[str] = []

    def run(self) -> None:
        text = self.text
        index = 0

        while index < len(text):
            open_index = text.find("<", index)
            if open_index < 0:
                self.buffer.append(text[index:])
                break

            self.buffer.append(text[index:open_index])
            self.flush()

            close_index = text.find(">", open_index + 1)
            if close_index < 0:
                logger.tags(f"Unterminated tag at {open_index}; rest is literal")
                self.buffer.append(text[open_index:])
                break

            body = text[open_index + 1 : close_index].strip()
            index = close_index + 1
            literal = self.dispatch(body, index)
            if literal is not None:
                self.buffer.append(literal)

        self.flush()

    def dispatch(self, body: str, after: int) -> str | None:
        """Handle one tag body.

        Args:
            body: Trimmed text between the brackets
            after: Index just past the closing ``>``

        Returns:
            Literal text to emit, or None if the tag was consumed
        """
        if not body:
            return EMPTY_TAG

        if is_placeholder_tag(body):
            if not self.placeholders:
                logger.tags(f"Placeholders disabled; <{body}> is literal")
                return f"<{body}>"
            resolved = try_resolve_placeholder_tag(
                body, self.engine, self.contexts, self.default_context
            )
            if resolved is not None:
                logger.tags(f"Placeholder <{body}> -> {resolved!r}")
                return resolved

        endpoints = parse_gradient_open(body, self.aliases)
        if endpoints is not None:
            steps = count_gradient_span(self.text, after, self.aliases)
            gradient = Gradient(endpoints[0], endpoints[1], steps)
            logger.tags(f"Gradient <{body}> over {len(gradient)} characters")
            self.stack.push(self.stack.top.with_gradient(gradient))
            return None

        result = handle_style_tag(body, self.stack, self.aliases)
        if result is TagResult.UNHANDLED:
            logger.tags(f"Unrecognized tag <{body}>; emitting literally")
            return f"<{body}>"
        return None

    def flush(self) -> None:
        """Emit buffered text in the style at the top of the stack."""
        if not self.buffer:
            return
        chunk = "".join(self.buffer)
        self.buffer.clear()
        if not chunk:
            return

        state = self.stack.top
        if state.gradient is None:
            self.sink.append(_make_run(chunk, state))
            return

        for char in chunk:
            self.sink.append(_make_run(char, state, state.gradient.next_color_hex()))


def _make_run(text: str, state: StyleState, color: str | None = None) -> StyledRun:
    return StyledRun(
        text=text,
        color=color if color is not None else state.color,
        link=state.link,
        bold=state.bold,
        italic=state.italic,
        monospace=state.monospace,
    )


def _normalize_context(name: str | None) -> str:
    if name is None or not name.strip():
        return DEFAULT_CONTEXT
    return name.strip().lower()


def parse(  # noqa: PLR0913
    text: str | None,
    engine: PlaceholderEngine | None = None,
    contexts: ContextSet | None = None,
    *,
    default_context: str = DEFAULT_CONTEXT,
    replacements: Mapping[str, str | None] | None = None,
    placeholders: bool = True,
    aliases: ColorAliasTable | None = None,
) -> StyledText:
    """Parse markup with a one-off parser.

    Example:
        runs = parse("<b>Hello</b> <c:info>world</c>")
    """
    parser = MarkupParser(
        engine,
        contexts,
        aliases=aliases,
        default_context=default_context,
        placeholders_enabled=placeholders,
    )
    return parser.parse(text, replacements=replacements)
