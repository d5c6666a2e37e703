"""Style scopes and the tag handler that pushes and pops them.

Every opening tag pushes a new immutable StyleState derived from the top of
the stack. A closing tag pops only when the top scope was opened by the same
canonical tag name, so ``<b>...</bold>`` closes but ``<b>...</i>`` does not.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from .aliases import ColorAliasTable, default_aliases
from .logger import get_logger

if TYPE_CHECKING:
    from .gradient import Gradient

logger = get_logger()

DEFAULT_COLOR = "#ffffff"

BOLD = "bold"
ITALIC = "italic"
MONOSPACE = "monospace"
COLOR = "color"
LINK = "link"
GRADIENT = "gradient"

# Every accepted spelling -> canonical tag name
TAG_NAMES: dict[str, str] = {
    "bold": BOLD,
    "b": BOLD,
    "italic": ITALIC,
    "italics": ITALIC,
    "i": ITALIC,
    "mono": MONOSPACE,
    "monospace": MONOSPACE,
    "code": MONOSPACE,
    "color": COLOR,
    "c": COLOR,
    "link": LINK,
    "l": LINK,
    "gradient": GRADIENT,
    "g": GRADIENT,
}

RESET_NAMES = frozenset({"reset", "r"})
COLOR_PREFIXES = ("color:", "c:")
LINK_PREFIXES = ("link:", "l:")
GRADIENT_PREFIXES = ("gradient:", "g:")


def canonical_tag_name(name: str) -> str | None:
    """Map a tag spelling (``b``, ``italics``, ``code``...) to its canonical name."""
    return TAG_NAMES.get(name.strip().lower())


def strip_prefix(body: str, prefixes: tuple[str, ...]) -> str | None:
    """Return what follows the first matching prefix (case-insensitive), or None."""
    lowered = body.lower()
    for prefix in prefixes:
        if lowered.startswith(prefix):
            return body[len(prefix) :]
    return None


@dataclass(frozen=True, slots=True)
class StyleState:
    """Immutable snapshot of the style in effect for one scope.

    Attributes:
        color: Hex color, or None for no color
        link: Link URL, or None
        bold: Bold flag
        italic: Italic flag
        monospace: Monospace flag
        gradient: Gradient stepping colors over this scope's text, or None
        opened_by: Canonical name of the tag that pushed this scope (None for the base scope)
    """

    color: str | None = DEFAULT_COLOR
    link: str | None = None
    bold: bool = False
    italic: bool = False
    monospace: bool = False
    gradient: Gradient | None = field(default=None, compare=False)
    opened_by: str | None = None

    @classmethod
    def base(cls, color: str | None = DEFAULT_COLOR) -> StyleState:
        """The base scope: default color, no flags, no link, no gradient."""
        return cls(color=color)

    def with_bold(self, opened_by: str = BOLD) -> StyleState:
        return replace(self, bold=True, opened_by=opened_by)

    def with_italic(self, opened_by: str = ITALIC) -> StyleState:
        return replace(self, italic=True, opened_by=opened_by)

    def with_monospace(self, opened_by: str = MONOSPACE) -> StyleState:
        return replace(self, monospace=True, opened_by=opened_by)

    def with_color(self, color: str) -> StyleState:
        return replace(self, color=color, opened_by=COLOR)

    def with_link(self, url: str) -> StyleState:
        return replace(self, link=url, opened_by=LINK)

    def with_gradient(self, gradient: Gradient) -> StyleState:
        return replace(self, gradient=gradient, opened_by=GRADIENT)


class StyleStack:
    """Stack of StyleState snapshots whose bottom (base) scope is never popped."""

    def __init__(self, base: StyleState | None = None) -> None:
        self._base = base if base is not None else StyleState.base()
        self._states: list[StyleState] = [self._base]

    @property
    def top(self) -> StyleState:
        """The scope currently in effect."""
        return self._states[-1]

    @property
    def base(self) -> StyleState:
        return self._base

    def __len__(self) -> int:
        return len(self._states)

    def push(self, state: StyleState) -> None:
        self._states.append(state)
        logger.scopes(f"push {state.opened_by} (depth {len(self._states)})")

    def pop_if(self, canonical_name: str) -> bool:
        """Pop the top scope if it was opened by canonical_name.

        Returns:
            True if a scope was popped
        """
        if len(self._states) <= 1 or self.top.opened_by != canonical_name:
            return False
        self._states.pop()
        logger.scopes(f"pop {canonical_name} (depth {len(self._states)})")
        return True

    def reset(self) -> None:
        """Drop every scope and reseed with the base scope."""
        self._states = [self._base]
        logger.scopes("reset to base scope")


class TagResult(Enum):
    """Outcome of offering a tag body to handle_style_tag()."""

    APPLIED = "applied"  # Stack changed
    IGNORED = "ignored"  # Known closing tag that did not match the top scope; consumed
    UNHANDLED = "unhandled"  # Not a style tag; caller renders it literally


def handle_style_tag(  # noqa: PLR0911 - one return per tag form
    body: str, stack: StyleStack, aliases: ColorAliasTable | None = None
) -> TagResult:
    """Apply a style tag body (text between ``<`` and ``>``) to the stack.

    Args:
        body: Trimmed tag body, e.g. ``b``, ``/bold``, ``color:#ff0000``
        stack: Style stack to mutate
        aliases: Color alias table (defaults to the process-wide table)

    Returns:
        APPLIED if the stack changed, IGNORED for a recognized closing tag
        that did not match the open scope, UNHANDLED otherwise
    """
    if not body or not body.strip():
        return TagResult.UNHANDLED
    body = body.strip()

    if body.startswith("/"):
        return _handle_close(body[1:], stack)

    name = body.lower()

    if name in RESET_NAMES:
        stack.reset()
        return TagResult.APPLIED

    canonical = TAG_NAMES.get(name)
    if canonical == BOLD:
        stack.push(stack.top.with_bold())
        return TagResult.APPLIED
    if canonical == ITALIC:
        stack.push(stack.top.with_italic())
        return TagResult.APPLIED
    if canonical == MONOSPACE:
        stack.push(stack.top.with_monospace())
        return TagResult.APPLIED

    value = strip_prefix(body, COLOR_PREFIXES)
    if value is not None:
        table = aliases if aliases is not None else default_aliases()
        resolved = table.resolve(value)
        if resolved is None:
            logger.tags(f"Rejected color tag <{body}>: unknown color {value.strip()!r}")
            return TagResult.UNHANDLED
        stack.push(stack.top.with_color(resolved))
        return TagResult.APPLIED

    url = strip_prefix(body, LINK_PREFIXES)
    if url is not None:
        url = url.strip()  # case preserved
        if not url:
            logger.tags(f"Rejected link tag <{body}>: empty URL")
            return TagResult.UNHANDLED
        stack.push(stack.top.with_link(url))
        return TagResult.APPLIED

    if strip_prefix(body, GRADIENT_PREFIXES) is not None:
        # Valid gradient opens are consumed by the parser's lookahead first
        logger.tags(f"Rejected malformed gradient tag <{body}>")
        return TagResult.UNHANDLED

    return TagResult.UNHANDLED


def _handle_close(name: str, stack: StyleStack) -> TagResult:
    canonical = canonical_tag_name(name)
    if canonical is None:
        return TagResult.UNHANDLED
    if stack.pop_if(canonical):
        return TagResult.APPLIED
    logger.tags(f"Ignored closing tag </{name.strip()}>: top scope is {stack.top.opened_by}")
    return TagResult.IGNORED
