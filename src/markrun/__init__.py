"""markrun: compile tagged markup into styled text runs."""

from .aliases import ColorAliasTable, register_color, resolve_color, unregister_color
from .gradient import Gradient
from .parser import MarkupParser, parse
from .runs import RunSink, StyledRun, StyledText
from .style import StyleStack, StyleState

__all__ = [
    "ColorAliasTable",
    "Gradient",
    "MarkupParser",
    "RunSink",
    "StyleStack",
    "StyleState",
    "StyledRun",
    "StyledText",
    "parse",
    "register_color",
    "resolve_color",
    "unregister_color",
]
