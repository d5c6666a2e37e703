"""Example placeholder plugin for markrun.

Registers a small ``towns`` namespace. Handlers read the town name from the
``--var`` values when given, so the same plugin works for any context.

Usage:
    markrun -c examples/markrun.yaml render --file examples/welcome.txt \
        --plugin-file examples/towns_plugin.py
    markrun -c examples/markrun.yaml render "<ph:name@claims>" \
        --plugin-file examples/towns_plugin.py --var town=Icereach
"""

from markrun.placeholders import VARIABLES, ContextSet, PlaceholderRequest, placeholder

TOWNS = {
    "default": ("Frostholm", 42),
    "claims": ("Icereach", 7),
}


def _variables(request: PlaceholderRequest, contexts: ContextSet) -> dict[str, object]:
    context = contexts.get_or_default(request.context_name)
    if context is None:
        return {}
    return context.get(VARIABLES) or {}


@placeholder("towns", "name")
def town_name(request: PlaceholderRequest, contexts: ContextSet) -> str:
    """Name of the town for the requested context."""
    override = _variables(request, contexts).get("town")
    if override:
        return str(override)
    name, _ = TOWNS.get(request.context_name, TOWNS["default"])
    return name


@placeholder("towns", "population")
def town_population(request: PlaceholderRequest, contexts: ContextSet) -> str:
    """Population, optionally with a unit: <ph:towns:population|souls>."""
    _, population = TOWNS.get(request.context_name, TOWNS["default"])
    if request.args:
        return f"{population} {request.args[0]}"
    return str(population)
