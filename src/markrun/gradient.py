"""Precomputed OkLab gradients stepped one color per character."""

from __future__ import annotations

from .color import RgbaColor, oklab_to_srgb, parse_hex, srgb_to_oklab, to_hex
from .logger import debug_enabled, get_logger

logger = get_logger()


class Gradient:
    """Sequence of interpolated hex colors with a saturating cursor.

    Colors are computed eagerly in OkLab space between the two endpoints.
    Alpha is interpolated in byte space and emitted only when either
    endpoint carried it. Once the cursor reaches the last color it stays
    there, so text past the precomputed span repeats the final color.
    """

    def __init__(self, start_hex: str, end_hex: str, steps: int) -> None:
        """Build the color table.

        Args:
            start_hex: First color (``#RRGGBB`` or ``#RRGGBBAA``)
            end_hex: Last color
            steps: Number of colors to compute; values below 1 are treated as 1

        Raises:
            InvalidColorError: If either endpoint is not a hex color
        """
        self._colors = _interpolate(parse_hex(start_hex), parse_hex(end_hex), max(1, steps))
        self._cursor = 0
        if debug_enabled():
            logger.debug(f"Gradient {start_hex} -> {end_hex}: {', '.join(self._colors)}")

    @property
    def colors(self) -> tuple[str, ...]:
        """All precomputed colors, first to last."""
        return self._colors

    @property
    def cursor(self) -> int:
        """Index of the color the next call to next_color_hex() returns."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._colors)

    def next_color_hex(self) -> str:
        """Return the color at the cursor and advance, saturating at the last color."""
        color = self._colors[self._cursor]
        if self._cursor < len(self._colors) - 1:
            self._cursor += 1
        return color


def _interpolate(start: RgbaColor, end: RgbaColor, steps: int) -> tuple[str, ...]:
    lab_start = srgb_to_oklab(start.red, start.green, start.blue)
    lab_end = srgb_to_oklab(end.red, end.green, end.blue)
    include_alpha = start.has_alpha or end.has_alpha

    colors: list[str] = []
    for i in range(steps):
        t = 1.0 if steps == 1 else i / (steps - 1)
        red, green, blue = oklab_to_srgb(
            _lerp(lab_start.lightness, lab_end.lightness, t),
            _lerp(lab_start.a, lab_end.a, t),
            _lerp(lab_start.b, lab_end.b, t),
        )
        alpha = int(_lerp(start.alpha, end.alpha, t) + 0.5)
        colors.append(to_hex(RgbaColor(red, green, blue, alpha), include_alpha=include_alpha))
    return tuple(colors)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t
