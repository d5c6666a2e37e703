"""Color conversions between 8-bit sRGB, linear light, and OkLab.

The OkLab matrices are the reference constants published with the color
space. Gradient output is compared byte-for-byte against other renderers,
so the constants and the rounding mode (half-up) must not change.
"""

from __future__ import annotations

import math
import string
from dataclasses import dataclass

from .exceptions import InvalidColorError

HEX_COLOR_FULL_LENGTH = 6  # RRGGBB
HEX_COLOR_ALPHA_LENGTH = 8  # RRGGBBAA
SRGB_LINEAR_THRESHOLD = 0.04045  # sRGB -> linear piecewise cutoff
LINEAR_SRGB_THRESHOLD = 0.0031308  # linear -> sRGB piecewise cutoff

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True, slots=True)
class OkLab:
    """OkLab triple."""

    lightness: float
    a: float
    b: float


@dataclass(frozen=True, slots=True)
class RgbaColor:
    """8-bit RGBA channels.

    Attributes:
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)
        alpha: Alpha channel (0-255), 255 when the source had no alpha
        has_alpha: Whether the source string carried an alpha byte
    """

    red: int
    green: int
    blue: int
    alpha: int = 255
    has_alpha: bool = False


def srgb8_to_linear(channel8: int) -> float:
    """Convert an sRGB channel in [0, 255] to linear light in [0, 1]."""
    channel = _clamp01(channel8 / 255.0)
    if channel <= SRGB_LINEAR_THRESHOLD:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def linear_to_srgb8(linear: float) -> int:
    """Convert a linear channel in [0, 1] to an sRGB channel in [0, 255]."""
    channel = _clamp01(linear)
    if channel <= LINEAR_SRGB_THRESHOLD:
        srgb = 12.92 * channel
    else:
        srgb = 1.055 * channel ** (1.0 / 2.4) - 0.055
    return _clamp255(_round_half_up(srgb * 255.0))


def srgb_to_oklab(r8: int, g8: int, b8: int) -> OkLab:
    """Convert 8-bit sRGB channels to OkLab."""
    r = srgb8_to_linear(r8)
    g = srgb8_to_linear(g8)
    b = srgb8_to_linear(b8)

    # Linear sRGB -> LMS
    l_ = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m_ = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s_ = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_cbrt = math.cbrt(l_)
    m_cbrt = math.cbrt(m_)
    s_cbrt = math.cbrt(s_)

    return OkLab(
        lightness=0.2104542553 * l_cbrt + 0.7936177850 * m_cbrt - 0.0040720468 * s_cbrt,
        a=1.9779984951 * l_cbrt - 2.4285922050 * m_cbrt + 0.4505937099 * s_cbrt,
        b=0.0259040371 * l_cbrt + 0.7827717662 * m_cbrt - 0.8086757660 * s_cbrt,
    )


def oklab_to_srgb(lightness: float, a: float, b: float) -> tuple[int, int, int]:
    """Convert OkLab to 8-bit sRGB channels."""
    # OkLab -> LMS'
    l_cbrt = lightness + 0.3963377774 * a + 0.2158037573 * b
    m_cbrt = lightness - 0.1055613458 * a - 0.0638541728 * b
    s_cbrt = lightness - 0.0894841775 * a - 1.2914855480 * b

    l_ = l_cbrt * l_cbrt * l_cbrt
    m_ = m_cbrt * m_cbrt * m_cbrt
    s_ = s_cbrt * s_cbrt * s_cbrt

    # LMS -> linear sRGB
    r_lin = 4.0767416621 * l_ - 3.3077115913 * m_ + 0.2309699292 * s_
    g_lin = -1.2684380046 * l_ + 2.6097574011 * m_ - 0.3413193965 * s_
    b_lin = -0.0041960863 * l_ - 0.7034186147 * m_ + 1.7076147010 * s_

    return linear_to_srgb8(r_lin), linear_to_srgb8(g_lin), linear_to_srgb8(b_lin)


def is_hex_color(value: str) -> bool:
    """Check whether a string is ``#RRGGBB`` or ``#RRGGBBAA`` (leading ``#`` optional)."""
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if len(digits) not in (HEX_COLOR_FULL_LENGTH, HEX_COLOR_ALPHA_LENGTH):
        return False
    return all(c in _HEX_DIGITS for c in digits)


def parse_hex(value: str) -> RgbaColor:
    """Parse ``#RRGGBB`` or ``#RRGGBBAA`` into an RgbaColor.

    Args:
        value: Hex color string, case-insensitive, leading ``#`` optional

    Returns:
        Parsed channels; has_alpha is True only for the 8-digit form

    Raises:
        InvalidColorError: If the string has the wrong length or non-hex characters
    """
    if not is_hex_color(value):
        raise InvalidColorError(f"Invalid hex color: {value!r}")

    digits = value.strip().lower().removeprefix("#")
    red = int(digits[0:2], 16)
    green = int(digits[2:4], 16)
    blue = int(digits[4:6], 16)

    if len(digits) == HEX_COLOR_ALPHA_LENGTH:
        return RgbaColor(red, green, blue, int(digits[6:8], 16), has_alpha=True)
    return RgbaColor(red, green, blue)


def to_hex(color: RgbaColor, include_alpha: bool | None = None) -> str:
    """Encode an RgbaColor as ``#rrggbb`` or ``#rrggbbaa``.

    Args:
        color: Color to encode
        include_alpha: Force alpha on or off; None follows color.has_alpha
    """
    if include_alpha is None:
        include_alpha = color.has_alpha

    encoded = f"#{_clamp255(color.red):02x}{_clamp255(color.green):02x}{_clamp255(color.blue):02x}"
    if include_alpha:
        encoded += f"{_clamp255(color.alpha):02x}"
    return encoded


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp255(value: int) -> int:
    return max(0, min(value, 255))


def _clamp01(value: float) -> float:
    return max(0.0, min(value, 1.0))
