"""Tests for sRGB / linear / OkLab conversions and hex encoding."""

import pytest

from markrun.aliases import resolve_color
from markrun.color import (
    RgbaColor,
    is_hex_color,
    linear_to_srgb8,
    oklab_to_srgb,
    parse_hex,
    srgb8_to_linear,
    srgb_to_oklab,
    to_hex,
)
from markrun.exceptions import InvalidColorError


def test_srgb8_to_linear_endpoints():
    """Test that black and full channels map to 0 and 1."""
    assert srgb8_to_linear(0) == 0.0
    assert srgb8_to_linear(255) == pytest.approx(1.0)


def test_srgb8_to_linear_uses_linear_segment_for_dark_values():
    """Test the linear segment below the 0.04045 cutoff."""
    assert srgb8_to_linear(10) == pytest.approx((10 / 255) / 12.92)


def test_srgb8_to_linear_uses_power_segment():
    """Test the power segment above the cutoff."""
    c = 128 / 255
    assert srgb8_to_linear(128) == pytest.approx(((c + 0.055) / 1.055) ** 2.4)


def test_linear_to_srgb8_clamps():
    """Test that out-of-range linear values clamp to [0, 255]."""
    assert linear_to_srgb8(-0.5) == 0
    assert linear_to_srgb8(0.0) == 0
    assert linear_to_srgb8(1.0) == 255
    assert linear_to_srgb8(2.0) == 255


def test_linear_srgb_inverse_for_every_channel_value():
    """Test that linear_to_srgb8 inverts srgb8_to_linear exactly."""
    for value in range(256):
        assert linear_to_srgb8(srgb8_to_linear(value)) == value


def test_white_is_unit_lightness():
    """Test that white has L ~ 1 and no chroma."""
    lab = srgb_to_oklab(255, 255, 255)
    assert lab.lightness == pytest.approx(1.0, abs=1e-6)
    assert lab.a == pytest.approx(0.0, abs=1e-6)
    assert lab.b == pytest.approx(0.0, abs=1e-6)


def test_black_is_origin():
    """Test that black maps to the OkLab origin."""
    lab = srgb_to_oklab(0, 0, 0)
    assert (lab.lightness, lab.a, lab.b) == (0.0, 0.0, 0.0)


def test_reference_red():
    """Test pure red against the published OkLab values."""
    lab = srgb_to_oklab(255, 0, 0)
    assert lab.lightness == pytest.approx(0.62796, abs=1e-4)
    assert lab.a == pytest.approx(0.22486, abs=1e-4)
    assert lab.b == pytest.approx(0.12585, abs=1e-4)


def test_oklab_round_trip_within_one_step():
    """Test sRGB -> OkLab -> sRGB over a grid of colors."""
    values = range(0, 256, 17)
    for r in values:
        for g in values:
            for b in values:
                lab = srgb_to_oklab(r, g, b)
                r2, g2, b2 = oklab_to_srgb(lab.lightness, lab.a, lab.b)
                assert abs(r2 - r) <= 1
                assert abs(g2 - g) <= 1
                assert abs(b2 - b) <= 1


def test_primaries_round_trip_exactly():
    """Test that the gradient endpoints used in rendering survive conversion."""
    for rgb in [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255), (0, 0, 0)]:
        lab = srgb_to_oklab(*rgb)
        assert oklab_to_srgb(lab.lightness, lab.a, lab.b) == rgb


def test_parse_hex_six_digits():
    """Test parsing #RRGGBB, case-insensitive."""
    color = parse_hex("#FF8800")
    assert color == RgbaColor(255, 136, 0, 255, has_alpha=False)


def test_parse_hex_eight_digits_without_hash():
    """Test parsing RRGGBBAA without the leading #."""
    color = parse_hex("11223344")
    assert color == RgbaColor(0x11, 0x22, 0x33, 0x44, has_alpha=True)


@pytest.mark.parametrize("value", ["", "#fff", "#ff00001", "#gg0000", "#ff 000", "#+f0000"])
def test_parse_hex_rejects_invalid(value: str):
    """Test that bad lengths and non-hex characters are rejected."""
    assert not is_hex_color(value)
    with pytest.raises(InvalidColorError):
        parse_hex(value)


def test_to_hex_zero_pads():
    """Test that each byte is padded to two digits."""
    assert to_hex(RgbaColor(1, 2, 3)) == "#010203"


def test_to_hex_alpha_follows_source():
    """Test that alpha is emitted only when the color carried it, unless forced."""
    assert to_hex(parse_hex("#0a0b0c0d")) == "#0a0b0c0d"
    assert to_hex(parse_hex("#0a0b0c")) == "#0a0b0c"
    assert to_hex(parse_hex("#0a0b0c"), include_alpha=True) == "#0a0b0cff"
    assert to_hex(parse_hex("#0a0b0c0d"), include_alpha=False) == "#0a0b0c"


@pytest.mark.parametrize("value", ["#a1b2c3", "#A1B2C3D4", "#000000", "#ffffffff"])
def test_hex_round_trip(value: str):
    """Test that parse, encode and resolve preserve every channel including alpha."""
    original = parse_hex(value)
    assert parse_hex(to_hex(original)) == original

    resolved = resolve_color(to_hex(original))
    assert resolved == value.lower()
    assert parse_hex(resolved) == original
