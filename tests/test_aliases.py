"""Tests for the color alias table."""

import threading

import pytest

from markrun.aliases import (
    DEFAULT_COLORS,
    ColorAliasTable,
    default_aliases,
    register_color,
    resolve_color,
    unregister_color,
)
from markrun.exceptions import InvalidColorError, RegistrationError


def test_default_aliases_resolve():
    """Test the built-in aliases."""
    table = ColorAliasTable()
    assert table.resolve("success") == "#34d399"
    assert table.resolve("info") == "#60a5fa"
    assert table.resolve("warning") == "#f59e0b"
    assert table.resolve("error") == "#ef4444"
    assert table.resolve("white") == "#ffffff"
    assert table.resolve("black") == "#000000"
    assert table.resolve("gray") == "#6b7280"


def test_resolve_normalizes_case_and_whitespace():
    """Test that lookups trim and lowercase."""
    table = ColorAliasTable()
    assert table.resolve("  ERROR ") == "#ef4444"
    assert table.resolve("#ABCDEF") == "#abcdef"


def test_resolve_literal_hex_requires_hash():
    """Test that literal colors need the leading #."""
    table = ColorAliasTable()
    assert table.resolve("#112233") == "#112233"
    assert table.resolve("#11223344") == "#11223344"
    assert table.resolve("112233") is None


@pytest.mark.parametrize("value", [None, "", "   ", "#fff", "#zzzzzz", "nosuchcolor", "#1122334"])
def test_resolve_rejects(value: str | None):
    """Test values that are neither alias nor valid hex."""
    assert ColorAliasTable().resolve(value) is None


def test_register_and_unregister():
    """Test registering an alias, resolving it, and removing it."""
    table = ColorAliasTable()
    table.register(" Brand ", "#FF8800")
    assert table.resolve("brand") == "#ff8800"
    assert "BRAND" in table

    assert table.unregister("brand") == "#ff8800"
    assert table.resolve("brand") is None
    assert table.unregister("brand") is None


def test_register_alias_of_alias_stores_resolved_value():
    """Test that an alias may point at another alias."""
    table = ColorAliasTable()
    table.register("danger", "error")
    table.unregister("error")
    assert table.resolve("danger") == "#ef4444"


def test_register_rejects_invalid_color():
    """Test that invalid colors fail loudly at registration."""
    table = ColorAliasTable()
    with pytest.raises(InvalidColorError):
        table.register("bad", "not-a-color")
    with pytest.raises(InvalidColorError):
        table.register("bad", "#12345")
    assert table.resolve("bad") is None


def test_register_rejects_blank_alias():
    """Test that blank alias keys are rejected."""
    with pytest.raises(RegistrationError):
        ColorAliasTable().register("   ", "#ffffff")


def test_constructor_extra_aliases():
    """Test seeding a table with extra aliases."""
    table = ColorAliasTable({"accent": "#00ffaa"})
    assert table.resolve("accent") == "#00ffaa"
    assert table.resolve("error") == "#ef4444"


def test_reset_restores_defaults():
    """Test that reset drops registrations and restores removed defaults."""
    table = ColorAliasTable()
    table.register("brand", "#ff8800")
    table.unregister("white")
    table.reset()
    assert table.snapshot() == DEFAULT_COLORS


def test_module_level_functions_use_default_table():
    """Test the process-wide register/resolve/unregister helpers."""
    register_color("brand", "#123456")
    assert resolve_color("brand") == "#123456"
    assert default_aliases().resolve("brand") == "#123456"
    assert unregister_color("brand") == "#123456"
    assert resolve_color("brand") is None


def test_concurrent_registration():
    """Test that concurrent writers do not lose registrations."""
    table = ColorAliasTable()

    def register_many(offset: int) -> None:
        for i in range(100):
            table.register(f"c{offset}_{i}", f"#{offset:02x}{i:02x}00")

    threads = [threading.Thread(target=register_many, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(table.snapshot()) == len(DEFAULT_COLORS) + 800
    assert table.resolve("c7_99") == "#076300"
