"""Tests for CLI utilities."""

import re

import click
import pytest

from cyclefinder.cli import EnumChoice, validate_pattern
from cyclefinder.reporting import Volume


# === validate_pattern tests ===


def test_validate_pattern_compiles():
    result = validate_pattern(None, None, "src/.*")
    assert isinstance(result, re.Pattern)
    assert result.pattern == "src/.*"


def test_validate_pattern_passes_none_through():
    assert validate_pattern(None, None, None) is None


def test_validate_pattern_rejects_invalid_regex():
    with pytest.raises(click.BadParameter, match="not a valid regular expression"):
        validate_pattern(None, None, "(unclosed")


# === EnumChoice tests ===


def test_enum_choice_creates_choices():
    choice = EnumChoice(Volume)
    assert list(choice.choices) == ["quiet", "normal", "verbose", "debug"]


def test_enum_choice_converts_string():
    choice = EnumChoice(Volume)
    assert choice.convert("debug", None, None) == Volume.debug


def test_enum_choice_passes_members_through():
    choice = EnumChoice(Volume)
    assert choice.convert(Volume.normal, None, None) == Volume.normal


def test_enum_choice_rejects_unknown():
    choice = EnumChoice(Volume)
    with pytest.raises(click.BadParameter):
        choice.convert("loud", None, None)
