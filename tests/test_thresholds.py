"""Tests for the threshold engine."""

import pytest
from rich.style import Style

from proctop.thresholds import (
    DEFAULT_FOREGROUND,
    DEFAULT_RULES,
    Color,
    ColorRule,
    colorize,
    normalize_rules,
)

SCENARIO_RULES = (
    ColorRule(90, Color.RED, Color.WHITE),
    ColorRule(50, Color.YELLOW, Color.BLACK),
)


class TestColorize:
    """Tests for colorize()."""

    def test_high_band(self):
        assert colorize(95, SCENARIO_RULES, Color.CYAN) == (Color.RED, Color.WHITE)

    def test_middle_band(self):
        assert colorize(60, SCENARIO_RULES, Color.CYAN) == (Color.YELLOW, Color.BLACK)

    def test_no_band_uses_default(self):
        assert colorize(10, SCENARIO_RULES, Color.CYAN) == (Color.BLACK, Color.CYAN)

    def test_threshold_is_inclusive(self):
        """Test a value equal to a threshold falls in that band."""
        assert colorize(50, SCENARIO_RULES, Color.CYAN) == (Color.YELLOW, Color.BLACK)
        assert colorize(49.99, SCENARIO_RULES, Color.CYAN) == (Color.BLACK, Color.CYAN)

    def test_empty_rules(self):
        assert colorize(100, (), Color.GREEN) == (Color.BLACK, Color.GREEN)

    def test_default_foreground_is_cyan(self):
        assert colorize(0, DEFAULT_RULES) == (Color.BLACK, Color.CYAN)

    @pytest.mark.parametrize("percentage", [p / 2 for p in range(0, 201)])
    def test_picks_greatest_threshold_not_above_value(self, percentage):
        """Test the chosen band is the greatest threshold <= the value."""
        qualifying = [rule for rule in DEFAULT_RULES if rule.threshold <= percentage]
        if qualifying:
            best = max(qualifying, key=lambda rule: rule.threshold)
            expected = (best.background, best.foreground)
        else:
            expected = (Color.BLACK, DEFAULT_FOREGROUND)

        assert colorize(percentage, DEFAULT_RULES) == expected


class TestDefaultRules:
    """Tests for the built-in bands."""

    def test_bands(self):
        assert [rule.threshold for rule in DEFAULT_RULES] == [95, 85, 75, 60, 49]

    def test_already_sorted(self):
        assert normalize_rules(DEFAULT_RULES) == DEFAULT_RULES

    def test_top_band_colors(self):
        assert colorize(99, DEFAULT_RULES) == (Color.RED, Color.WHITE)
        assert colorize(65, DEFAULT_RULES) == (Color.DARK_YELLOW, Color.BLACK)


def test_normalize_rules_sorts_descending():
    """Test rules given in any order are sorted by descending threshold."""
    rules = [
        ColorRule(10, Color.BLUE, Color.WHITE),
        ColorRule(80, Color.RED, Color.WHITE),
        ColorRule(40, Color.GREEN, Color.BLACK),
    ]

    assert [rule.threshold for rule in normalize_rules(rules)] == [80, 40, 10]


class TestColor:
    """Tests for Color name parsing and styles."""

    @pytest.mark.parametrize(
        "name",
        ["DarkYellow", "darkyellow", "DARK_YELLOW", "dark-yellow", "Dark Yellow"],
    )
    def test_parse_variants(self, name):
        assert Color.parse(name) is Color.DARK_YELLOW

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Color.parse("Chartreuse")

    def test_dark_and_bright_are_distinct(self):
        assert Color.parse("Red") is Color.RED
        assert Color.parse("DarkRed") is Color.DARK_RED
        assert Color.RED.value != Color.DARK_RED.value

    def test_style(self):
        assert Color.WHITE.style(Color.RED) == Style(color="bright_white", bgcolor="bright_red")
