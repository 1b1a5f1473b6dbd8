"""Threshold engine mapping usage percentages to colour pairs."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from rich.style import Style


class Color(Enum):
    """The sixteen classic console colours, valued by their Rich colour name."""

    BLACK = "black"
    DARK_BLUE = "blue"
    DARK_GREEN = "green"
    DARK_CYAN = "cyan"
    DARK_RED = "red"
    DARK_MAGENTA = "magenta"
    DARK_YELLOW = "yellow"
    GRAY = "white"
    DARK_GRAY = "bright_black"
    BLUE = "bright_blue"
    GREEN = "bright_green"
    CYAN = "bright_cyan"
    RED = "bright_red"
    MAGENTA = "bright_magenta"
    YELLOW = "bright_yellow"
    WHITE = "bright_white"

    @classmethod
    def parse(cls, name: str) -> "Color":
        """
        Look up a colour by its console name.

        Matching ignores case, underscores, hyphens and spaces, so
        "DarkYellow", "dark_yellow" and "dark yellow" are equivalent.

        Raises:
            ValueError: If the name is not a known colour.
        """
        wanted = _squash(name)
        for member in cls:
            if _squash(member.name) == wanted:
                return member
        raise ValueError(f"unknown color name: {name!r}")

    def style(self, background: "Color") -> Style:
        """Rich style with this colour as foreground over the given background."""
        return Style(color=self.value, bgcolor=background.value)


def _squash(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch not in "_- ")


@dataclass(slots=True, frozen=True)
class ColorRule:
    """Colours applied to values at or above a percentage threshold."""

    threshold: float
    background: Color
    foreground: Color


DEFAULT_FOREGROUND = Color.CYAN

DEFAULT_RULES: tuple[ColorRule, ...] = (
    ColorRule(95, Color.RED, Color.WHITE),
    ColorRule(85, Color.MAGENTA, Color.WHITE),
    ColorRule(75, Color.YELLOW, Color.BLACK),
    ColorRule(60, Color.DARK_YELLOW, Color.BLACK),
    ColorRule(49, Color.GREEN, Color.BLACK),
)


def normalize_rules(rules: Iterable[ColorRule]) -> tuple[ColorRule, ...]:
    """Order rules by descending threshold, as colorize() expects."""
    return tuple(sorted(rules, key=lambda rule: rule.threshold, reverse=True))


def colorize(
    percentage: float,
    rules: Sequence[ColorRule],
    default_foreground: Color = DEFAULT_FOREGROUND,
) -> tuple[Color, Color]:
    """
    Pick the (background, foreground) pair for a usage percentage.

    Args:
        percentage: Usage value to classify.
        rules: Rules sorted by descending threshold.
        default_foreground: Foreground used when no rule matches.

    Returns:
        The colours of the first rule whose threshold is <= percentage,
        or black on the default foreground when none qualifies.
    """
    for rule in rules:
        if percentage >= rule.threshold:
            return rule.background, rule.foreground
    return Color.BLACK, default_foreground
