"""
Message formatting: positional arguments, color markup and themes.

A finalized message comes in two shapes:

    colored:  <b><color=#008000>[Rendering] </color></b> <color=white>text</color>
    plain:    [Rendering] text

The colored shape is rich-text markup for consoles that render it.
FATAL_ERROR messages are always plain because the fatal handler shows
them in places that cannot render markup.
"""

import string
from dataclasses import dataclass
from typing import Optional, Sequence, Set

from .errors import FormatError
from .priority import PRIORITY_COLORS, Priority

COLORED_MESSAGE = "<b><color={0}>[{1}] </color></b> <color={2}>{3}</color>"
RAW_MESSAGE = "[{0}] {1}"
ASSERT_PREFIX = "Assert Failed: "


@dataclass(frozen=True)
class Theme:
    """Default colors that depend on the console background."""
    name: str
    info_color: str
    fallback_channel_color: str


DARK_THEME = Theme(name='dark', info_color='white', fallback_channel_color='white')
LIGHT_THEME = Theme(name='light', info_color='black', fallback_channel_color='black')

THEMES = {t.name: t for t in (DARK_THEME, LIGHT_THEME)}


def get_theme(name: str) -> Theme:
    """Look up a theme by name ('dark' or 'light')."""
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(f"Unknown theme {name!r} (expected one of: {', '.join(THEMES)})") from None


def priority_color(priority: Priority, theme: Theme = DARK_THEME) -> str:
    """Return the markup color for a priority under a theme."""
    if priority == Priority.INFO:
        return theme.info_color
    return PRIORITY_COLORS[priority]


def _referenced_indices(fmt: str, formatter: string.Formatter) -> Set[int]:
    """Collect the positional indices a format string refers to.

    Auto-numbered fields ('{}') count up from 0. Nested fields inside a
    format spec ('{0:{1}}') are included.
    """
    used = set()
    auto = 0
    for _literal, field_name, format_spec, _conversion in formatter.parse(fmt):
        if field_name is None:
            continue
        head = field_name.split('.', 1)[0].split('[', 1)[0]
        if head == '':
            used.add(auto)
            auto += 1
        elif head.isdigit():
            used.add(int(head))
        else:
            raise FormatError(f"Named placeholder {{{field_name}}} is not supported; "
                              f"use positional placeholders like {{0}}")
        if format_spec:
            used |= _referenced_indices(format_spec, formatter)
    return used


def format_message(message: str, args: Sequence = ()) -> str:
    """Apply positional format arguments to a message.

    With no args the message is returned untouched, so literal braces
    are safe in plain messages.

    Raises:
        FormatError: a placeholder has no argument, an argument has no
            placeholder, the format string is malformed, or a value does
            not support its format spec.
    """
    if not args:
        return message
    formatter = string.Formatter()
    try:
        used = _referenced_indices(message, formatter)
        text = message.format(*args)
    except FormatError:
        raise
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise FormatError(f"Cannot format {message!r} with {len(args)} argument(s): {e}") from e

    unused = set(range(len(args))) - used
    if unused:
        raise FormatError(
            f"Cannot format {message!r}: {len(args)} argument(s) given but "
            f"argument(s) {sorted(unused)} are never referenced")
    return text


def build_message(channel_name: str, message: str,
                  channel_color: Optional[str] = None,
                  text_color: Optional[str] = None) -> str:
    """Wrap a message with its channel tag, colored when both colors are given."""
    if channel_color is not None and text_color is not None:
        return COLORED_MESSAGE.format(channel_color, channel_name, text_color, message)
    return RAW_MESSAGE.format(channel_name, message)
