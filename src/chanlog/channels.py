"""
Channel definitions and channel-table helpers.

Channels are named log categories (Rendering, Physics, ...). The set of
channels is closed and known up front: it is an IntEnum, and everything
that needs "all channels" iterates that enum. The built-in set is
Channel below; a project can generate its own enum with chanlog.codegen
and hand it to ChannelRegistry instead.

Channel spec syntax (compact, positional), used by `chanlog channels add`:
    NAME:COLOR:STATE

    Examples:
        Network                 # Default color, enabled
        Network:#3366FF         # Explicit color
        Network::off            # Default color, disabled
"""

import keyword
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Mapping, Optional, Type


class Channel(IntEnum):
    """Built-in channel set."""
    AI = 0
    Rendering = 1
    Physics = 2
    UI = 3
    Audio = 4
    Loading = 5
    Localisation = 6
    Platform = 7
    Assert = 8
    Build = 9
    Analytics = 10
    Animation = 11
    Player = 12


DEFAULT_CHANNEL_COLORS: Dict[Channel, str] = {
    Channel.AI: '#0000FF',
    Channel.Rendering: '#008000',
    Channel.Physics: '#FFFF00',
    Channel.UI: '#800080',
    Channel.Audio: '#008080',
    Channel.Loading: '#808000',
    Channel.Localisation: '#A52A2A',
    Channel.Platform: '#FF0000',
    Channel.Assert: '#FF0000',
    Channel.Build: '#000080',
    Channel.Analytics: '#800000',
    Channel.Animation: '#000000',
    Channel.Player: '#00F6FF',
}

# Channel descriptions for `chanlog channels list`
CHANNEL_DESCRIPTIONS = {
    'AI':           'Agent decisions and behaviour trees',
    'Rendering':    'Cameras, materials and draw calls',
    'Physics':      'Collisions and rigid bodies',
    'UI':           'Menus, HUD and input focus',
    'Audio':        'Sound playback and mixing',
    'Loading':      'Scene and asset loading',
    'Localisation': 'String tables and language switching',
    'Platform':     'Platform services and SDKs',
    'Assert':       'Failed assertions (always fatal)',
    'Build':        'Build pipeline messages',
    'Analytics':    'Analytics events',
    'Animation':    'Animators and timelines',
    'Player':       'Player state and progression',
}

DEFAULT_COLOR = '#000000'

_HEX_COLOR = re.compile(r'^#?([0-9A-Fa-f]{6})$')
_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_ENUM_RESERVED = frozenset({'mro'})


@dataclass
class ChannelSpec:
    """One row of the channel table: what the settings file stores
    and what the code generator renders."""
    id: int
    name: str
    color: str = DEFAULT_COLOR
    enabled: bool = True


def normalize_color(color: str) -> str:
    """Return color as '#RRGGBB' in upper case.

    Accepts 'RRGGBB' or '#rrggbb'. Raises ValueError for anything else.
    """
    match = _HEX_COLOR.match(str(color).strip())
    if not match:
        raise ValueError(f"Invalid color {color!r} (expected #RRGGBB)")
    return '#' + match.group(1).upper()


def is_valid_name(name: str) -> bool:
    """Channel names become enum members, so they must be identifiers.

    Keywords cannot be assigned in generated code, and Enum reserves
    _sunder_ / __dunder__ names and 'mro'.
    """
    if not _IDENTIFIER.match(name or ''):
        return False
    if keyword.iskeyword(name) or name in _ENUM_RESERVED:
        return False
    return not (name.startswith('_') and name.endswith('_') and len(name) > 1)


def channel_table(channels: Type[IntEnum] = Channel,
                  colors: Optional[Mapping] = None,
                  enabled: Optional[Mapping] = None) -> List[ChannelSpec]:
    """Build a ChannelSpec list for every member of a channel enum.

    Args:
        channels: The channel enum to describe.
        colors: Channel -> color; defaults to DEFAULT_CHANNEL_COLORS.
        enabled: Channel -> bool; channels not listed are enabled.

    Returns:
        Specs sorted by id.
    """
    if colors is None:
        colors = DEFAULT_CHANNEL_COLORS
    enabled = enabled or {}
    return [
        ChannelSpec(
            id=int(member),
            name=member.name,
            color=colors.get(member, DEFAULT_COLOR),
            enabled=enabled.get(member, True),
        )
        for member in sorted(channels, key=int)
    ]


def parse_channel_spec(spec: str, next_id: int = 0) -> ChannelSpec:
    """Parse a NAME:COLOR:STATE string into a ChannelSpec.

    Empty slots use :: (empty between colons). STATE is 'on' or 'off'.

    Args:
        spec: Channel spec string like "Network" or "Network:#3366FF:off"
        next_id: Id to give the new channel

    Returns:
        ChannelSpec with parsed values

    Raises:
        ValueError: for an invalid name, color or state
    """
    parts = spec.split(':')
    name = parts[0].strip()
    if not is_valid_name(name):
        raise ValueError(f"Invalid channel name {name!r}")

    color = DEFAULT_COLOR
    enabled = True
    if len(parts) > 1 and parts[1]:
        color = normalize_color(parts[1])
    if len(parts) > 2 and parts[2]:
        state = parts[2].strip().lower()
        if state not in ('on', 'off'):
            raise ValueError(f"Invalid channel state {parts[2]!r} (expected on/off)")
        enabled = state == 'on'

    return ChannelSpec(id=next_id, name=name, color=color, enabled=enabled)


def format_channel_list(specs: Iterable[ChannelSpec]) -> str:
    """Format a channel table for display.

    Returns:
        Formatted string listing each channel with state, color and
        description.
    """
    specs = sorted(specs, key=lambda s: s.id)
    if not specs:
        return "No channels configured."
    lines = ["Channels:"]
    max_name = max(len(s.name) for s in specs)
    for s in specs:
        state = "on " if s.enabled else "off"
        desc = CHANNEL_DESCRIPTIONS.get(s.name, '')
        lines.append(f"  [{state}] {s.id:>3}  {s.name:<{max_name}}  {s.color}  {desc}".rstrip())
    return "\n".join(lines)
