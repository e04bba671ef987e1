"""
ChannelRegistry: which channels are enabled.

The registry maps each channel of a channel enum to an enabled flag.
A channel missing from the mapping counts as inactive. A new registry
starts with every channel enabled.

All access goes through a lock with short critical sections, and
replace_all() swaps the whole mapping in one assignment, so a reader
sees either the old table or the new one, never a mix. Nothing that
can block (fatal handlers, sinks, observers) runs under this lock.

Usage::

    reg = ChannelRegistry()           # built-in Channel enum, all enabled
    reg.toggle(Channel.Physics)       # -> False
    reg.is_active(Channel.Physics)    # -> False
    reg.replace_all({Channel.AI: True})
"""

import threading
from enum import IntEnum
from typing import Dict, List, Mapping, Type, Union

from .channels import Channel
from .errors import ChannelNotFoundError, DuplicateChannelError


class ChannelRegistry:
    """Enabled/disabled state for every channel of a channel enum."""

    def __init__(self, channels: Type[IntEnum] = Channel):
        self.channels = channels
        self._lock = threading.Lock()
        self._state: Dict[IntEnum, bool] = {}
        self.initialize()

    # -------------------------------------------------------------------------
    # Operations on single channels
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Enable every channel of the channel set, dropping any other state."""
        fresh = {member: True for member in self.channels}
        with self._lock:
            self._state = fresh

    def add(self, channel: IntEnum) -> None:
        """Register a channel as enabled.

        Raises:
            DuplicateChannelError: if the channel is already registered.
        """
        with self._lock:
            if channel in self._state:
                raise DuplicateChannelError(channel)
            self._state[channel] = True

    def remove(self, channel: IntEnum) -> None:
        """Forget a channel. Removing an absent channel does nothing."""
        with self._lock:
            self._state.pop(channel, None)

    def toggle(self, channel: IntEnum) -> bool:
        """Flip a channel's state and return the new state.

        Raises:
            ChannelNotFoundError: if the channel is not registered.
        """
        with self._lock:
            if channel not in self._state:
                raise ChannelNotFoundError(channel)
            self._state[channel] = not self._state[channel]
            return self._state[channel]

    def set_enabled(self, channel: IntEnum, enabled: bool) -> None:
        """Set a channel's state, registering it if needed."""
        with self._lock:
            self._state[channel] = bool(enabled)

    def is_active(self, channel: IntEnum) -> bool:
        """True if the channel is registered and enabled."""
        with self._lock:
            return self._state.get(channel, False)

    # -------------------------------------------------------------------------
    # Bulk operations
    # -------------------------------------------------------------------------

    def replace_all(self, mapping: Mapping[IntEnum, bool]) -> None:
        """Swap the whole state for a copy of mapping.

        Channels not in mapping become inactive.
        """
        fresh = {channel: bool(enabled) for channel, enabled in mapping.items()}
        with self._lock:
            self._state = fresh

    def set_all(self, enabled: bool) -> None:
        """Set every registered channel to the same state."""
        with self._lock:
            self._state = {channel: bool(enabled) for channel in self._state}

    def snapshot(self) -> Dict[IntEnum, bool]:
        """Return a copy of the current mapping."""
        with self._lock:
            return dict(self._state)

    def active_channels(self) -> List[IntEnum]:
        """Registered channels that are enabled, in id order."""
        with self._lock:
            return sorted((c for c, on in self._state.items() if on), key=int)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def resolve(self, channel: Union[IntEnum, str, int]) -> IntEnum:
        """Turn a channel member, name (case-insensitive) or id into a member.

        Raises:
            ChannelNotFoundError: if the channel set has no such channel.
        """
        if isinstance(channel, self.channels):
            return channel
        if isinstance(channel, int):
            try:
                return self.channels(channel)
            except ValueError:
                raise ChannelNotFoundError(channel) from None
        wanted = str(channel).strip().lower()
        for member in self.channels:
            if member.name.lower() == wanted:
                return member
        raise ChannelNotFoundError(channel)

    def __contains__(self, channel) -> bool:
        with self._lock:
            return channel in self._state

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)

    def __repr__(self):
        active = len(self.active_channels())
        return f"<ChannelRegistry {self.channels.__name__}: {active}/{len(self)} active>"
