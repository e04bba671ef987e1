"""
LogDispatcher: channel-gated log dispatch.

Central coordinator for channel logging. A log call names a channel, a
priority and a message. The dispatcher:

    1. drops the call silently if the channel is not active
    2. applies positional format arguments (FormatError on mismatch)
    3. wraps the message with channel and priority color markup
       (FATAL_ERROR stays plain)
    4. asks the fatal handler what to do, for FATAL_ERROR only
    5. writes to the info / warning / error sink picked by priority
    6. calls every observer in registration order
    7. raises FatalHalt if the fatal handler chose HALT

Observers are isolated from each other: an observer that raises is
reported on the error sink and the remaining observers still run.

Channels with no color fall back to the theme color. The missing color
is reported once per channel, not on every call.
"""

import threading
from enum import IntEnum
from typing import Callable, Dict, List, Mapping, Optional, Set

from .channels import DEFAULT_CHANNEL_COLORS, Channel
from .errors import FatalHalt
from .fatal import FatalDecision, FatalHandler, continue_on_fatal
from .formatting import (
    ASSERT_PREFIX, DARK_THEME, Theme, build_message, format_message, priority_color,
)
from .priority import Priority
from .registry import ChannelRegistry
from .sinks import Sinks, route, stream_sinks

Observer = Callable[[IntEnum, Priority, str], None]


class LogDispatcher:
    """Filters, formats and routes log calls for one channel registry.

    Usage::

        log = LogDispatcher(ChannelRegistry())
        log.log(Channel.Physics, "Contact count={0}", 3)
        log.warning(Channel.Audio, "Clip {0} missing", "boom.wav")
        log.assert_(speed >= 0, "negative speed")
        log.add_observer(lambda ch, prio, msg: history.append(msg))
    """

    def __init__(
        self,
        registry: Optional[ChannelRegistry] = None,
        colors: Optional[Mapping[IntEnum, str]] = None,
        sinks: Optional[Sinks] = None,
        theme: Theme = DARK_THEME,
        fatal_handler: FatalHandler = continue_on_fatal,
        markup: bool = True,
        assert_channel: Optional[IntEnum] = None,
    ):
        self.registry = registry if registry is not None else ChannelRegistry()
        if colors is None:
            colors = DEFAULT_CHANNEL_COLORS if self.registry.channels is Channel else {}
        self.colors: Dict[IntEnum, str] = dict(colors)
        self.sinks = sinks if sinks is not None else stream_sinks()
        self.theme = theme
        self.fatal_handler = fatal_handler
        self.markup = markup
        self.assert_channel = assert_channel
        self._lock = threading.Lock()
        self._observers: List[Observer] = []
        self._warned_colors: Set[IntEnum] = set()

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def log(self, channel: IntEnum, message: str, *args,
            priority: Priority = Priority.INFO) -> Optional[str]:
        """Log a message on a channel if the channel is active.

        Args:
            channel: Channel to log on
            message: Message text; positional placeholders ({0}, {}) are
                filled from args
            *args: Format arguments
            priority: Severity, which picks the sink

        Returns:
            The finalized message, or None if the channel is inactive

        Raises:
            FormatError: args do not match the placeholders in message
            FatalHalt: the fatal handler chose HALT
        """
        if not self.registry.is_active(channel):
            return None
        text = format_message(message, args)
        return self._dispatch(channel, Priority(priority), text)

    def info(self, channel: IntEnum, message: str, *args) -> Optional[str]:
        return self.log(channel, message, *args, priority=Priority.INFO)

    def warning(self, channel: IntEnum, message: str, *args) -> Optional[str]:
        return self.log(channel, message, *args, priority=Priority.WARNING)

    def error(self, channel: IntEnum, message: str, *args) -> Optional[str]:
        return self.log(channel, message, *args, priority=Priority.ERROR)

    def fatal(self, channel: IntEnum, message: str, *args) -> Optional[str]:
        return self.log(channel, message, *args, priority=Priority.FATAL_ERROR)

    def assert_(self, condition, message: str) -> Optional[str]:
        """Log a FATAL_ERROR on the Assert channel when condition is false.

        The message is used literally; it is not a format string.
        """
        if condition:
            return None
        channel = self.assert_channel
        if channel is None:
            channel = self.registry.resolve('Assert')
        return self.log(channel, ASSERT_PREFIX + message, priority=Priority.FATAL_ERROR)

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def add_observer(self, observer: Observer) -> Observer:
        """Register a callback fired after every dispatched message.

        Returns the observer so this can be used as a decorator.
        """
        with self._lock:
            self._observers.append(observer)
        return observer

    def remove_observer(self, observer: Observer) -> bool:
        """Unregister an observer. Returns False if it was not registered."""
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                return False
            return True

    @property
    def observers(self) -> List[Observer]:
        """Registered observers, in call order."""
        with self._lock:
            return list(self._observers)

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def _dispatch(self, channel: IntEnum, priority: Priority, text: str) -> str:
        colored = self.markup and priority != Priority.FATAL_ERROR
        final = self._finalize(channel, priority, text, colored)

        decision = FatalDecision.CONTINUE
        if priority == Priority.FATAL_ERROR:
            decision = self.fatal_handler(final)

        route(self.sinks, priority)(final)
        self._notify(channel, priority, final)

        if decision == FatalDecision.HALT:
            raise FatalHalt(final)
        return final

    def _finalize(self, channel: IntEnum, priority: Priority, text: str,
                  colored: bool) -> str:
        name = _channel_name(channel)
        if not colored:
            return build_message(name, text)
        return build_message(name, text,
                             channel_color=self.channel_color(channel),
                             text_color=priority_color(priority, self.theme))

    def channel_color(self, channel: IntEnum) -> str:
        """Return a channel's color, or the theme fallback.

        The first lookup of a channel with no color writes a warning to
        the warning sink; later lookups fall back quietly.
        """
        color = self.colors.get(channel)
        if color is not None:
            return color
        with self._lock:
            first_miss = channel not in self._warned_colors
            self._warned_colors.add(channel)
        if first_miss:
            self.sinks.warning(f"Please add a color for channel {_channel_name(channel)}")
        return self.theme.fallback_channel_color

    def _notify(self, channel: IntEnum, priority: Priority, final: str) -> None:
        for observer in self.observers:
            try:
                observer(channel, priority, final)
            except Exception as e:
                name = getattr(observer, '__qualname__', repr(observer))
                self.sinks.error(f"Log observer {name} raised {type(e).__name__}: {e}")


def _channel_name(channel) -> str:
    return getattr(channel, 'name', str(channel))


# =============================================================================
# Module-level default dispatcher
# =============================================================================

_dispatcher: Optional[LogDispatcher] = None


def init_logger(registry: Optional[ChannelRegistry] = None, **kwargs) -> LogDispatcher:
    """Build the module-level LogDispatcher.

    Call once at program startup. Takes the same arguments as
    LogDispatcher; code that wants its own instance can skip this and
    construct one directly.

    Returns:
        The initialized LogDispatcher
    """
    global _dispatcher
    _dispatcher = LogDispatcher(registry, **kwargs)
    return _dispatcher


def get_logger() -> LogDispatcher:
    """Get the module-level LogDispatcher, creating a default if needed."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = LogDispatcher()
    return _dispatcher
