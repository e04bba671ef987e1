"""Exception types raised by chanlog.

Every error the package raises on purpose derives from ChanlogError so
the CLI can turn it into a one-line message and exit code 1. Lookup and
value errors also subclass the matching builtin, so callers that only
know about KeyError / ValueError still catch them.
"""


class ChanlogError(Exception):
    """Base class for all chanlog errors."""


class ChannelNotFoundError(ChanlogError, KeyError):
    """A channel was required to be in the registry but is absent."""

    def __init__(self, channel):
        self.channel = channel
        super().__init__(channel)

    def __str__(self):
        return f"Channel not found: {_channel_name(self.channel)}"


class DuplicateChannelError(ChanlogError, ValueError):
    """add() was called for a channel that is already registered."""

    def __init__(self, channel):
        self.channel = channel
        super().__init__(f"Channel already registered: {_channel_name(channel)}")


class FormatError(ChanlogError, ValueError):
    """Format arguments do not match the placeholders of a message."""


class ConfigError(ChanlogError):
    """A settings file or channel table is malformed."""


class FatalHalt(ChanlogError):
    """A fatal handler asked the host to halt after a FATAL_ERROR log."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


def _channel_name(channel):
    return getattr(channel, 'name', channel)
