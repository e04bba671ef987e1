"""chanlog: channel-based logging.

Log calls name a channel (Rendering, Physics, ...) and a priority.
A ChannelRegistry decides which channels are enabled; a LogDispatcher
formats enabled messages with color markup, routes them to a severity
sink, and notifies observers.

Public API:
    LogDispatcher       filter, format and route log calls
    init_logger         build the module-level dispatcher
    get_logger          access the module-level dispatcher
    ChannelRegistry     enabled/disabled state per channel
    Channel             built-in channel set
    Priority            INFO, WARNING, ERROR, FATAL_ERROR
    Sinks               severity-keyed output destinations
    FatalDecision       CONTINUE / HALT answer of a fatal handler
"""

from chanlog._version import __version__, __app_name__
from chanlog.channels import Channel, ChannelSpec, DEFAULT_CHANNEL_COLORS
from chanlog.dispatcher import LogDispatcher, get_logger, init_logger
from chanlog.errors import (
    ChanlogError, ChannelNotFoundError, ConfigError, DuplicateChannelError,
    FatalHalt, FormatError,
)
from chanlog.fatal import FatalDecision, console_fatal_handler, continue_on_fatal, halt_on_fatal
from chanlog.formatting import DARK_THEME, LIGHT_THEME, Theme
from chanlog.priority import Priority
from chanlog.registry import ChannelRegistry
from chanlog.sinks import Sinks, logging_sinks, stream_sinks

__all__ = [
    "__version__", "__app_name__",
    "Channel", "ChannelSpec", "DEFAULT_CHANNEL_COLORS",
    "LogDispatcher", "get_logger", "init_logger",
    "ChanlogError", "ChannelNotFoundError", "ConfigError", "DuplicateChannelError",
    "FatalHalt", "FormatError",
    "FatalDecision", "console_fatal_handler", "continue_on_fatal", "halt_on_fatal",
    "DARK_THEME", "LIGHT_THEME", "Theme",
    "Priority",
    "ChannelRegistry",
    "Sinks", "logging_sinks", "stream_sinks",
]
