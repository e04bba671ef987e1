"""
Log priority constants and sink routing.

Priorities are ordered by severity. The order carries no automatic
escalation: it only decides which sink a message goes to and whether
the fatal handler runs.

    ←── milder ─────────────────────── severe ──→
    INFO      WARNING      ERROR      FATAL_ERROR
    info      warning      error      error + fatal handler

Routing is a pure function of the priority (see sink_level()).
"""

from enum import IntEnum


class Priority(IntEnum):
    """Severity of a log message."""
    INFO = 0            # Default, simple output about the game
    WARNING = 1         # Things might not be as expected
    ERROR = 2           # Something already failed, alert the dev
    FATAL_ERROR = 3     # Will not recover, ask the host what to do


# Sink names, in the order a Sinks bundle declares them
INFO_SINK = 'info'
WARNING_SINK = 'warning'
ERROR_SINK = 'error'

_SINK_FOR_PRIORITY = {
    Priority.INFO: INFO_SINK,
    Priority.WARNING: WARNING_SINK,
    Priority.ERROR: ERROR_SINK,
    Priority.FATAL_ERROR: ERROR_SINK,
}

# Colors that do not depend on the theme; INFO comes from the Theme
PRIORITY_COLORS = {
    Priority.WARNING: 'orange',
    Priority.ERROR: 'red',
    Priority.FATAL_ERROR: 'red',
}


def sink_level(priority: Priority) -> str:
    """Return the name of the sink a priority is routed to."""
    return _SINK_FOR_PRIORITY[Priority(priority)]


def parse_priority(value) -> Priority:
    """Convert a name ('warning', 'FATAL_ERROR', 'fatal') or int to Priority.

    Raises:
        ValueError: if the value names no priority.
    """
    if isinstance(value, Priority):
        return value
    if isinstance(value, int):
        return Priority(value)
    key = str(value).strip().upper().replace('-', '_')
    if key == 'FATAL':
        key = 'FATAL_ERROR'
    try:
        return Priority[key]
    except KeyError:
        choices = ', '.join(p.name.lower() for p in Priority)
        raise ValueError(f"Unknown priority {value!r} (expected one of: {choices})") from None
