"""
Output sinks: where finalized log strings end up.

A Sinks bundle holds three callables keyed by severity (info, warning,
error). The dispatcher never looks inside them; it only picks one with
route() and passes it the final string.

Two ready-made bundles:
    stream_sinks()          info -> stdout, warning/error -> stderr
    logging_sinks(logger)   forwards to a stdlib logging.Logger
"""

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from .priority import ERROR_SINK, WARNING_SINK, Priority, sink_level

SinkFunc = Callable[[str], None]


@dataclass
class Sinks:
    """Three severity-keyed destinations for finalized messages."""
    info: SinkFunc
    warning: SinkFunc
    error: SinkFunc


def route(sinks: Sinks, priority: Priority) -> SinkFunc:
    """Return the sink a priority is routed to."""
    level = sink_level(priority)
    if level == ERROR_SINK:
        return sinks.error
    if level == WARNING_SINK:
        return sinks.warning
    return sinks.info


def stream_sinks(out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> Sinks:
    """Sinks that print to text streams.

    When a stream is not given, sys.stdout / sys.stderr is looked up at
    write time rather than bound here, so redirected streams (pytest
    capture, contextlib.redirect_stdout) are honoured.
    """
    def _writer(stream, fallback_name):
        def write(text):
            target = stream if stream is not None else getattr(sys, fallback_name)
            print(text, file=target)
        return write

    return Sinks(
        info=_writer(out, 'stdout'),
        warning=_writer(err, 'stderr'),
        error=_writer(err, 'stderr'),
    )


def logging_sinks(logger: logging.Logger) -> Sinks:
    """Sinks that forward to a standard library logger.

    INFO goes to logger.info, WARNING to logger.warning, ERROR and
    FATAL_ERROR to logger.error.
    """
    return Sinks(info=logger.info, warning=logger.warning, error=logger.error)
