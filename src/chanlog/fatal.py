"""
Fatal handlers: what happens when something logs at FATAL_ERROR.

A fatal handler is any callable taking the final (uncolored) message
and returning a FatalDecision. The dispatcher calls it before the
message is sunk; it may block (waiting on a user, for example). When it
returns HALT the dispatcher finishes sinking and notifying observers,
then raises FatalHalt for the host application to act on.
"""

from enum import Enum
from typing import Callable


class FatalDecision(Enum):
    CONTINUE = 'continue'
    HALT = 'halt'


FatalHandler = Callable[[str], FatalDecision]


def continue_on_fatal(message: str) -> FatalDecision:
    """Never halt. Default for headless and test use."""
    return FatalDecision.CONTINUE


def halt_on_fatal(message: str) -> FatalDecision:
    """Always halt."""
    return FatalDecision.HALT


def console_fatal_handler(message: str) -> FatalDecision:
    """Show the message and ask the user whether to ignore it or break.

    Interactive. Blocks until the user answers. End of input counts as
    Ignore.
    """
    print(f"\n  FATAL ERROR: {message}")
    try:
        answer = input("  [I]gnore / [B]reak? ").strip().lower()
    except EOFError:
        return FatalDecision.CONTINUE
    if answer in ('b', 'break'):
        return FatalDecision.HALT
    return FatalDecision.CONTINUE
