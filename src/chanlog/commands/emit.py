"""chanlog emit: send one message through a configured dispatcher.

Builds a ChannelRegistry and LogDispatcher from the settings file, then
logs MESSAGE on CHANNEL. Handy for checking what a channel's output
looks like, or whether it is currently enabled.

    chanlog emit Physics "Contact count={0}" 3
    chanlog emit Audio "Clip missing" --priority warning
    chanlog emit Platform "Save failed" --priority fatal --fatal ask
"""

import argparse

from chanlog.config import (
    apply_settings, build_channel_enum, colors_from_specs, load_settings,
    settings_theme, settings_to_specs,
)
from chanlog.dispatcher import LogDispatcher
from chanlog.fatal import console_fatal_handler, continue_on_fatal, halt_on_fatal
from chanlog.formatting import format_message, get_theme
from chanlog.output import print_dry, print_verbose
from chanlog.priority import Priority, parse_priority, sink_level
from chanlog.registry import ChannelRegistry
from chanlog.sinks import stream_sinks

FATAL_HANDLERS = {
    "ignore": continue_on_fatal,
    "ask": console_fatal_handler,
    "halt": halt_on_fatal,
}


def register(subparsers, parents):
    """Register the 'emit' subcommand."""
    p = subparsers.add_parser(
        "emit",
        parents=parents,
        help="Log a message on a channel",
        description=(
            "Log MESSAGE on CHANNEL using the channel table from the settings\n"
            "file. Positional ARGS fill {0}, {1}, ... placeholders."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("channel", metavar="CHANNEL")
    p.add_argument("message", metavar="MESSAGE")
    p.add_argument("format_args", nargs="*", metavar="ARGS")
    p.add_argument("--priority", "-p", default="info", type=parse_priority,
                   help="info, warning, error or fatal (default: info)")
    p.add_argument("--fatal", choices=sorted(FATAL_HANDLERS), default="ignore",
                   help="What a fatal message does: ignore, ask, halt (default: ignore)")
    p.set_defaults(func=run)


def build_dispatcher(settings, markup=True, fatal_handler=continue_on_fatal, sinks=None):
    """Create a LogDispatcher whose registry and colors come from settings."""
    specs = settings_to_specs(settings)
    channels = build_channel_enum(specs)
    registry = ChannelRegistry(channels)
    apply_settings(registry, specs)
    return LogDispatcher(
        registry,
        colors=colors_from_specs(channels, specs),
        sinks=sinks if sinks is not None else stream_sinks(),
        theme=get_theme(settings_theme(settings)),
        fatal_handler=fatal_handler,
        markup=markup,
    )


def run(args):
    """Execute the emit command."""
    settings, path = load_settings(args.config)
    print_verbose(f"Settings: {path or 'built-in defaults'}")
    dispatcher = build_dispatcher(
        settings,
        markup=not args.no_color,
        fatal_handler=FATAL_HANDLERS[args.fatal],
    )
    channel = dispatcher.registry.resolve(args.channel)
    priority = Priority(args.priority)

    if not dispatcher.registry.is_active(channel):
        print_verbose(f"Channel {channel.name} is disabled; nothing logged")
        return 0

    if getattr(args, "dry_run", False):
        text = format_message(args.message, args.format_args)
        print_dry(f"{sink_level(priority)} sink <- [{channel.name}] {text}")
        return 0

    dispatcher.log(channel, args.message, *args.format_args, priority=priority)
    return 0
