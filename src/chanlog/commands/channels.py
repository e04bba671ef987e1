"""chanlog channels: view and edit the channel table.

Edits the settings file (see chanlog.config). When no settings file
exists yet, the built-in channel set is used as the starting table and
the result is written to ./.chanlog.json (or to --config PATH).

Actions::

    list                        show every channel with state and color
    enable NAME [NAME ...]      turn channels on
    disable NAME [NAME ...]     turn channels off
    toggle NAME [NAME ...]      flip channels
    select-all / clear-all      turn every channel on / off
    add NAME[:COLOR[:on|off]]   add a channel with the next free id
    remove NAME                 delete a channel
    color NAME #RRGGBB          change a channel's color
"""

import argparse
from pathlib import Path

from chanlog.channels import format_channel_list, normalize_color, parse_channel_spec
from chanlog.config import (
    SETTINGS_FILENAME, apply_settings, build_channel_enum, load_settings,
    save_settings, settings_theme, settings_to_specs, specs_to_settings,
)
from chanlog.errors import ChannelNotFoundError, ConfigError, DuplicateChannelError
from chanlog.output import print_dry, print_ok, print_verbose
from chanlog.registry import ChannelRegistry


def register(subparsers, parents):
    """Register the 'channels' subcommand."""
    p = subparsers.add_parser(
        "channels",
        help="List and edit log channels",
        description=(
            "View and edit the channel table stored in the settings file:\n"
            "which channels are enabled, their ids and their colors."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    actions = p.add_subparsers(dest="action", metavar="<action>")

    actions.add_parser("list", help="Show all channels")
    for name, help_text in (("enable", "Turn channels on"),
                            ("disable", "Turn channels off"),
                            ("toggle", "Flip channels on/off")):
        a = actions.add_parser(name, parents=parents, help=help_text)
        a.add_argument("names", nargs="+", metavar="NAME")
    actions.add_parser("select-all", parents=parents, help="Turn every channel on")
    actions.add_parser("clear-all", parents=parents, help="Turn every channel off")

    a = actions.add_parser("add", parents=parents, help="Add a channel")
    a.add_argument("spec", metavar="NAME[:COLOR[:on|off]]")
    a = actions.add_parser("remove", parents=parents, help="Remove a channel")
    a.add_argument("name", metavar="NAME")
    a = actions.add_parser("color", parents=parents, help="Set a channel's color")
    a.add_argument("name", metavar="NAME")
    a.add_argument("color", metavar="#RRGGBB")

    p.set_defaults(func=run, action=None)


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------
def _load_table(config_path):
    """Return (specs, theme, path to write back to)."""
    settings, path = load_settings(config_path)
    specs = settings_to_specs(settings)
    if path is None:
        path = Path(config_path) if config_path else Path.cwd() / SETTINGS_FILENAME
    return specs, settings_theme(settings), path


def _save_table(specs, theme, path, dry_run):
    if dry_run:
        print_dry(f"Would write {path}")
        return
    save_settings(specs_to_settings(specs, theme), path)
    print_verbose(f"Saved {path}")


def _find_spec(specs, name):
    wanted = name.strip().lower()
    for spec in specs:
        if spec.name.lower() == wanted:
            return spec
    return None


def _with_registry(specs, action):
    """Run action(registry) against the table, then copy states back.

    Returns whatever action returns.
    """
    registry = ChannelRegistry(build_channel_enum(specs))
    apply_settings(registry, specs)
    result = action(registry)
    for spec in specs:
        spec.enabled = registry.is_active(registry.channels(spec.id))
    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def run(args):
    """Execute the channels command."""
    specs, theme, path = _load_table(args.config)
    action = args.action or "list"

    if action == "list":
        print(format_channel_list(specs))
        print_verbose(f"Settings: {path if path.is_file() else 'built-in defaults'}")
        return 0

    if action in ("enable", "disable"):
        state = action == "enable"

        def _set(registry):
            for name in args.names:
                registry.set_enabled(registry.resolve(name), state)
        _with_registry(specs, _set)
        for name in args.names:
            print_ok(f"{name}: {'on' if state else 'off'}")

    elif action == "toggle":
        def _toggle(registry):
            return [(name, registry.toggle(registry.resolve(name))) for name in args.names]
        for name, state in _with_registry(specs, _toggle):
            print_ok(f"{name}: {'on' if state else 'off'}")

    elif action in ("select-all", "clear-all"):
        state = action == "select-all"
        _with_registry(specs, lambda registry: registry.set_all(state))
        print_ok(f"All {len(specs)} channels {'on' if state else 'off'}")

    elif action == "add":
        next_id = max((s.id for s in specs), default=-1) + 1
        try:
            spec = parse_channel_spec(args.spec, next_id=next_id)
        except ValueError as e:
            raise ConfigError(str(e)) from None
        if _find_spec(specs, spec.name) is not None:
            raise DuplicateChannelError(spec.name)
        specs.append(spec)
        print_ok(f"Added {spec.name} (id {spec.id}, {spec.color})")

    elif action == "remove":
        spec = _find_spec(specs, args.name)
        if spec is None:
            raise ChannelNotFoundError(args.name)
        specs.remove(spec)
        print_ok(f"Removed {spec.name}")

    elif action == "color":
        spec = _find_spec(specs, args.name)
        if spec is None:
            raise ChannelNotFoundError(args.name)
        try:
            spec.color = normalize_color(args.color)
        except ValueError as e:
            raise ConfigError(str(e)) from None
        print_ok(f"{spec.name}: {spec.color}")

    _save_table(specs, theme, path, getattr(args, "dry_run", False))
    return 0
