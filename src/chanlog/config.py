"""Channel settings for chanlog.

The channel table (id, name, color, enabled) is stored as JSON in a
.chanlog.json settings file. Resolution order:
  1. --config PATH on the command line
  2. .chanlog.json found by walking up from the current directory
  3. Built-in defaults (the Channel enum, all enabled)

Loading a settings file into a running dispatcher goes through
ChannelRegistry.replace_all(), so a reload is atomic.
"""

import json
import os
from enum import IntEnum
from pathlib import Path

from chanlog.channels import (
    DEFAULT_CHANNEL_COLORS, Channel, ChannelSpec, channel_table, is_valid_name, normalize_color,
)
from chanlog.errors import ConfigError
from chanlog.formatting import THEMES

SETTINGS_FILENAME = ".chanlog.json"
SCHEMA_VERSION = 1


# ---------------------------------------------------------------------------
# Settings file location
# ---------------------------------------------------------------------------
def find_settings(start_dir=None):
    """Walk up from start_dir looking for .chanlog.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON file. Missing file -> {}; malformed file -> ConfigError."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return data


def default_settings(channels=Channel, colors=None):
    """Settings for a channel enum with every channel enabled."""
    if colors is None:
        colors = DEFAULT_CHANNEL_COLORS if channels is Channel else {}
    return specs_to_settings(channel_table(channels, colors))


def load_settings(path=None, start_dir=None):
    """Load settings from path, or from the nearest .chanlog.json.

    Returns:
        (settings, path); path is None when defaults were used.
    """
    if path is None:
        path = find_settings(start_dir)
        if path is None:
            return default_settings(), None
    path = Path(path)
    data = load_json(path)
    if not data:
        return default_settings(), path
    settings_to_specs(data)  # validate early
    return data, path


def save_settings(settings, path):
    """Write settings JSON to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
        f.write("\n")
    return path


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------
def settings_to_specs(settings):
    """Convert a settings dict to a validated list of ChannelSpec.

    Raises:
        ConfigError: on missing fields, wrong types or duplicates.
    """
    rows = settings.get("channels")
    if not isinstance(rows, list):
        raise ConfigError("settings: 'channels' must be a list")

    specs = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ConfigError(f"settings: channel #{i} must be an object")
        try:
            spec = ChannelSpec(
                id=row["id"],
                name=row["name"],
                color=row.get("color", "#000000"),
                enabled=row.get("enabled", True),
            )
        except KeyError as e:
            raise ConfigError(f"settings: channel #{i} is missing {e}") from None
        if not isinstance(spec.id, int) or isinstance(spec.id, bool) or spec.id < 0:
            raise ConfigError(f"settings: channel #{i} has invalid id {spec.id!r}")
        if not isinstance(spec.enabled, bool):
            raise ConfigError(f"settings: channel {spec.name!r} 'enabled' must be true/false")
        specs.append(spec)

    validate_specs(specs)
    for spec in specs:
        spec.color = normalize_color(spec.color)
    return specs


def specs_to_settings(specs, theme="dark"):
    """Convert a channel table to a settings dict."""
    return {
        "version": SCHEMA_VERSION,
        "theme": theme,
        "channels": [
            {"id": s.id, "name": s.name, "color": s.color, "enabled": s.enabled}
            for s in sorted(specs, key=lambda s: s.id)
        ],
    }


def settings_theme(settings):
    """Return the theme name stored in settings (default 'dark')."""
    theme = settings.get("theme", "dark")
    if theme not in THEMES:
        raise ConfigError(f"settings: unknown theme {theme!r}")
    return theme


def validate_specs(specs):
    """Check a channel table for duplicate ids/names and bad values.

    Raises:
        ConfigError: describing the first problem found.
    """
    seen_ids = set()
    seen_names = set()
    for spec in specs:
        if not is_valid_name(spec.name):
            raise ConfigError(f"Invalid channel name {spec.name!r}")
        if spec.id in seen_ids:
            raise ConfigError(f"Duplicate channel id {spec.id}")
        if spec.name in seen_names:
            raise ConfigError(f"Duplicate channel name {spec.name!r}")
        try:
            normalize_color(spec.color)
        except ValueError as e:
            raise ConfigError(f"Channel {spec.name!r}: {e}") from None
        seen_ids.add(spec.id)
        seen_names.add(spec.name)


# ---------------------------------------------------------------------------
# Applying settings to a running registry
# ---------------------------------------------------------------------------
def build_channel_enum(specs, name="LoggerChannel"):
    """Build an IntEnum for a channel table at runtime.

    The in-memory counterpart of the module chanlog.codegen writes to disk.
    """
    validate_specs(specs)
    try:
        return IntEnum(name, [(s.name, s.id) for s in sorted(specs, key=lambda s: s.id)])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Cannot build channel enum: {e}") from e


def colors_from_specs(channels, specs):
    """Map members of a channel enum to the colors in a channel table."""
    by_id = {s.id: normalize_color(s.color) for s in specs}
    return {member: by_id[int(member)] for member in channels if int(member) in by_id}


def apply_settings(registry, specs):
    """Replace a registry's state with the enabled flags of a channel table.

    Rows whose id is not a member of the registry's channel set are
    skipped; channels without a row become inactive.

    Returns:
        List of skipped ChannelSpec rows.
    """
    mapping = {}
    skipped = []
    for spec in specs:
        try:
            member = registry.channels(spec.id)
        except ValueError:
            skipped.append(spec)
            continue
        mapping[member] = spec.enabled
    registry.replace_all(mapping)
    return skipped
