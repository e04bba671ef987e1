"""Code generation for project-specific channel sets.

Renders two Python modules from the channel table:

    logger_channel.py   class LoggerChannel(IntEnum) with one member per channel
    logger_data.py      CHANNEL_COLORS mapping LoggerChannel -> '#RRGGBB'

Each comes from a text template in chanlog/templates/ with a %DATA%
token replaced by the rendered lines. Rendering is a pure function of
the channel table; only generate_channel_scripts() touches the disk.
"""

from importlib.resources import files
from pathlib import Path

from chanlog.channels import normalize_color
from chanlog.config import validate_specs
from chanlog.output import print_dry, print_ok

CHANNEL_FILE_TEMPLATE = "channel_template.txt"
DATA_FILE_TEMPLATE = "data_template.txt"

CHANNEL_FILE = "logger_channel.py"
DATA_FILE = "logger_data.py"

DATA_REPLACE = "%DATA%"


def load_template(name):
    """Read a template shipped in the chanlog.templates directory."""
    return (files("chanlog") / "templates" / name).read_text(encoding="utf-8")


def render_channel_data(specs):
    """Render enum member lines, sorted by channel id."""
    ordered = sorted(specs, key=lambda s: s.id)
    if not ordered:
        return "    pass\n"
    return "".join(f"    {s.name} = {s.id}\n" for s in ordered)


def render_color_data(specs):
    """Render CHANNEL_COLORS entry lines, sorted by channel id."""
    ordered = sorted(specs, key=lambda s: s.id)
    return "".join(
        f'    LoggerChannel.{s.name}: "{normalize_color(s.color)}",\n'
        for s in ordered
    )


def render_sources(specs, channel_template=None, data_template=None):
    """Render both generated modules.

    Args:
        specs: Channel table (list of ChannelSpec).
        channel_template: Template text for the enum module; defaults to
            the packaged template.
        data_template: Template text for the color module; defaults to
            the packaged template.

    Returns:
        (channel_source, data_source) tuple of strings.

    Raises:
        ConfigError: if the table has duplicate ids/names or bad values.
    """
    validate_specs(specs)
    if channel_template is None:
        channel_template = load_template(CHANNEL_FILE_TEMPLATE)
    if data_template is None:
        data_template = load_template(DATA_FILE_TEMPLATE)

    channel_source = channel_template.replace(DATA_REPLACE, render_channel_data(specs))
    data_source = data_template.replace(DATA_REPLACE, render_color_data(specs))
    return channel_source, data_source


def generate_channel_scripts(specs, out_dir, dry_run=False):
    """Write logger_channel.py and logger_data.py into out_dir.

    Args:
        specs: Channel table (list of ChannelSpec).
        out_dir: Destination directory; created if missing.
        dry_run: If True, only print what would happen.

    Returns:
        (channel_path, data_path) tuple of Paths.
    """
    out_dir = Path(out_dir)
    channel_source, data_source = render_sources(specs)
    channel_path = out_dir / CHANNEL_FILE
    data_path = out_dir / DATA_FILE

    if dry_run:
        print_dry(f"Would write {channel_path} ({len(specs)} channels)")
        print_dry(f"Would write {data_path}")
        return channel_path, data_path

    out_dir.mkdir(parents=True, exist_ok=True)
    channel_path.write_text(channel_source, encoding="utf-8")
    print_ok(f"Wrote {channel_path} ({len(specs)} channels)")
    data_path.write_text(data_source, encoding="utf-8")
    print_ok(f"Wrote {data_path}")
    return channel_path, data_path
