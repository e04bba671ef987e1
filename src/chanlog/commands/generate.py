"""chanlog generate: write the channel enum and color modules.

Renders logger_channel.py and logger_data.py from the channel table in
the settings file (see chanlog.codegen) into --out DIR.
"""

import argparse

from chanlog.codegen import generate_channel_scripts
from chanlog.config import load_settings, settings_to_specs
from chanlog.output import print_verbose


def register(subparsers, parents):
    """Register the 'generate' subcommand."""
    p = subparsers.add_parser(
        "generate",
        parents=parents,
        help="Generate channel enum and color modules",
        description=(
            "Write logger_channel.py (the LoggerChannel enum) and logger_data.py\n"
            "(CHANNEL_COLORS) for the channels in the settings file."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--out", metavar="DIR", default=".",
                   help="Output directory (default: current directory)")
    p.set_defaults(func=run)


def run(args):
    """Execute the generate command."""
    settings, path = load_settings(args.config)
    print_verbose(f"Settings: {path or 'built-in defaults'}")
    specs = settings_to_specs(settings)
    generate_channel_scripts(specs, args.out, dry_run=args.dry_run)
    return 0
