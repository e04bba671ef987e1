"""
Version information for chanlog.

This file is the canonical source for version numbers.
Release builds may append build metadata to __version__:

Format: MAJOR.MINOR.PATCH[-PHASE][_BRANCH_BUILD-YYYYMMDD-COMMITHASH]
Example: 0.1.0-alpha_dev_4-20261018-a1b2c3d4
"""

# Version components - edit these for version bumps
MAJOR = 0
MINOR = 1
PATCH = 0
PHASE = "alpha"  # None, "alpha", "beta", "rc1", etc.

__version__ = "0.1.0-alpha"
__app_name__ = "chanlog"


def get_version():
    """Return the full version string including any build info."""
    return __version__


def get_base_version():
    """Return the semantic version string (MAJOR.MINOR.PATCH[-PHASE])."""
    if "_" in __version__:
        return __version__.split("_")[0]
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base = f"{base}-{PHASE}"
    return base


def get_pip_version(version=None):
    """
    Return PEP 440 compliant version for pip/setuptools.

    Converts our version format to PEP 440:
    - No build info: 0.1.0-alpha -> 0.1.0a0
    - Main branch: 0.1.0-alpha_main_3-20261018-hash -> 0.1.0a0
    - Other branch: 0.1.0-alpha_dev_3-20261018-hash -> 0.1.0a0.dev3
    """
    version = __version__ if version is None else version
    base = f"{MAJOR}.{MINOR}.{PATCH}"

    phase_map = {"alpha": "a0", "beta": "b0"}
    if PHASE:
        base += phase_map.get(PHASE, PHASE)

    if "_" not in version:
        return base

    parts = version.split("_")
    branch = parts[1] if len(parts) > 1 else "unknown"

    if branch == "main":
        return base
    build_info = "_".join(parts[2:]) if len(parts) > 2 else ""
    build_num = build_info.split("-")[0] if "-" in build_info else "0"
    return f"{base}.dev{build_num}"


VERSION = get_version()
BASE_VERSION = get_base_version()
PIP_VERSION = get_pip_version()
