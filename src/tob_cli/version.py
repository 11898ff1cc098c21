"""Version management for the transform-on-build CLI."""

import re
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "transform-on-build"


def get_version() -> str:
    """
    Get the current version.

    Prefers installed distribution metadata, then falls back to parsing
    pyproject.toml for source checkouts.

    Returns:
        str: Version string
    """
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Look for version = "x.y.z" pattern (including PEP 440 prereleases)
        match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
        if match and re.match(r'^\d+\.\d+\.\d+(a\d+|b\d+|rc\d+)?$', match.group(1)):
            return match.group(1)

    return "unknown"


__version__ = get_version()
