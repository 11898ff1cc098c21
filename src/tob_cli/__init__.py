"""Transform On Build: run text templates through TextTransform during a build."""

from .version import get_version

__version__ = get_version()
