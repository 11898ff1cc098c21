"""Resolution of the TextTransform executable path."""

import os
from typing import Callable, List, Mapping, Optional

from .properties import PropertyResolver


SHARED_PROGRAM_FILES_ENV = "CommonProgramFiles(x86)"
SHARED_PROGRAM_FILES_PROPERTY = "CommonProgramFiles"
TOOL_PATH_PROPERTY = "TextTransformPath"
TOOL_VERSION_PROPERTY = "VisualStudioVersion"

TOOL_SUBDIRECTORY = ("Microsoft Shared", "TextTemplating")
TOOL_EXECUTABLE = "TextTransform.exe"

# Probed in this order when the configured path is missing; first hit wins.
FALLBACK_TOOL_VERSIONS = ("10.0", "11.0", "12.0", "13.0", "14.0")


def shared_program_files_dir(properties: Mapping, environ: Optional[Mapping] = None) -> str:
    """Return the common shared program files directory."""
    environ = os.environ if environ is None else environ
    shared_dir = environ.get(SHARED_PROGRAM_FILES_ENV)
    if not shared_dir:
        shared_dir = PropertyResolver(properties).get(SHARED_PROGRAM_FILES_PROPERTY)
    return shared_dir


def versioned_tool_path(shared_dir: str, version: str) -> str:
    """Build ``<shared>/Microsoft Shared/TextTemplating/<version>/TextTransform.exe``."""
    return os.path.join(shared_dir, *TOOL_SUBDIRECTORY, version, TOOL_EXECUTABLE)


def candidate_tool_paths(properties: Mapping, environ: Optional[Mapping] = None) -> List[str]:
    """List every path the locator may consider, in probing order.

    The first entry is the explicit ``TextTransformPath`` property or, when it
    is empty, the default path for ``VisualStudioVersion``. The fallback
    versions follow.
    """
    resolver = PropertyResolver(properties)
    shared_dir = shared_program_files_dir(properties, environ)

    configured = resolver.get(TOOL_PATH_PROPERTY)
    if not configured:
        configured = versioned_tool_path(shared_dir, resolver.get(TOOL_VERSION_PROPERTY))

    return [configured] + [versioned_tool_path(shared_dir, v) for v in FALLBACK_TOOL_VERSIONS]


def locate_transform_tool(properties: Mapping, environ: Optional[Mapping] = None,
                          exists: Optional[Callable[[str], bool]] = None) -> str:
    """Resolve the transform executable path.

    Args:
        properties: Property snapshot
        environ: Environment mapping, defaults to ``os.environ``
        exists: Existence predicate, defaults to ``os.path.isfile``

    Returns:
        str: The first existing candidate, or the last probed candidate when
        none exists. Existence of the returned path is not guaranteed.
    """
    exists = os.path.isfile if exists is None else exists
    candidates = candidate_tool_paths(properties, environ)

    tool_path = candidates[0]
    for candidate in candidates:
        tool_path = candidate
        if exists(candidate):
            break
    return tool_path
