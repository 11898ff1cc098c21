"""Tests for TextTransform.exe resolution."""

import os

from tob_cli.core.tool_locator import (
    FALLBACK_TOOL_VERSIONS,
    candidate_tool_paths,
    locate_transform_tool,
    versioned_tool_path,
)
from tob_cli.models.project import PropertyTable


SHARED = os.path.join(os.sep, "shared")


def tool(version, shared=SHARED):
    return os.path.join(shared, "Microsoft Shared", "TextTemplating", version, "TextTransform.exe")


def exists_only(*paths):
    present = set(paths)
    return lambda p: p in present


def test_versioned_tool_path_layout():
    assert versioned_tool_path(SHARED, "12.0") == tool("12.0")


def test_environment_directory_preferred_over_property():
    props = PropertyTable({"CommonProgramFiles": os.sep + "prop", "VisualStudioVersion": "12.0"})
    env = {"CommonProgramFiles(x86)": SHARED}
    assert candidate_tool_paths(props, env)[0] == tool("12.0")


def test_property_directory_used_when_environment_unset():
    props = PropertyTable({"CommonProgramFiles": SHARED, "VisualStudioVersion": "12.0"})
    assert candidate_tool_paths(props, {})[0] == tool("12.0")


def test_empty_environment_value_falls_back_to_property():
    props = PropertyTable({"CommonProgramFiles": SHARED, "VisualStudioVersion": "11.0"})
    assert candidate_tool_paths(props, {"CommonProgramFiles(x86)": ""})[0] == tool("11.0")


def test_explicit_tool_path_wins_when_present():
    explicit = os.path.join(os.sep, "custom", "TextTransform.exe")
    props = PropertyTable({"TextTransformPath": explicit, "VisualStudioVersion": "12.0"})
    env = {"CommonProgramFiles(x86)": SHARED}
    assert locate_transform_tool(props, env, exists_only(explicit, tool("10.0"))) == explicit


def test_default_path_wins_when_present():
    props = PropertyTable({"VisualStudioVersion": "12.0"})
    env = {"CommonProgramFiles(x86)": SHARED}
    assert locate_transform_tool(props, env, exists_only(tool("12.0"), tool("10.0"))) == tool("12.0")


def test_missing_explicit_path_probes_fallbacks():
    props = PropertyTable({"TextTransformPath": os.sep + "nowhere.exe"})
    env = {"CommonProgramFiles(x86)": SHARED}
    assert locate_transform_tool(props, env, exists_only(tool("13.0"))) == tool("13.0")


def test_oldest_installed_version_wins():
    props = PropertyTable({"VisualStudioVersion": "15.0"})
    env = {"CommonProgramFiles(x86)": SHARED}
    found = locate_transform_tool(props, env, exists_only(tool("11.0"), tool("14.0")))
    assert found == tool("11.0")


def test_nothing_found_returns_highest_fallback():
    props = PropertyTable({"TextTransformPath": "", "VisualStudioVersion": "12.0"})
    env = {"CommonProgramFiles(x86)": SHARED}
    assert locate_transform_tool(props, env, lambda p: False) == tool("14.0")


def test_candidates_in_probing_order():
    props = PropertyTable({"VisualStudioVersion": "12.0"})
    candidates = candidate_tool_paths(props, {"CommonProgramFiles(x86)": SHARED})
    assert candidates == [tool("12.0")] + [tool(v) for v in FALLBACK_TOOL_VERSIONS]


def test_locator_never_raises_on_empty_properties():
    assert locate_transform_tool(PropertyTable(), {}, lambda p: False).endswith(
        os.path.join("14.0", "TextTransform.exe")
    )


def test_uses_real_filesystem_by_default(tmp_path):
    installed = tmp_path / "Microsoft Shared" / "TextTemplating" / "10.0" / "TextTransform.exe"
    installed.parent.mkdir(parents=True)
    installed.write_text("")
    props = PropertyTable({"VisualStudioVersion": "12.0"})
    assert locate_transform_tool(props, {"CommonProgramFiles(x86)": str(tmp_path)}) == str(installed)
