"""Shared fixtures for transform-on-build tests."""

import stat
import sys
import textwrap

import pytest

from tob_cli import config as tob_config
from tob_cli.models.project import PropertyTable, RunContext, TemplateItem


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user configuration inside the test's temp directory."""
    config_dir = tmp_path / ".tob-cli"
    monkeypatch.setattr(tob_config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(tob_config, "CONFIG_FILE", str(config_dir / "config.json"))
    return config_dir


@pytest.fixture
def fake_tool(tmp_path):
    """Create an executable stand-in for TextTransform.exe.

    The tool copies the template it receives into ``seen/<name>``, writes the
    configured lines to stdout/stderr and exits with ``exit_code``.
    """
    def _make(exit_code=0, stdout_lines=(), stderr_lines=(), extra_code="", name="TextTransform.exe"):
        seen_dir = tmp_path / "seen"
        seen_dir.mkdir(exist_ok=True)
        tool_path = tmp_path / "tools" / name
        tool_path.parent.mkdir(parents=True, exist_ok=True)
        body = [
            f"#!{sys.executable}",
            "import os, shutil, sys",
            "template = sys.argv[1]",
            f"shutil.copyfile(template, os.path.join({str(seen_dir)!r}, os.path.basename(template)))",
            f"for line in {list(stdout_lines)!r}:",
            "    print(line, flush=True)",
            f"for line in {list(stderr_lines)!r}:",
            "    print(line, file=sys.stderr, flush=True)",
            textwrap.dedent(extra_code),
            f"sys.exit({exit_code})",
        ]
        tool_path.write_text("\n".join(body) + "\n")
        tool_path.chmod(tool_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return tool_path

    return _make


@pytest.fixture
def seen_dir(tmp_path):
    return tmp_path / "seen"


@pytest.fixture
def make_template(tmp_path):
    """Write a template file under ``templates/`` and return its path."""
    def _make(name, content, read_only=False):
        path = tmp_path / "templates" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        if read_only:
            path.chmod(stat.S_IMODE(path.stat().st_mode) & ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH))
        return path

    return _make


@pytest.fixture
def make_context():
    """Build a RunContext directly from paths and properties."""
    def _make(paths, tool_path, properties=None):
        return RunContext(
            properties=PropertyTable(properties or {}),
            items=tuple(TemplateItem(path=str(p)) for p in paths),
            tool_path=str(tool_path),
        )

    return _make
