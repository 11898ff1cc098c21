"""Backup, rewrite, transform and restore cycle over a project's templates."""

import os
import shutil
import stat
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Optional

from .errors import FileSystemError, ToolExecutionError, ToolNotFoundError, TransformError
from .process_runner import ProcessRunner
from .properties import PropertyResolver
from .rewriter import DirectiveRewriter
from .tool_locator import locate_transform_tool
from ..models.project import (
    BackupRecord,
    ProjectModelProvider,
    PropertyTable,
    RunContext,
    TemplateItem,
    select_template_items,
)
from ..output.log_sink import Importance, LogSink


BACKUP_SUFFIX = ".bak_clarius"


def backup_path_for(template_path: str) -> str:
    """Return the backup location used while ``template_path`` is mutated."""
    return template_path + BACKUP_SUFFIX


def create_run_context(provider: ProjectModelProvider, overrides: Optional[Mapping] = None,
                       environ: Optional[Mapping] = None,
                       exists: Optional[Callable[[str], bool]] = None) -> RunContext:
    """Snapshot properties and items from ``provider`` and resolve the tool once.

    Args:
        provider: Host project model
        overrides: Property values layered over the project's own
        environ: Environment used for tool resolution, defaults to ``os.environ``
        exists: Existence predicate used while probing tool locations

    Returns:
        RunContext: Immutable run-scoped values
    """
    properties = PropertyTable(provider.properties()).with_overrides(overrides)
    return RunContext(
        properties=properties,
        items=select_template_items(provider.items()),
        tool_path=locate_transform_tool(properties, environ=environ, exists=exists),
    )


def take_backup(item: TemplateItem) -> BackupRecord:
    """Make ``item`` writable and copy its bytes next to it.

    Raises:
        FileSystemError: If attributes cannot be read or changed, or the copy fails
    """
    path = item.path
    backup_path = backup_path_for(path)

    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except OSError as e:
        raise FileSystemError(path, "read attributes of", str(e)) from e

    was_read_only = not (mode & stat.S_IWRITE)
    try:
        if was_read_only:
            os.chmod(path, mode | stat.S_IWRITE)
        if os.path.exists(backup_path):
            # stale backup from an interrupted run
            os.chmod(backup_path, stat.S_IMODE(os.stat(backup_path).st_mode) | stat.S_IWRITE)
        shutil.copyfile(path, backup_path)
    except OSError as e:
        error = FileSystemError(path, "back up", str(e))
        if was_read_only:
            try:
                os.chmod(path, mode)
            except OSError as chmod_error:
                raise error from chmod_error
        raise error from e

    return BackupRecord(
        original_path=path,
        backup_path=backup_path,
        was_read_only=was_read_only,
        original_mode=mode,
    )


def restore_backup(record: BackupRecord):
    """Copy the backup over the template, delete it and reapply read-only.

    Read-only is reapplied even when the copy or delete fails.

    Raises:
        FileSystemError: If any step fails; nothing is retried
    """
    failure = None
    try:
        shutil.copyfile(record.backup_path, record.original_path)
        os.remove(record.backup_path)
    except OSError as e:
        failure = e

    if record.was_read_only:
        try:
            os.chmod(record.original_path, record.original_mode)
        except OSError as e:
            failure = failure or e

    if failure is not None:
        raise FileSystemError(record.original_path, "restore", str(failure)) from failure


@contextmanager
def scoped_template_mutation(item: TemplateItem) -> Iterator[BackupRecord]:
    """Back up ``item`` for the duration of the block and always restore it."""
    record = take_backup(item)
    try:
        yield record
    finally:
        restore_backup(record)


@dataclass
class RunResult:
    """Outcome of a transform run."""
    success: bool
    processed: int
    total: int
    failed_item: Optional[TemplateItem] = None
    error: Optional[TransformError] = None


class TransformOrchestrator:
    """Drives every selected template through backup, rewrite, transform and restore."""

    def __init__(self, context: RunContext, log: LogSink, runner: ProcessRunner = None):
        """Initialize the orchestrator.

        Args:
            context: Run-scoped properties, items and tool path
            log: Sink for progress messages and tool output
            runner: Process runner, defaults to one for ``context.tool_path``
        """
        self.context = context
        self.log = log
        self.runner = runner or ProcessRunner(context.tool_path, log)
        self.rewriter = DirectiveRewriter(PropertyResolver(context.properties))

    def ensure_tool_exists(self):
        """Raise ToolNotFoundError unless the resolved tool is present."""
        if not os.path.isfile(self.context.tool_path):
            raise ToolNotFoundError(self.context.tool_path)

    def transform_item(self, item: TemplateItem) -> float:
        """Run one template through the full mutation cycle.

        Returns:
            float: Seconds spent in the transform tool

        Raises:
            ToolExecutionError: If the tool exits non-zero (after restore)
            UnresolvedPropertyError: If a directive references a missing property
            FileSystemError: If backup or restore fails
        """
        with scoped_template_mutation(item):
            for change in self.rewriter.rewrite_file(item.path):
                self.log.message(
                    f"  line {change.line}: {change.original} -> {change.expanded}", Importance.LOW
                )

            start_time = time.time()
            exit_code = self.runner.run(item.path)
            elapsed = time.time() - start_time

            if exit_code != 0:
                raise ToolExecutionError(item.path, exit_code)
        return elapsed

    def execute(self) -> RunResult:
        """Transform every selected template, stopping at the first failure.

        Returns:
            RunResult: ``success`` is True only if the tool was found and every
            template transformed with exit code 0
        """
        items = self.context.items
        processed = 0
        current = None
        try:
            self.ensure_tool_exists()
            for index, current in enumerate(items, start=1):
                self.log.message(f"Transforming template {index}/{len(items)}: {current.path}", Importance.HIGH)
                elapsed = self.transform_item(current)
                self.log.message(f"Transformed {current.path} ({elapsed:.2f}s)", Importance.LOW)
                processed += 1
        except TransformError as e:
            self.log.error(str(e))
            return RunResult(success=False, processed=processed, total=len(items),
                             failed_item=current, error=e)

        return RunResult(success=True, processed=processed, total=len(items))
