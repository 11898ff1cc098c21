"""Launching the transform executable and streaming its output."""

import subprocess
import threading
from typing import IO

from .errors import ToolExecutionError
from ..output.log_sink import Importance, LogSink


class ProcessRunner:
    """Runs the transform tool on one template at a time."""

    def __init__(self, tool_path: str, log: LogSink):
        """Initialize the runner.

        Args:
            tool_path: Path to the transform executable
            log: Sink receiving the tool's output lines
        """
        self.tool_path = tool_path
        self.log = log

    def run(self, template_path: str) -> int:
        """Run the tool with ``template_path`` as its only argument.

        Standard error lines are forwarded at normal importance and standard
        output lines at low importance, as they arrive. Blocks until the
        process exits; there is no timeout.

        Returns:
            int: The tool's exit code

        Raises:
            ToolExecutionError: If the process cannot be started
        """
        try:
            process = subprocess.Popen(
                [self.tool_path, template_path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors='replace',
                bufsize=1,
            )
        except OSError as e:
            raise ToolExecutionError(template_path, reason=f"could not start '{self.tool_path}': {e}") from e

        readers = [
            threading.Thread(target=self._pump, args=(process.stderr, Importance.NORMAL), daemon=True),
            threading.Thread(target=self._pump, args=(process.stdout, Importance.LOW), daemon=True),
        ]
        for reader in readers:
            reader.start()

        exit_code = process.wait()
        for reader in readers:
            reader.join()
        return exit_code

    def _pump(self, stream: IO[str], importance: Importance):
        """Forward every line of ``stream`` to the log sink until EOF."""
        with stream:
            for line in stream:
                self.log.message(line.rstrip('\r\n'), importance)
