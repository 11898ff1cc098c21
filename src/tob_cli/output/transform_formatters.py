"""CLI output formatters for transform runs."""

from typing import List, Sequence

from rich.console import Console
from rich.text import Text


class TransformRunFormatter:
    """Formats run progress lines for the console."""

    def __init__(self, use_color: bool = True):
        """Initialize formatter.

        Args:
            use_color: Whether to use colors and rich formatting.
        """
        self.use_color = use_color
        self.console = Console() if self.use_color else None

    def format_run_header(self, tool_path: str, template_count: int) -> List[str]:
        """Format the run header with the resolved tool.

        Args:
            tool_path: Resolved transform executable
            template_count: Number of templates selected for transformation

        Returns:
            List of formatted lines
        """
        noun = "template" if template_count == 1 else "templates"
        lines = [self._styled(f"🚀 Transforming {template_count} {noun}", "cyan bold")]
        lines.append(self._styled(f"└─ Tool: {tool_path}", "dim"))
        return lines

    def format_directive_changes(self, changes: Sequence) -> List[str]:
        """Format the directive values rewritten before invoking the tool.

        Args:
            changes: DirectiveChange entries for one template

        Returns:
            List of formatted lines
        """
        if not changes:
            return []

        lines = []
        for change in changes:
            lines.append(self._styled(
                f"├─ line {change.line}: {change.original} → {change.expanded}", "dim"
            ))
        lines[-1] = lines[-1].replace("├─", "└─")
        return lines

    def format_template_error(self, error_msg: str) -> List[str]:
        """Format a failed transformation result.

        Args:
            error_msg: Error description, possibly multi-line

        Returns:
            List of formatted lines
        """
        lines = [self._styled("✗ Transformation failed, template restored", "red bold")]
        for line in error_msg.split('\n'):
            if line.strip():
                lines.append(self._styled(f"  {line}", "red"))
        return lines

    def format_run_summary(self, processed: int, total: int, success: bool) -> List[str]:
        """Format the final run summary."""
        if success:
            return [self._styled(f"✨ {processed}/{total} templates transformed", "green bold")]
        return [self._styled(f"✗ Transform run failed after {processed}/{total} templates", "red bold")]

    def _styled(self, text: str, style: str) -> str:
        """Apply styling to text."""
        if self.use_color and self.console:
            styled_text = Text(text)
            styled_text.style = style
            with self.console.capture() as capture:
                self.console.print(styled_text, end="")
            return capture.get()
        return text
