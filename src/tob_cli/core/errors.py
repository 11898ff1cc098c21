"""Error types raised by the transform-on-build pipeline."""


class TransformError(Exception):
    """Base class for every failure that aborts a transform run."""


class ProjectModelError(TransformError):
    """The project file is missing or cannot be understood."""


class ToolNotFoundError(TransformError):
    """The resolved transform executable does not exist on disk."""

    def __init__(self, tool_path: str):
        self.tool_path = tool_path
        super().__init__(f"Failed to find TextTransform.exe tool at '{tool_path}'.")


class UnresolvedPropertyError(TransformError):
    """A $(Name) token referenced a property that has no value."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not resolve property $({name})")


class ToolExecutionError(TransformError):
    """The transform executable failed for a template."""

    def __init__(self, template_path: str, exit_code: int = None, reason: str = None):
        self.template_path = template_path
        self.exit_code = exit_code
        if reason is None:
            reason = f"exit code {exit_code}"
        super().__init__(f"Transformation of '{template_path}' failed ({reason})")


class FileSystemError(TransformError):
    """A backup, restore or attribute operation on a template failed."""

    def __init__(self, path: str, operation: str, detail: str = ""):
        self.path = path
        self.operation = operation
        message = f"Could not {operation} '{path}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
