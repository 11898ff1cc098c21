"""Project model: template items, property snapshot and run-scoped state."""

import os
import stat
import yaml
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..core.errors import ProjectModelError


DEFAULT_PROJECT_FILE = "tob.yml"

# Item types and generator name that mark a file for transformation
TEMPLATE_ITEM_TYPES = ("none", "content")
TEMPLATE_GENERATOR = "TextTemplatingFileGenerator"


def is_read_only_file(path: str) -> bool:
    """Return True when the file at ``path`` carries no owner write permission.

    On Windows ``os.stat`` maps the read-only attribute onto ``S_IWRITE``, so
    the same check covers both platforms.
    """
    return not (os.stat(path).st_mode & stat.S_IWRITE)


@dataclass(frozen=True)
class ItemRecord:
    """Raw item as exposed by the host project model."""
    item_type: str
    full_path: str
    generator: str = ""


@dataclass(frozen=True)
class TemplateItem:
    """A file slated for transformation."""
    path: str

    @property
    def is_read_only(self) -> bool:
        return is_read_only_file(self.path)


def is_template_item(record: ItemRecord) -> bool:
    """Check whether an item is marked for generation by the template generator."""
    return (
        (record.item_type or "").casefold() in TEMPLATE_ITEM_TYPES
        and (record.generator or "").casefold() == TEMPLATE_GENERATOR.casefold()
    )


def select_template_items(records: Iterable[ItemRecord]) -> Tuple[TemplateItem, ...]:
    """Filter project items down to the templates to transform, keeping order."""
    return tuple(TemplateItem(path=r.full_path) for r in records if is_template_item(r))


class PropertyTable(Mapping):
    """Immutable name -> value snapshot of build properties."""

    def __init__(self, values: Optional[Mapping] = None):
        self._values: Dict[str, str] = {}
        for name, value in (values or {}).items():
            self._values[str(name)] = "" if value is None else str(value)

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertyTable({self._values!r})"

    def with_overrides(self, overrides: Optional[Mapping]) -> "PropertyTable":
        """Return a new table with ``overrides`` layered over these values."""
        if not overrides:
            return self
        merged = dict(self._values)
        merged.update(overrides)
        return PropertyTable(merged)


@dataclass(frozen=True)
class BackupRecord:
    """Shadow copy of one template taken right before it is mutated."""
    original_path: str
    backup_path: str
    was_read_only: bool
    original_mode: int


@dataclass(frozen=True)
class RunContext:
    """Run-scoped values resolved once and handed to every component."""
    properties: PropertyTable
    items: Tuple[TemplateItem, ...]
    tool_path: str


class ProjectModelProvider(ABC):
    """Read-only view of the host build's items and properties."""

    @abstractmethod
    def items(self) -> List[ItemRecord]:
        """Return every project item, in project order."""

    @abstractmethod
    def properties(self) -> Mapping:
        """Return the evaluated build properties."""


@dataclass
class YamlProjectModel(ProjectModelProvider):
    """Project model backed by a ``tob.yml`` file.

    Item paths are resolved relative to the directory holding the file.
    """
    project_path: Path
    item_records: List[ItemRecord] = field(default_factory=list)
    property_values: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_file(cls, project_path) -> "YamlProjectModel":
        """Load a project model from a YAML project file.

        Args:
            project_path: Path to the project file

        Returns:
            YamlProjectModel: Loaded model

        Raises:
            ProjectModelError: If the file is missing or malformed
        """
        project_path = Path(project_path)
        if not project_path.exists():
            raise ProjectModelError(f"Project file not found: {project_path}")

        try:
            with open(project_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProjectModelError(f"Invalid YAML format in {project_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProjectModelError(f"{project_path.name} must contain a YAML object, got {type(data).__name__}")

        properties = data.get('properties') or {}
        if not isinstance(properties, dict):
            raise ProjectModelError("'properties' must be a mapping of name to value")

        raw_items = data.get('items') or []
        if not isinstance(raw_items, list):
            raise ProjectModelError("'items' must be a list")

        base_dir = project_path.resolve().parent
        records = []
        for index, raw in enumerate(raw_items):
            if not isinstance(raw, dict) or not raw.get('path'):
                raise ProjectModelError(f"Item #{index + 1} must be a mapping with a 'path'")
            full_path = (base_dir / str(raw['path'])).resolve()
            records.append(ItemRecord(
                item_type=str(raw.get('type', 'None')),
                full_path=str(full_path),
                generator=str(raw.get('generator') or ''),
            ))

        return cls(
            project_path=project_path,
            item_records=records,
            property_values={str(k): ("" if v is None else str(v)) for k, v in properties.items()},
        )

    def items(self) -> List[ItemRecord]:
        return list(self.item_records)

    def properties(self) -> Dict[str, str]:
        return dict(self.property_values)
