"""Models for the transform-on-build project data structures."""

from .project import (
    BackupRecord,
    ItemRecord,
    ProjectModelProvider,
    PropertyTable,
    RunContext,
    TemplateItem,
    YamlProjectModel,
    is_template_item,
    select_template_items,
)

__all__ = [
    "BackupRecord",
    "ItemRecord",
    "ProjectModelProvider",
    "PropertyTable",
    "RunContext",
    "TemplateItem",
    "YamlProjectModel",
    "is_template_item",
    "select_template_items",
]
