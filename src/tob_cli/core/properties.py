"""Property lookup and two-phase expansion over a property snapshot."""

import os
import re
from typing import Mapping

from .errors import UnresolvedPropertyError


PROPERTY_TOKEN_PATTERN = re.compile(r'\$\((?P<name>.+?)\)')


class PropertyResolver:
    """Resolves build properties and expands ``$(Name)`` tokens."""

    def __init__(self, properties: Mapping):
        """Initialize the resolver.

        Args:
            properties: Read-only property snapshot (name -> value)
        """
        self.properties = properties

    def get(self, name: str, required: bool = False) -> str:
        """Look up a property value.

        Args:
            name: Property name (case-sensitive)
            required: Raise instead of returning an empty string when missing

        Returns:
            str: The property value, or "" when absent and not required

        Raises:
            UnresolvedPropertyError: If ``required`` and the property is absent
        """
        if name in self.properties:
            return self.properties[name]
        if required:
            raise UnresolvedPropertyError(name)
        return ""

    def expand(self, text: str) -> str:
        """Expand environment variables, then ``$(Name)`` property tokens.

        The environment pass runs first so values may still carry property
        tokens for the second pass. Substituted values are not re-scanned.
        """
        result = os.path.expandvars(text)
        return PROPERTY_TOKEN_PATTERN.sub(
            lambda m: self.get(m.group('name'), required=True), result
        )
