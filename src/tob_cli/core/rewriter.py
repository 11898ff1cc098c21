"""Rewriting of assembly and include directives inside text templates."""

import codecs
import re
from dataclasses import dataclass
from typing import List, Tuple

from .properties import PropertyResolver


# <#@ assembly name="..." and <#@ include file="..." (value must stay on one line)
DIRECTIVE_PATTERN = re.compile(
    r'(?P<head><#@\s*(?:assembly\s+name|include\s+file)\s*=\s*")(?P<value>.*?)(?P<tail>")',
    re.IGNORECASE,
)

# Longest marks first so UTF-32 LE is not mistaken for UTF-16 LE
_BYTE_ORDER_MARKS = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


@dataclass(frozen=True)
class TemplateEncoding:
    """Text encoding of a template, including its byte-order mark."""
    codec: str
    bom: bytes = b""

    @property
    def errors(self) -> str:
        # surrogateescape keeps undecodable bytes of BOM-less files intact
        return "surrogateescape" if self.codec == "utf-8" else "strict"

    def decode(self, data: bytes) -> str:
        if self.bom and data.startswith(self.bom):
            data = data[len(self.bom):]
        return data.decode(self.codec, self.errors)

    def encode(self, text: str) -> bytes:
        return self.bom + text.encode(self.codec, self.errors)


@dataclass(frozen=True)
class DirectiveChange:
    """A directive value that expansion changed."""
    line: int
    original: str
    expanded: str


def detect_encoding(path: str) -> TemplateEncoding:
    """Determine a template's encoding from its first line.

    Files without a recognised byte-order mark are treated as UTF-8.
    """
    with open(path, 'rb') as f:
        first_line = f.readline()

    for bom, codec in _BYTE_ORDER_MARKS:
        if first_line.startswith(bom):
            return TemplateEncoding(codec=codec, bom=bom)
    return TemplateEncoding(codec="utf-8")


class DirectiveRewriter:
    """Expands property and environment references in template directives."""

    def __init__(self, resolver: PropertyResolver):
        self.resolver = resolver

    def rewrite_text(self, template: str) -> Tuple[str, List[DirectiveChange]]:
        """Rewrite directive values in ``template``.

        Args:
            template: Full template text

        Returns:
            Tuple of (rewritten_text, changes) where ``changes`` lists every
            directive whose value was altered by expansion
        """
        changes = []

        def replace(match):
            value = match.group('value')
            expanded = self.resolver.expand(value)
            if expanded != value:
                line = template.count('\n', 0, match.start()) + 1
                changes.append(DirectiveChange(line=line, original=value, expanded=expanded))
            return match.group('head') + expanded + match.group('tail')

        return DIRECTIVE_PATTERN.sub(replace, template), changes

    def rewrite(self, template: str) -> str:
        """Return ``template`` with every directive value expanded."""
        return self.rewrite_text(template)[0]

    def rewrite_file(self, path: str) -> List[DirectiveChange]:
        """Rewrite a template in place, keeping its encoding and byte-order mark.

        Returns:
            List of directive changes that were written
        """
        encoding = detect_encoding(path)
        with open(path, 'rb') as f:
            template = encoding.decode(f.read())

        rewritten, changes = self.rewrite_text(template)

        with open(path, 'wb') as f:
            f.write(encoding.encode(rewritten))
        return changes
