"""Tests for directive rewriting and template encodings."""

import codecs

import pytest

from tob_cli.core.errors import UnresolvedPropertyError
from tob_cli.core.properties import PropertyResolver
from tob_cli.core.rewriter import DirectiveRewriter, TemplateEncoding, detect_encoding
from tob_cli.models.project import PropertyTable


@pytest.fixture
def rewriter():
    return DirectiveRewriter(PropertyResolver(PropertyTable({
        "OutDir": "bin\\Debug\\",
        "SolutionDir": "C:\\src\\app\\",
    })))


class TestRewriteText:
    def test_assembly_directive_example(self, rewriter):
        text = '<#@ assembly name="$(OutDir)MyLib.dll" #>\n'
        assert rewriter.rewrite(text) == '<#@ assembly name="bin\\Debug\\MyLib.dll" #>\n'

    def test_include_directive(self, rewriter):
        text = '<#@ include file="$(SolutionDir)Shared.ttinclude" #>'
        assert rewriter.rewrite(text) == '<#@ include file="C:\\src\\app\\Shared.ttinclude" #>'

    def test_case_insensitive_and_flexible_whitespace(self, rewriter):
        text = '<#@Assembly   Name = "$(OutDir)a.dll" #>\n<#@  INCLUDE file="$(OutDir)b.t4" #>'
        assert rewriter.rewrite(text) == (
            '<#@Assembly   Name = "bin\\Debug\\a.dll" #>\n<#@  INCLUDE file="bin\\Debug\\b.t4" #>'
        )

    def test_other_directives_untouched(self, rewriter):
        text = (
            '<#@ template language="C#" hostspecific="$(OutDir)" #>\n'
            '<#@ import namespace="$(OutDir)" #>\n'
            'Output $(OutDir) text\n'
        )
        assert rewriter.rewrite(text) == text

    def test_line_terminators_preserved(self, rewriter):
        text = 'a\r\n<#@ assembly name="$(OutDir)x.dll" #>\r\nb\n\rc'
        assert rewriter.rewrite(text) == 'a\r\n<#@ assembly name="bin\\Debug\\x.dll" #>\r\nb\n\rc'

    def test_value_does_not_span_lines(self, rewriter):
        text = '<#@ assembly name="$(OutDir)\n" #>'
        assert rewriter.rewrite(text) == text

    def test_changes_report_line_numbers(self, rewriter):
        text = 'first\n<#@ assembly name="System.Core" #>\n<#@ assembly name="$(OutDir)x.dll" #>\n'
        _, changes = rewriter.rewrite_text(text)
        assert len(changes) == 1
        assert changes[0].line == 3
        assert changes[0].original == "$(OutDir)x.dll"
        assert changes[0].expanded == "bin\\Debug\\x.dll"

    def test_unresolved_property_raises(self, rewriter):
        with pytest.raises(UnresolvedPropertyError):
            rewriter.rewrite('<#@ include file="$(Missing)x.tt" #>')


class TestEncoding:
    @pytest.mark.parametrize("bom,codec", [
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
        (codecs.BOM_UTF32_LE, "utf-32-le"),
        (codecs.BOM_UTF32_BE, "utf-32-be"),
    ])
    def test_detects_byte_order_mark(self, tmp_path, bom, codec):
        path = tmp_path / "t.tt"
        path.write_bytes(bom + "<#@ template #>\n".encode(codec))
        assert detect_encoding(str(path)) == TemplateEncoding(codec=codec, bom=bom)

    def test_defaults_to_utf8_without_bom(self, tmp_path):
        path = tmp_path / "t.tt"
        path.write_bytes(b"plain\n")
        assert detect_encoding(str(path)) == TemplateEncoding(codec="utf-8")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "t.tt"
        path.write_bytes(b"")
        assert detect_encoding(str(path)).bom == b""


class TestRewriteFile:
    @pytest.mark.parametrize("bom,codec", [
        (b"", "utf-8"),
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
    ])
    def test_keeps_encoding_and_bom(self, tmp_path, rewriter, bom, codec):
        path = tmp_path / "t.tt"
        path.write_bytes(bom + '<#@ assembly name="$(OutDir)x.dll" #>\r\nÜber\r\n'.encode(codec))

        rewriter.rewrite_file(str(path))

        expected = bom + '<#@ assembly name="bin\\Debug\\x.dll" #>\r\nÜber\r\n'.encode(codec)
        assert path.read_bytes() == expected

    def test_undecodable_bytes_survive(self, tmp_path, rewriter):
        path = tmp_path / "t.tt"
        original = b'<#@ include file="$(OutDir)a.t4" #>\n\xff\xfe latin \xe9\n'
        path.write_bytes(original)

        rewriter.rewrite_file(str(path))

        assert path.read_bytes() == original.replace(b"$(OutDir)", b"bin\\Debug\\")

    def test_file_without_directives_is_byte_identical(self, tmp_path, rewriter):
        path = tmp_path / "t.tt"
        original = codecs.BOM_UTF8 + b"no directives\r\n"
        path.write_bytes(original)

        assert rewriter.rewrite_file(str(path)) == []
        assert path.read_bytes() == original
