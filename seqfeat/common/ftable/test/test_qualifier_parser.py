# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=use-implicit-booleaness-not-comparison,protected-access,missing-docstring

import unittest

from seqfeat.common.ftable.errors import QualifierSyntaxError
from seqfeat.common.ftable.qualifier_parser import (
    QualifierParser,
    UNQUOTED_QUALIFIERS,
    parse_qualifiers,
)


class TestQualifierParser(unittest.TestCase):
    def test_empty(self):
        assert len(parse_qualifiers("")) == 0
        assert len(parse_qualifiers("   ")) == 0

    def test_quoted(self):
        qualifiers = parse_qualifiers('/gene="dnaA"')
        assert qualifiers.values("gene") == ["dnaA"]

    def test_multiple(self):
        qualifiers = parse_qualifiers('/gene="dnaA" /locus_tag="ABC_0001" /gene="other"')
        assert qualifiers.values("gene") == ["dnaA", "other"]
        assert qualifiers.values("locus_tag") == ["ABC_0001"]
        assert qualifiers.names() == ["gene", "locus_tag"]

    def test_flag(self):
        qualifiers = parse_qualifiers('/pseudo /gene="x"')
        assert qualifiers.exists("pseudo")
        assert qualifiers.values("pseudo") == []
        assert qualifiers.values("gene") == ["x"]

    def test_flag_last(self):
        qualifiers = parse_qualifiers('/gene="x" /pseudo')
        assert qualifiers.exists("pseudo")

    def test_unquoted(self):
        qualifiers = parse_qualifiers("/codon_start=2 /transl_table=11")
        assert qualifiers.values("codon_start") == ["2"]
        assert qualifiers.values("transl_table") == ["11"]

    def test_unquoted_keeps_quotes(self):
        assert "codon_start" in UNQUOTED_QUALIFIERS
        qualifiers = parse_qualifiers('/codon_start="2"')
        assert qualifiers.values("codon_start") == ['"2"']

    def test_complex_unquoted(self):
        qualifiers = parse_qualifiers("/transl_except=(pos:213..215,aa:Trp)")
        assert qualifiers.values("transl_except") == ["(pos:213..215,aa:Trp)"]

    def test_escaped_quotes(self):
        qualifiers = parse_qualifiers('/note="a ""quoted"" word"')
        assert qualifiers.values("note") == ['a "quoted" word']

    def test_embedded_symbols(self):
        qualifiers = parse_qualifiers('/note="see /gene=x, (1..5)" /gene="y"')
        assert qualifiers.values("note") == ["see /gene=x, (1..5)"]
        assert qualifiers.values("gene") == ["y"]

    def test_whitespace_inside_quotes_kept(self):
        qualifiers = parse_qualifiers('/note="  padded  "  /gene="y"')
        assert qualifiers.values("note") == ["  padded  "]

    def test_joined_lines(self):
        text = '/note="a note long enough to need wrapping across more than one line"'
        assert parse_qualifiers(text).values("note")[0].endswith("more than one line")

    def test_second_equals_in_value(self):
        qualifiers = parse_qualifiers("/label=a=b")
        assert qualifiers.values("label") == ["a=b"]

    def test_empty_value(self):
        qualifiers = parse_qualifiers("/note=")
        assert qualifiers.values("note") == [""]

    def test_missing_slash(self):
        with self.assertRaisesRegex(QualifierSyntaxError, "does not start with"):
            parse_qualifiers('gene="x"')

    def test_missing_name(self):
        with self.assertRaisesRegex(QualifierSyntaxError, "no name"):
            parse_qualifiers('/="x"')

    def test_parser_reuse(self):
        parser = QualifierParser()
        assert parser.parse("/pseudo").exists("pseudo")
        second = parser.parse('/gene="x"')
        assert not second.exists("pseudo")
        assert second.values("gene") == ["x"]
