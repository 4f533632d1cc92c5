# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=use-implicit-booleaness-not-comparison,protected-access,missing-docstring

import unittest

from seqfeat.common.ftable.tokeniser import (
    Token,
    Tokeniser,
    TokenTypes,
    tokenise,
)


def types_of(text):
    return [token.type for token in tokenise(text)]


class TestTokenTypes(unittest.TestCase):
    def test_str(self):
        assert str(TokenTypes.COMPLEMENT) == "complement"
        assert repr(TokenTypes.RIGHTP) == "rightp"

    def test_position_parts(self):
        for part in [TokenTypes.POSITION, TokenTypes.FUZZY, TokenTypes.SEPARATOR]:
            assert part.is_position_part()
        for other in [TokenTypes.COMMA, TokenTypes.JOIN, TokenTypes.TEXT]:
            assert not other.is_position_part()


class TestToken(unittest.TestCase):
    def test_immutable(self):
        token = Token(TokenTypes.COMMA, ",")
        assert token.type == TokenTypes.COMMA
        assert token.text == ","
        with self.assertRaises(AttributeError):
            token.text = "x"

    def test_equality(self):
        assert Token(TokenTypes.COMMA, ",") == Token(TokenTypes.COMMA, ",")
        assert Token(TokenTypes.COMMA, ",") != Token(TokenTypes.OTHER, ",")
        assert len({Token(TokenTypes.COMMA, ","), Token(TokenTypes.COMMA, ",")}) == 1

    def test_bad_type(self):
        with self.assertRaisesRegex(TypeError, "token type"):
            Token(6, "12")

    def test_repr(self):
        assert repr(Token(TokenTypes.POSITION, "12")) == "Token(position, '12')"


class TestTokeniser(unittest.TestCase):
    def test_simple_range(self):
        tokens = tokenise("1..38")
        assert tokens == [
            Token(TokenTypes.POSITION, "1"),
            Token(TokenTypes.SEPARATOR, ".."),
            Token(TokenTypes.POSITION, "38"),
        ]

    def test_compound(self):
        assert types_of("join(1..38,complement(1200..1349))") == [
            TokenTypes.JOIN,
            TokenTypes.POSITION, TokenTypes.SEPARATOR, TokenTypes.POSITION,
            TokenTypes.COMMA,
            TokenTypes.COMPLEMENT,
            TokenTypes.POSITION, TokenTypes.SEPARATOR, TokenTypes.POSITION,
            TokenTypes.RIGHTP,
            TokenTypes.RIGHTP,
        ]

    def test_order_is_join(self):
        assert tokenise("order(1..5)")[0] == Token(TokenTypes.JOIN, "order(")

    def test_fuzzy_before_position(self):
        tokens = tokenise("(1760.1765)..1780")
        assert tokens[0] == Token(TokenTypes.FUZZY, "(1760.1765)")
        assert tokens[1].type == TokenTypes.SEPARATOR
        # without parentheses, still fuzzy
        assert tokenise("12.34") == [Token(TokenTypes.FUZZY, "12.34")]

    def test_fuzzy_leaves_closing_parenthesis(self):
        assert tokenise("complement(12.34)") == [
            Token(TokenTypes.COMPLEMENT, "complement("),
            Token(TokenTypes.FUZZY, "12.34"),
            Token(TokenTypes.RIGHTP, ")"),
        ]
        assert types_of("join(1..5,(12.34))")[-2:] == [TokenTypes.FUZZY, TokenTypes.RIGHTP]

    def test_truncated_fuzzy(self):
        assert tokenise("<(1.50)") == [Token(TokenTypes.FUZZY, "<(1.50)")]
        assert tokenise("<>(1.50)") == [Token(TokenTypes.FUZZY, "<>(1.50)")]

    def test_truncation_markers(self):
        assert tokenise("<>5") == [Token(TokenTypes.POSITION, "<>5")]
        assert tokenise("<1")[0] == Token(TokenTypes.POSITION, "<1")
        assert tokenise(">2100")[0] == Token(TokenTypes.POSITION, ">2100")
        assert tokenise("2100>")[0] == Token(TokenTypes.POSITION, "2100>")

    def test_separators(self):
        assert tokenise("20^39")[1] == Token(TokenTypes.SEPARATOR, "^")
        assert tokenise("5. .9")[1] == Token(TokenTypes.SEPARATOR, ". .")
        assert tokenise("<5.9")[1] == Token(TokenTypes.SEPARATOR, ".")

    def test_qualifiers(self):
        assert types_of('/note="a ""b"" c"') == [
            TokenTypes.SLASH, TokenTypes.TEXT, TokenTypes.EQUALS, TokenTypes.DQUOTE,
        ]

    def test_other(self):
        # unrecognised characters aren't lost
        tokens = tokenise("1..2#")
        assert tokens[-1] == Token(TokenTypes.OTHER, "#")

    def test_remote(self):
        assert TokenTypes.COLON in types_of("J00194.1:100..202")

    def test_newline(self):
        assert TokenTypes.NEWLINE in types_of("1..2,\n3..4")

    def test_iteration_on_demand(self):
        tokeniser = Tokeniser().tokenise("1..2")
        assert tokeniser.position == 0
        assert tokeniser.next_token() == Token(TokenTypes.POSITION, "1")
        assert tokeniser.position == 1
        assert tokeniser.next_token().type == TokenTypes.SEPARATOR
        assert tokeniser.next_token().type == TokenTypes.POSITION
        assert tokeniser.next_token() is None
        # resetting starts again
        assert len(list(tokeniser.tokenise("3"))) == 1

    def test_empty(self):
        assert tokenise("") == []

    def test_custom_rules(self):
        rules = [(TokenTypes.POSITION, r"\d+"), (TokenTypes.TEXT, r"[a-z]+")]
        assert types_of_custom("abc12", rules) == [TokenTypes.TEXT, TokenTypes.POSITION]
        # and without a catch-all, unknown text is an error
        with self.assertRaisesRegex(ValueError, "no tokenising rule"):
            tokenise("abc!", rules)

    def test_no_rules(self):
        with self.assertRaisesRegex(ValueError, "at least one"):
            Tokeniser([])

    def test_non_string(self):
        with self.assertRaises(TypeError):
            Tokeniser().tokenise(5)


def types_of_custom(text, rules):
    return [token.type for token in tokenise(text, rules)]
