"""Test tokenizer."""

import unittest

from .context import testngreport  # noqa: F401
from .util import xml_stream

from testngreport.parser import tokenizer  # noqa: I100
from testngreport.parser.tokenizer import Token, TokenKind


class TestTokenizer(unittest.TestCase):
    """Test tokenizer.tokenize."""

    def test_events(self):
        f = xml_stream('<a x="1">\n  <b><![CDATA[hello]]></b>\n  text\n</a>')
        self.assertEqual([
            Token(TokenKind.START, 'a', {'x': '1'}),
            Token(TokenKind.START, 'b', {}),
            Token(TokenKind.TEXT, text='hello'),
            Token(TokenKind.END, 'b'),
            Token(TokenKind.END, 'a'),
        ], list(tokenizer.tokenize(f)))

    def test_cdata_across_chunks(self):
        """A CDATA section split over many reads is still one token."""
        f = xml_stream('<a><![CDATA[line one\nline two & <three>]]><![CDATA[]]></a>')
        tokens = list(tokenizer.tokenize(f, chunk_size=3))
        self.assertEqual([
            Token(TokenKind.START, 'a', {}),
            Token(TokenKind.TEXT, text='line one\nline two & <three>'),
            Token(TokenKind.TEXT, text=''),
            Token(TokenKind.END, 'a'),
        ], tokens)

    def test_error_after_tokens(self):
        """Tokens before a syntax error are seen before the error is raised."""
        f = xml_stream('<a><b></b><c></a>')
        seen = []
        with self.assertRaises(tokenizer.TokenizeError):
            for token in tokenizer.tokenize(f):
                seen.append(token)
        self.assertEqual([
            Token(TokenKind.START, 'a', {}),
            Token(TokenKind.START, 'b', {}),
            Token(TokenKind.END, 'b'),
            Token(TokenKind.START, 'c', {}),
        ], seen)

    def test_truncated(self):
        f = xml_stream('<a><b>')
        with self.assertRaises(tokenizer.TokenizeError):
            list(tokenizer.tokenize(f))

    def test_empty(self):
        with self.assertRaises(tokenizer.TokenizeError):
            list(tokenizer.tokenize(xml_stream('')))
