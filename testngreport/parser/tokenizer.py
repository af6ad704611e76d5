"""Turn an XML byte stream into a sequence of tokens.

This wraps the expat parser so that it can be pulled from one token at a time instead of
calling back into the code consuming the document. Only the events needed to walk a results
file are reported: start tags, end tags and the contents of CDATA sections.
"""

import collections
import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional
from xml.parsers import expat

from testngreport.filedef import BinaryIORead


# Default number of bytes to feed the XML parser at once
CHUNK_SIZE = 0x10000


class TokenKind(enum.Enum):
    START = 1   # start tag, with attributes
    END = 2     # end tag
    TEXT = 3    # contents of one CDATA section


@dataclass
class Token:
    """One event from the XML document."""

    kind: TokenKind
    name: Optional[str] = None
    attrs: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None


class TokenizeError(Exception):
    """Raised when the document is not well-formed XML."""


class XmlTokenizer:
    """Feeds a byte stream through expat and queues up the resulting tokens.

    Character data outside CDATA sections is only layout whitespace in a results file and is
    not reported.
    """

    def __init__(self, f: BinaryIORead, chunk_size: int = CHUNK_SIZE):
        self.file_obj = f
        self.chunk_size = chunk_size
        self.pending = collections.deque()  # type: collections.deque[Token]
        # Parts of the CDATA section being read, or None when not in one
        self.cdata = None  # type: Optional[list[str]]

        self.parser = expat.ParserCreate()
        self.parser.StartElementHandler = self.handle_start
        self.parser.EndElementHandler = self.handle_end
        self.parser.CharacterDataHandler = self.handle_data
        self.parser.StartCdataSectionHandler = self.handle_cdata_start
        self.parser.EndCdataSectionHandler = self.handle_cdata_end

    def handle_start(self, name: str, attrs: dict[str, str]):
        self.pending.append(Token(TokenKind.START, name, attrs))

    def handle_end(self, name: str):
        self.pending.append(Token(TokenKind.END, name))

    def handle_data(self, data: str):
        if self.cdata is not None:
            self.cdata.append(data)

    def handle_cdata_start(self):
        self.cdata = []

    def handle_cdata_end(self):
        self.pending.append(Token(TokenKind.TEXT, text=''.join(self.cdata)))
        self.cdata = None

    def feed(self, data: bytes, final: bool = False) -> Optional[TokenizeError]:
        """Parse some more of the document.

        An error is returned rather than raised so the tokens queued before it can be drained
        first.
        """
        try:
            self.parser.Parse(data, final)
        except expat.ExpatError as e:
            err = TokenizeError(str(e))
            err.__cause__ = e
            return err
        return None

    def __iter__(self) -> Iterator[Token]:
        final = False
        while not final:
            chunk = self.file_obj.read(self.chunk_size)
            final = not chunk
            err = self.feed(chunk, final)
            while self.pending:
                yield self.pending.popleft()
            if err:
                raise err


def tokenize(f: BinaryIORead, chunk_size: int = CHUNK_SIZE) -> Iterator[Token]:
    """Return the tokens in the XML document read from f.

    Tokens are produced as the document is read, so everything before a syntax error is
    returned before TokenizeError is raised.
    """
    return iter(XmlTokenizer(f, chunk_size))
