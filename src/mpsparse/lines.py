"""Line-level cursor over MPS text and classification of non-data lines."""

from dataclasses import dataclass
from enum import Enum, auto

from mpsparse.document import Location
from mpsparse.errors import PREVIEW_LENGTH, ParseError

MARKER = "'MARKER'"


class LineKind(Enum):
    """Outcome of :func:`classify`."""

    DATA = auto()
    COMMENT = auto()
    BLANK = auto()
    MARKER = auto()


def classify(line: str) -> LineKind:
    """Tell comment, blank and marker lines apart from everything else.

    >>> classify("* a comment")
    <LineKind.COMMENT: 2>
    >>> classify("   \\t")
    <LineKind.BLANK: 3>
    >>> classify("    MARKER                 'MARKER'                 'INTORG'")
    <LineKind.MARKER: 4>
    >>> classify(" N  COST")
    <LineKind.DATA: 1>
    """
    if line.startswith("*"):
        return LineKind.COMMENT
    if not line or line.isspace():
        return LineKind.BLANK
    if MARKER in line.split():
        return LineKind.MARKER
    return LineKind.DATA


def is_noise(line: str) -> bool:
    """Comment and blank lines carry no data anywhere in a file."""
    return classify(line) in {LineKind.COMMENT, LineKind.BLANK}


def is_indented(line: str) -> bool:
    """Data records start with whitespace, section headers do not."""
    return line[:1].isspace()


@dataclass(frozen=True, slots=True)
class Span:
    """Unconsumed remainder of an MPS text.

    Section parsers take a span and return the records they read together
    with the span that follows them, so lookahead never consumes input.
    """

    text: str
    offset: int = 0
    line: int = 1
    located: bool = False

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def _end_of_line(self) -> int:
        end = self.text.find("\n", self.offset)
        return len(self.text) if end < 0 else end

    def peek(self) -> str | None:
        """Next line without its LF or CRLF terminator, ``None`` at the end."""
        if self.at_end:
            return None
        end = self._end_of_line()
        if end > self.offset and self.text[end - 1] == "\r":
            end -= 1
        return self.text[self.offset : end]  # noqa: E203

    def advance(self) -> "Span":
        """Span starting after the next line terminator."""
        end = self._end_of_line()
        return Span(self.text, min(end + 1, len(self.text)), self.line + 1, self.located)

    def skip_noise(self) -> "Span":
        """Drop leading comment and blank lines."""
        span = self
        while (line := span.peek()) is not None and is_noise(line):
            span = span.advance()
        return span

    def location(self) -> Location | None:
        """Provenance of the next line when location tracking is enabled."""
        if not self.located:
            return None
        line = self.peek() or ""
        return Location(self.line, len(line) - len(line.lstrip()) + 1)

    def preview(self) -> str:
        """Bounded excerpt of the unconsumed input."""
        return self.text[self.offset : self.offset + PREVIEW_LENGTH]  # noqa: E203

    def error(self, message: str) -> ParseError:
        """Build a :class:`ParseError` pointing at the next line."""
        return ParseError(message, line=self.line, preview=self.preview())
