from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ErrorPosition:
    """1-based (line, column) span of the offending source text."""

    start: Tuple[int, int]
    end: Optional[Tuple[int, int]] = None

    def describe(self):
        if self.end is not None:
            return (
                f"From line {self.start[0]}:{self.start[1]} "
                f"to {self.end[0]}:{self.end[1]}. Found:"
            )
        return f"At line {self.start[0]}:{self.start[1]} Found:"


class CompilerError(Exception):
    """Base class for errors raised while building a machine from source."""

    def __init__(self, message, position, code=""):
        super().__init__(message)
        self.message = message
        self.position = position
        self.code = code

    def message_expected(self):
        return self.message

    def underline(self):
        start_col = self.position.start[1]
        end = self.position.end
        if end is not None and end[0] == self.position.start[0]:
            width = max(1, end[1] - start_col)
        elif end is not None:
            width = max(1, len(self.code) - start_col + 1)
        else:
            width = 1
        return " " * (start_col - 1) + "^" * width

    def render(self):
        """Multi-line diagnostic pointing at the offending source."""
        return "\n".join([
            self.position.describe(),
            f"\t{self.code}",
            f"\t{self.underline()}",
            self.message_expected(),
        ])

    def __str__(self):
        line, col = self.position.start
        return f"{self.message} (line {line}, column {col})"


class ParseError(CompilerError):
    """The grammar could not recognise a construct."""

    def __init__(self, expected, found, position, code=""):
        self.expected = tuple(expected)
        self.found = found
        super().__init__(self._format(self.expected, found), position, code)

    @staticmethod
    def _format(expected, found):
        if not expected:
            return f"Unexpected {found}"
        if len(expected) == 1:
            return f"Expected {expected[0]}, found {found}"
        return f"Expected one of {', '.join(expected)}, found {found}"


class SemanticError(CompilerError):
    """The source parsed but describes an invalid machine."""


@dataclass(frozen=True)
class CompilerWarning:
    """Informational diagnostic attached to a successfully built machine."""

    message: str
    position: Optional[ErrorPosition] = None

    def __str__(self):
        if self.position is None:
            return self.message
        line, col = self.position.start
        return f"{self.message} (line {line}, column {col})"
