"""Parse ``git diff`` output into patch, chunk and line records."""

from git_diff.errors import ErrorKind, ParseError, UnrecognizedFormatError
from git_diff.models import Chunk, IndexHeader, Line, Patch
from git_diff.parser import parse, parse_or_raise, stream
from git_diff.paths import ParseOptions

__version__ = "0.6.2"

__all__ = [
    "Chunk",
    "ErrorKind",
    "IndexHeader",
    "Line",
    "ParseError",
    "ParseOptions",
    "Patch",
    "UnrecognizedFormatError",
    "__version__",
    "parse",
    "parse_or_raise",
    "stream",
]
