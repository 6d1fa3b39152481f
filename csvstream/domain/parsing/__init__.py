from .options import ParserOptions
from .row_parser import ParseState, RowParser

__all__ = [
    "ParserOptions",
    "ParseState",
    "RowParser",
]
