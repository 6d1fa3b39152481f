from csvstream.domain.error_codes import ErrorCode
from csvstream.domain.exceptions import CsvFormatError, ParserStateError
from csvstream.domain.models import CursorPosition, ParsedRow
from csvstream.domain.parsing import ParserOptions, ParseState, RowParser
from csvstream.infra.sources.character_reader import CharacterReader
from csvstream.infra.sources.row_source import CsvRowSource

__all__ = [
    "CharacterReader",
    "CsvFormatError",
    "CsvRowSource",
    "CursorPosition",
    "ErrorCode",
    "ParsedRow",
    "ParserOptions",
    "ParserStateError",
    "ParseState",
    "RowParser",
]
