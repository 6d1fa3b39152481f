from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Таксономия причин, по которым чтение CSV завершилось ошибкой.
    """

    BARE_QUOTE = "BARE_QUOTE"
    CHAR_AFTER_QUOTE = "CHAR_AFTER_QUOTE"
    EMPTY_SOURCE = "EMPTY_SOURCE"
    UNTERMINATED_QUOTE = "UNTERMINATED_QUOTE"
    READ_ERROR = "READ_ERROR"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorCode.BARE_QUOTE: "unexpected double quote inside an unquoted field",
    ErrorCode.CHAR_AFTER_QUOTE: "only a comma or a line break may follow a closing quote",
    ErrorCode.EMPTY_SOURCE: "source is empty",
    ErrorCode.UNTERMINATED_QUOTE: "end of input inside a quoted field",
    ErrorCode.READ_ERROR: "failed to read from source",
}
