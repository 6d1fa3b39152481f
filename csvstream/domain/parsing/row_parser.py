from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterator, List

from csvstream.domain.error_codes import ErrorCode
from csvstream.domain.exceptions import CsvFormatError, ParserStateError
from csvstream.domain.models import CursorPosition, Row
from csvstream.domain.parsing.options import ParserOptions
from csvstream.domain.ports.sources import EOF, CharacterSource

CR = "\r"
LF = "\n"
COMMA = ","
QUOTE = '"'


class ParseState(str, Enum):
    """
    Назначение:
        Состояния конечного автомата разбора одного поля.

    Значения:
        INITIAL
            Начало поля, ничего не прочитано.
        TEXT_DATA
            Внутри поля без кавычек.
        QUOTE
            Внутри поля в кавычках.
        ESCAPE_QUOTE
            Прочитана кавычка внутри поля в кавычках: либо конец поля, либо начало "".
        INNER_QUOTE
            Подтверждена экранированная кавычка "".
    """

    INITIAL = "INITIAL"
    TEXT_DATA = "TEXT_DATA"
    QUOTE = "QUOTE"
    ESCAPE_QUOTE = "ESCAPE_QUOTE"
    INNER_QUOTE = "INNER_QUOTE"


class RowParser:
    """
    Назначение/ответственность:
        Потоковый разбор CSV: за один вызов read_row() читает из CharacterSource
        ровно столько символов, сколько нужно для одной записи.
    Взаимодействия:
        Заимствует CharacterSource и никогда его не закрывает.
    Инварианты/гарантии:
        - column растёт на 1 за каждый прочитанный символ (включая отброшенный CR)
          и сбрасывается в 1 в начале каждого read_row().
        - line растёт на 1 за каждый прочитанный LF, в том числе внутри кавычек.
        - После CsvFormatError или ошибки чтения парсер помечается как сломанный.
    """

    def __init__(self, source: CharacterSource, options: ParserOptions | None = None) -> None:
        self.source = source
        self.options = options or ParserOptions()

        self._line = 1
        self._row = 1
        self._column = 1
        self._field = 1

        self._state = ParseState.INITIAL
        self._buffer: List[str] = []
        self._values: Row = []
        self._started = False
        self._failed = False

        self._handlers: Dict[ParseState, Callable[[str], bool]] = {
            ParseState.INITIAL: self._on_initial,
            ParseState.TEXT_DATA: self._on_text_data,
            ParseState.QUOTE: self._on_quote,
            ParseState.ESCAPE_QUOTE: self._on_escape_quote,
            ParseState.INNER_QUOTE: self._on_inner_quote,
        }

    @property
    def position(self) -> CursorPosition:
        return CursorPosition(line=self._line, column=self._column, row=self._row, field=self._field)

    @property
    def state(self) -> ParseState:
        return self._state

    def __iter__(self) -> Iterator[Row]:
        while True:
            row = self.read_row()
            if row is None:
                return
            yield row

    def read_row(self) -> Row | None:
        """
        Назначение:
            Читает одну CSV-запись.

        Выходные данные:
            list[str] | None
                Поля записи ([""] для пустой строки) или None, если данных больше нет.

        Ошибки:
            CsvFormatError
                Нарушение формата; позиция указывает на символ-нарушитель.
                Пустой поток (ни одного символа) считается нарушением в позиции (1, 1, 1, 1).
            OSError
                Ошибка чтения источника, пробрасывается как есть.
            ParserStateError
                Вызов после фатальной ошибки.
        """
        if self._failed:
            raise ParserStateError("Parser cannot be used after a fatal stream error")

        self._column = 1
        self._field = 1
        self._state = ParseState.INITIAL
        self._values = []
        self._buffer.clear()

        try:
            while True:
                ch = self.source.read()
                if ch == EOF:
                    if not self._started:
                        raise self._violation(ErrorCode.EMPTY_SOURCE)
                    return self._finish_at_eof()
                self._started = True

                if self._handlers[self._state](ch):
                    return self._emit_row()
                self._column += 1
        except (CsvFormatError, OSError, UnicodeDecodeError):
            self._failed = True
            raise

    # state handlers: each returns True when the row is complete

    def _on_initial(self, ch: str) -> bool:
        if ch == CR:
            return False
        if ch == LF:
            self._end_field()
            return True
        if ch == COMMA:
            self._end_field()
            return False
        if ch == QUOTE:
            self._state = ParseState.QUOTE
            return False
        self._buffer.append(ch)
        self._state = ParseState.TEXT_DATA
        return False

    def _on_text_data(self, ch: str) -> bool:
        if ch == CR:
            return False
        if ch == LF:
            self._end_field()
            return True
        if ch == COMMA:
            self._end_field()
            self._state = ParseState.INITIAL
            return False
        if ch == QUOTE:
            raise self._violation(ErrorCode.BARE_QUOTE)
        self._buffer.append(ch)
        return False

    def _on_quote(self, ch: str) -> bool:
        if ch == CR:
            if self.options.keep_quoted_cr:
                self._buffer.append(ch)
            return False
        if ch == LF:
            self._buffer.append(ch)
            self._line += 1
            return False
        if ch == QUOTE:
            self._state = ParseState.ESCAPE_QUOTE
            return False
        self._buffer.append(ch)
        return False

    def _on_escape_quote(self, ch: str) -> bool:
        if ch == CR:
            return False
        if ch == LF:
            self._end_field()
            return True
        if ch == COMMA:
            self._end_field()
            self._state = ParseState.INITIAL
            return False
        if ch == QUOTE:
            # "" confirmed: the same quote is consumed by INNER_QUOTE as a literal
            self._state = ParseState.INNER_QUOTE
            return self._on_inner_quote(ch)
        raise self._violation(ErrorCode.CHAR_AFTER_QUOTE)

    def _on_inner_quote(self, ch: str) -> bool:
        if ch == CR:
            return False
        if ch == LF:
            self._end_field()
            return True
        if ch == COMMA:
            self._end_field()
            self._state = ParseState.INITIAL
            return False
        if ch == QUOTE:
            self._buffer.append(QUOTE)
            self._state = ParseState.QUOTE
            return False
        raise self._violation(ErrorCode.CHAR_AFTER_QUOTE)

    # field/row assembly

    def _end_field(self) -> None:
        self._values.append("".join(self._buffer))
        self._buffer.clear()
        self._field += 1

    def _emit_row(self) -> Row:
        row = self._values
        self._values = []
        self._state = ParseState.INITIAL
        self._line += 1
        self._row += 1
        return row

    def _finish_at_eof(self) -> Row | None:
        has_partial = bool(self._values) or bool(self._buffer) or self._state != ParseState.INITIAL
        if not self.options.emit_dangling_row or not has_partial:
            return None
        if self._state == ParseState.QUOTE:
            raise self._violation(ErrorCode.UNTERMINATED_QUOTE)
        self._end_field()
        row = self._values
        self._values = []
        self._state = ParseState.INITIAL
        self._row += 1
        return row

    def _violation(self, code: ErrorCode) -> CsvFormatError:
        return CsvFormatError(position=self.position, code=code)


__all__ = ["ParseState", "RowParser", "CR", "LF", "COMMA", "QUOTE"]
