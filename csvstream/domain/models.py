from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

Row = List[str]


@dataclass(frozen=True)
class CursorPosition:
    """
    Назначение:
        Снимок счётчиков парсера в момент чтения символа.

    Поля:
        line: int
            Номер строки исходного файла (учитывает переводы строк внутри кавычек).
        column: int
            Номер символа внутри текущего вызова read_row().
        row: int
            Номер CSV-записи.
        field: int
            Номер поля внутри записи.
    """

    line: int
    column: int
    row: int
    field: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "row": self.row,
            "field": self.field,
        }


@dataclass(frozen=True)
class ParsedRow:
    """
    Назначение:
        Запись, прочитанная источником строк, вместе с её координатами.
    """

    row_no: int
    line_no: int
    fields: Row
