from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from csvstream.domain.error_codes import ErrorCode
from csvstream.domain.models import CursorPosition


@dataclass(eq=False)
class CsvFormatError(Exception):
    """
    Назначение:
        Нарушение формата CSV в конкретной позиции входа.
    Инварианты/гарантии:
        - position содержит все четыре счётчика (line, column, row, field)
          на момент чтения символа, вызвавшего ошибку.
        - После этой ошибки парсер непригоден для дальнейшего чтения.
    """

    position: CursorPosition
    code: ErrorCode

    def __post_init__(self) -> None:
        super().__init__(str(self))

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def row(self) -> int:
        return self.position.row

    @property
    def field(self) -> int:
        return self.position.field

    def __str__(self) -> str:
        p = self.position
        return (
            f"CSV format error at line {p.line}, column {p.column} "
            f"(row {p.row}, field {p.field}): {self.code.description}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": str(self),
            "position": self.position.to_dict(),
        }


class ParserStateError(RuntimeError):
    """
    Назначение:
        Повторное чтение из парсера после фатальной ошибки потока.
    """


__all__ = ["CsvFormatError", "ParserStateError"]
