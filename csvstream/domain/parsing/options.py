from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserOptions:
    """
    Назначение:
        Политики парсера для спорных случаев входа.

    Поля:
        keep_quoted_cr: bool
            Сохранять CR внутри полей в кавычках. По умолчанию CR отбрасывается
            во всех состояниях, включая кавычки.
        emit_dangling_row: bool
            Отдавать последнюю запись без завершающего перевода строки.
            По умолчанию такая запись отбрасывается и возвращается конец потока.
    """

    keep_quoted_cr: bool = False
    emit_dangling_row: bool = False
