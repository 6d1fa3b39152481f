from __future__ import annotations

from typing import Iterable, Protocol

from csvstream.domain.models import ParsedRow

EOF = ""


class CharacterSource(Protocol):
    """
    Назначение/ответственность:
        Последовательный источник символов для парсера строк.
    Взаимодействия:
        Потребляется RowParser; жизненным циклом источника управляет вызывающий код.
    """

    def read(self) -> str:
        """
        Контракт:
            Возвращает ровно один символ либо EOF (пустую строку) по окончании данных.
            Ошибки чтения пробрасываются как OSError.
        """
        ...

    def close(self) -> None:
        """
        Контракт:
            Освобождает ресурс; повторный вызов безопасен.
        """
        ...


class RowSource(Protocol):
    """
    Назначение/ответственность:
        Источник ParsedRow для use-case'ов чтения/проверки.
    """

    def __iter__(self) -> Iterable[ParsedRow]:
        ...
