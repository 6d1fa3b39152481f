from __future__ import annotations

import io
from typing import TextIO

from csvstream.domain.ports.sources import EOF


class CharacterReader:
    """
    Назначение/ответственность:
        Посимвольное чтение текстового файла или уже открытого текстового потока.
    Взаимодействия:
        Реализует CharacterSource для RowParser.
    Инварианты/гарантии:
        - read() возвращает ровно один символ либо EOF; после EOF продолжает возвращать EOF.
        - Переводы строк не транслируются (newline=""), CR доходит до парсера.
        - close() идемпотентен; поток, переданный снаружи, закрывается только при owns_stream=True.
    """

    def __init__(self, path: str, encoding: str = "utf-8-sig") -> None:
        self.path = path
        self._stream: TextIO | None = open(path, "r", encoding=encoding, newline="")
        self._owns_stream = True

    @classmethod
    def from_stream(cls, stream: TextIO, owns_stream: bool = False) -> "CharacterReader":
        reader = cls.__new__(cls)
        reader.path = getattr(stream, "name", None)
        reader._stream = stream
        reader._owns_stream = owns_stream
        return reader

    @classmethod
    def from_text(cls, text: str) -> "CharacterReader":
        return cls.from_stream(io.StringIO(text, newline=""), owns_stream=True)

    @property
    def closed(self) -> bool:
        return self._stream is None

    def read(self) -> str:
        if self._stream is None:
            raise ValueError("I/O operation on closed CharacterReader")
        return self._stream.read(1) or EOF

    def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        if self._owns_stream:
            stream.close()

    def __enter__(self) -> "CharacterReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
