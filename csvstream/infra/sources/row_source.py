from __future__ import annotations

from typing import Iterator

from csvstream.domain.models import ParsedRow
from csvstream.domain.parsing.options import ParserOptions
from csvstream.domain.parsing.row_parser import RowParser
from csvstream.infra.sources.character_reader import CharacterReader


class CsvRowSource:
    """
    Назначение/ответственность:
        CSV-источник поверх RowParser: открывает файл, гоняет цикл read_row()
        и отдаёт ParsedRow с номером записи и строкой файла, на которой она началась.
    Взаимодействия:
        Файл закрывается при любом выходе из итерации, в том числе при CsvFormatError.
    """

    def __init__(self, path: str, encoding: str = "utf-8-sig", options: ParserOptions | None = None) -> None:
        self.path = path
        self.encoding = encoding
        self.options = options or ParserOptions()

    def __iter__(self) -> Iterator[ParsedRow]:
        with CharacterReader(self.path, encoding=self.encoding) as reader:
            parser = RowParser(reader, self.options)
            while True:
                start = parser.position
                fields = parser.read_row()
                if fields is None:
                    return
                yield ParsedRow(row_no=start.row, line_no=start.line, fields=fields)
