from __future__ import annotations

import logging
from typing import Callable

from csvstream.common.sanitize import truncateText
from csvstream.domain.models import ParsedRow
from csvstream.domain.ports.sources import RowSource
from csvstream.infra.logging.setup import logEvent


class ReadRowsUseCase:
    """
    Назначение/ответственность:
        Use-case чтения CSV: цикл по RowSource до конца потока,
        передача каждой записи в on_row и учёт счётчиков в отчёте.
    Взаимодействия:
        CsvFormatError/OSError не перехватываются: поток считается фатально
        испорченным, решение о коде выхода принимает вызывающий код.
        Счётчики отчёта обновляются по мере чтения, поэтому остаются
        корректными и при ошибке посреди файла.
    """

    def __init__(self, on_row: Callable[[ParsedRow], None] | None = None) -> None:
        self.on_row = on_row

    def run(
        self,
        row_source: RowSource,
        logger: logging.Logger,
        run_id: str,
        report,
    ) -> int:
        for parsed in row_source:
            report.summary.rows += 1
            report.summary.fields += len(parsed.fields)
            if logger.isEnabledFor(logging.DEBUG):
                logEvent(
                    logger,
                    logging.DEBUG,
                    run_id,
                    "parser",
                    f"row={parsed.row_no} line={parsed.line_no} fields={len(parsed.fields)} "
                    f"preview={truncateText(repr(parsed.fields))}",
                )
            if self.on_row is not None:
                self.on_row(parsed)

        logEvent(
            logger,
            logging.INFO,
            run_id,
            "parser",
            f"End of stream: rows={report.summary.rows} fields={report.summary.fields}",
        )
        return 0
