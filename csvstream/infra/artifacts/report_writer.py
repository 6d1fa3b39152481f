from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any

from csvstream.common.time import getNowIso


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные отчёта запуска команды.
    """
    run_id: str
    command: str
    started_at: str
    finished_at: str | None = None
    duration_ms: int | None = None
    csv_path: str | None = None
    log_file: str | None = None
    report_dir: str | None = None
    config_sources: list[str] = field(default_factory=list)


@dataclass
class ReportSummary:
    """
    Назначение:
        Сводные счётчики чтения CSV.

    Поля:
        rows: int
            Сколько записей прочитано до конца потока или до ошибки.
        fields: int
            Суммарное число полей в прочитанных записях.
        failed: int
            1, если чтение прервано ошибкой формата или ввода-вывода.
    """
    rows: int = 0
    fields: int = 0
    failed: int = 0


@dataclass
class Report:
    meta: ReportMeta
    summary: ReportSummary
    error: dict[str, Any] | None = None


def createEmptyReport(runId: str, command: str, configSources: list[str]) -> Report:
    """
    Назначение:
        Создаёт пустой отчёт-скелет для команды.
    """
    meta = ReportMeta(
        run_id=runId,
        command=command,
        started_at=getNowIso(),
        config_sources=configSources or [],
    )
    return Report(meta=meta, summary=ReportSummary())


def finalizeReport(report: Report, durationMs: int, logFile: str | None, reportDir: str) -> None:
    report.meta.finished_at = getNowIso()
    report.meta.duration_ms = durationMs
    report.meta.log_file = logFile
    report.meta.report_dir = reportDir


def writeReportJson(report: Report, reportDir: str, fileBaseName: str) -> str:
    """
    Назначение:
        Записывает report.json на диск.

    Входные данные:
        report: Report
        reportDir: str
        fileBaseName: str
            Например: "report_read_<runId>"

    Выходные данные:
        str
            Полный путь к созданному файлу.
    """
    Path(reportDir).mkdir(parents=True, exist_ok=True)
    reportPath = str(Path(reportDir) / f"{fileBaseName}.json")

    data: dict[str, Any] = {
        "meta": asdict(report.meta),
        "summary": asdict(report.summary),
        "error": report.error,
    }

    with open(reportPath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return reportPath
