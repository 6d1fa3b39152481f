from __future__ import annotations

import logging
import time
from pathlib import Path

import typer

from csvstream.common.run_id import generate_run_id
from csvstream.common.time import getDurationMs
from csvstream.config.config import Settings, loadSettings
from csvstream.domain.error_codes import ErrorCode
from csvstream.domain.exceptions import CsvFormatError
from csvstream.domain.models import ParsedRow
from csvstream.domain.parsing.options import ParserOptions
from csvstream.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from csvstream.infra.logging.setup import closeCommandLogger, createCommandLogger, logEvent
from csvstream.infra.sources.row_source import CsvRowSource
from csvstream.usecases.read_rows_usecase import ReadRowsUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)

def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)

def requireCsv(csvPath: str | None) -> None:
    """
    Назначение:
        Базовая проверка наличия CSV-файла.

    Поведение:
        - Если csvPath не задан или файл не существует — завершает процесс с exit code 2.
    """
    if not csvPath:
        typer.echo("ERROR: CSV path is required", err=True)
        raise typer.Exit(code=2)

    p = Path(csvPath)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: CSV file not found: {csvPath}", err=True)
        raise typer.Exit(code=2)

def formatRow(fields: list[str]) -> str:
    return str(fields)

def buildParserOptions(settings: Settings, keepQuotedCr: bool | None, emitDanglingRow: bool | None) -> ParserOptions:
    """
    Назначение:
        Собирает ParserOptions: флаги команды перекрывают итоговые настройки.
    """
    return ParserOptions(
        keep_quoted_cr=keepQuotedCr if keepQuotedCr is not None else settings.keep_quoted_cr,
        emit_dangling_row=emitDanglingRow if emitDanglingRow is not None else settings.emit_dangling_row,
    )

def runWithReport(
    ctx: typer.Context,
    commandName: str,
    csvPath: str | None,
    runner,
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - проверяет наличие CSV
        - гарантирует запись отчёта в finally

    Поведение:
        - Отсутствующий CSV: ошибка в лог и report, exit code 2.
        - Иначе exit code берётся из runner(logger, report).
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )

    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    report.meta.csv_path = csvPath

    exitCode: int | None = None

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        logEvent(
            logger,
            logging.INFO,
            runId,
            "config",
            f"csv={csvPath} encoding={settings.encoding} keep_quoted_cr={settings.keep_quoted_cr} "
            f"emit_dangling_row={settings.emit_dangling_row} sources={sources}",
        )

        try:
            requireCsv(csvPath)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "csv", "CSV is missing or not accessible")
            report.summary.failed = 1
            report.error = {"code": ErrorCode.READ_ERROR.value, "message": f"CSV file not found: {csvPath}"}
            exitCode = 2
            return

        exitCode = runner(logger, report)

    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(
            report=report,
            durationMs=durationMs,
            logFile=logFilePath,
            reportDir=settings.report_dir,
        )
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeCommandLogger(logger)

        if exitCode is not None:
            raise typer.Exit(code=exitCode)

def runReadCommand(
    ctx: typer.Context,
    commandName: str,
    csvPath: str,
    encoding: str | None,
    keepQuotedCr: bool | None,
    emitDanglingRow: bool | None,
    printRows: bool,
) -> None:
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    options = buildParserOptions(settings, keepQuotedCr, emitDanglingRow)

    def printRow(parsed: ParsedRow) -> None:
        typer.echo(formatRow(parsed.fields))

    def execute(logger, report) -> int:
        row_source = CsvRowSource(csvPath, encoding=encoding or settings.encoding, options=options)
        usecase = ReadRowsUseCase(on_row=printRow if printRows else None)
        try:
            code = usecase.run(row_source=row_source, logger=logger, run_id=runId, report=report)
        except CsvFormatError as exc:
            report.summary.failed = 1
            report.error = exc.to_dict()
            logEvent(logger, logging.ERROR, runId, "csv", str(exc))
            typer.echo(f"ERROR: {exc}", err=True)
            return 1
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            report.summary.failed = 1
            report.error = {"code": ErrorCode.READ_ERROR.value, "message": str(exc)}
            logEvent(logger, logging.ERROR, runId, "csv", f"CSV read error: {exc}")
            typer.echo(f"ERROR: CSV read error: {exc}", err=True)
            return 2
        if not printRows:
            typer.echo(f"rows={report.summary.rows} fields={report.summary.fields}")
        return code

    runWithReport(
        ctx=ctx,
        commandName=commandName,
        csvPath=csvPath,
        runner=execute,
    )

@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
    }
    try:
        loaded = loadSettings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }

@app.command()
def read(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to input CSV"),
    encoding: str | None = typer.Option(None, "--encoding", help="Input encoding (default utf-8-sig)"),
    keepQuotedCr: bool | None = typer.Option(
        None, "--keep-quoted-cr/--drop-quoted-cr", help="Keep carriage returns inside quoted fields"
    ),
    emitDanglingRow: bool | None = typer.Option(
        None, "--emit-dangling-row/--drop-dangling-row", help="Return the last row when the file lacks a final newline"
    ),
):
    """
    Print every row of the CSV file.
    """
    runReadCommand(ctx, "read", path, encoding, keepQuotedCr, emitDanglingRow, printRows=True)

@app.command()
def validate(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to input CSV"),
    encoding: str | None = typer.Option(None, "--encoding", help="Input encoding (default utf-8-sig)"),
    keepQuotedCr: bool | None = typer.Option(
        None, "--keep-quoted-cr/--drop-quoted-cr", help="Keep carriage returns inside quoted fields"
    ),
    emitDanglingRow: bool | None = typer.Option(
        None, "--emit-dangling-row/--drop-dangling-row", help="Return the last row when the file lacks a final newline"
    ),
):
    """
    Parse the whole CSV file and print row/field totals.
    """
    runReadCommand(ctx, "validate", path, encoding, keepQuotedCr, emitDanglingRow, printRows=False)
