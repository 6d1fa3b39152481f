from __future__ import annotations

from pathlib import Path

import pytest

from csvstream.domain.exceptions import CsvFormatError
from csvstream.domain.models import ParsedRow
from csvstream.domain.parsing.options import ParserOptions
from csvstream.infra.sources.character_reader import CharacterReader
from csvstream.infra.sources.row_source import CsvRowSource


def write_csv(path: Path, text: str) -> Path:
    path.write_bytes(text.encode("utf-8"))
    return path


def test_row_source_yields_rows_with_start_line(tmp_path: Path):
    csv_path = write_csv(tmp_path / "in.csv", 'a\n"x\ny"\nb\n')

    rows = list(CsvRowSource(str(csv_path)))

    assert rows == [
        ParsedRow(row_no=1, line_no=1, fields=["a"]),
        ParsedRow(row_no=2, line_no=2, fields=["x\ny"]),
        ParsedRow(row_no=3, line_no=4, fields=["b"]),
    ]


def test_row_source_passes_options(tmp_path: Path):
    csv_path = write_csv(tmp_path / "in.csv", "a,b\nc,d")

    assert [r.fields for r in CsvRowSource(str(csv_path))] == [["a", "b"]]
    assert [r.fields for r in CsvRowSource(str(csv_path), options=ParserOptions(emit_dangling_row=True))] == [
        ["a", "b"],
        ["c", "d"],
    ]


def test_row_source_raises_format_error_after_good_rows(tmp_path: Path):
    csv_path = write_csv(tmp_path / "in.csv", 'ok,1\nbad"x,2\n')
    seen = []

    with pytest.raises(CsvFormatError) as excinfo:
        for row in CsvRowSource(str(csv_path)):
            seen.append(row.fields)

    assert seen == [["ok", "1"]]
    assert excinfo.value.position.row == 2
    assert excinfo.value.position.column == 4


def test_row_source_can_be_iterated_twice(tmp_path: Path):
    csv_path = write_csv(tmp_path / "in.csv", "a\nb\n")
    source = CsvRowSource(str(csv_path))
    assert list(source) == list(source)


@pytest.fixture
def close_calls(monkeypatch):
    calls = []
    original_close = CharacterReader.close

    def recording_close(self):
        calls.append(self.path)
        original_close(self)

    monkeypatch.setattr(CharacterReader, "close", recording_close)
    return calls


def test_row_source_closes_file_after_format_error(tmp_path: Path, close_calls):
    csv_path = write_csv(tmp_path / "in.csv", 'ok\nbad"\n')

    with pytest.raises(CsvFormatError):
        list(CsvRowSource(str(csv_path)))

    assert close_calls == [str(csv_path)]


def test_row_source_closes_file_when_iteration_stops_early(tmp_path: Path, close_calls):
    csv_path = write_csv(tmp_path / "in.csv", "a\nb\nc\n")
    rows = iter(CsvRowSource(str(csv_path)))

    assert next(rows).fields == ["a"]
    assert close_calls == []

    rows.close()

    assert close_calls == [str(csv_path)]


def test_row_source_closes_file_at_end_of_stream(tmp_path: Path, close_calls):
    csv_path = write_csv(tmp_path / "in.csv", "a\n")

    assert [r.fields for r in CsvRowSource(str(csv_path))] == [["a"]]
    assert close_calls == [str(csv_path)]
