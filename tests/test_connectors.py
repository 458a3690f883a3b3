"""Tests for row sources."""

import json

import pandas as pd
import pytest

from company_search.connectors import (
    BatchTableSource,
    DelimitedTextSource,
    RowSourceFactory,
    split_delimited_line,
)
from company_search.connectors import registry
from company_search.connectors.base import dedupe_labels
from company_search.exceptions import CorpusAccessError, ParseError


def test_split_respects_quotes_and_trims():
    assert split_delimited_line('Acme, "Pune, MH" ,Active') == [
        "Acme",
        "Pune, MH",
        "Active",
    ]
    assert split_delimited_line("a,,b,") == ["a", "", "b", ""]
    assert split_delimited_line("") == [""]


def test_split_does_not_understand_escaped_quotes():
    # "" closes and reopens the quoted region, so the quotes vanish
    assert split_delimited_line('"Acme ""Best"" Corp",X') == ["Acme Best Corp", "X"]


def test_dedupe_labels():
    assert dedupe_labels(["Name", "CIN", "Name", "Name"]) == [
        "Name",
        "CIN",
        "Name.1",
        "Name.2",
    ]


def test_delimited_source_rows(data_dir, write_csv):
    path = write_csv(
        data_dir / "c.csv",
        [
            "Name,CIN,State",
            "Acme Corp,CIN123,MH",
            "",
            "Short Row",
            'Quoted, "Inc, Ltd",X,Y,extra',
        ],
    )
    source = DelimitedTextSource(path)

    rows = list(source.iter_rows())

    assert source.columns == ["Name", "CIN", "State"]
    assert len(rows) == 4
    assert rows[0] == {"Name": "Acme Corp", "CIN": "CIN123", "State": "MH"}
    assert rows[1] == {"Name": "", "CIN": "", "State": ""}
    assert rows[2] == {"Name": "Short Row", "CIN": "", "State": ""}
    assert rows[3] == {"Name": "Quoted", "CIN": "Inc, Ltd", "State": "X"}


def test_delimited_source_handles_crlf_and_bom(data_dir):
    path = data_dir / "win.csv"
    path.write_bytes("\ufeffName,CIN\r\nAcme,C1\r\n".encode("utf-8"))

    source = DelimitedTextSource(path)

    assert list(source.iter_rows()) == [{"Name": "Acme", "CIN": "C1"}]
    assert source.columns == ["Name", "CIN"]


def test_delimited_source_empty_file(data_dir):
    path = data_dir / "empty.csv"
    path.write_text("", encoding="utf-8")

    source = DelimitedTextSource(path)

    assert list(source.iter_rows()) == []
    assert source.columns == []


def test_delimited_source_missing_file(data_dir):
    source = DelimitedTextSource(data_dir / "missing.csv")

    with pytest.raises(CorpusAccessError):
        list(source.iter_rows())


def test_batch_source_json(data_dir):
    path = data_dir / "companies.json"
    path.write_text(
        json.dumps(
            [
                {"CompanyName": "Gamma Ltd", "CIN": "C789", "Capital": 1000},
                {"CompanyName": None, "CIN": "C000", "Capital": 5},
            ]
        ),
        encoding="utf-8",
    )
    source = BatchTableSource(path)

    rows = list(source.iter_rows())

    assert source.columns == ["CompanyName", "CIN", "Capital"]
    assert rows[0] == {"CompanyName": "Gamma Ltd", "CIN": "C789", "Capital": "1000"}
    assert rows[1]["CompanyName"] == ""


def test_batch_source_xlsx_first_sheet_only(data_dir):
    path = data_dir / "companies.xlsx"
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame(
            {"Company Name": ["Delta Inc", "Echo Co"], "State": ["KA", None]}
        ).to_excel(writer, sheet_name="First", index=False)
        pd.DataFrame({"Company Name": ["Hidden"]}).to_excel(
            writer, sheet_name="Second", index=False
        )

    rows = list(BatchTableSource(path).iter_rows())

    assert rows == [
        {"Company Name": "Delta Inc", "State": "KA"},
        {"Company Name": "Echo Co", "State": ""},
    ]


def test_batch_source_parse_error(data_dir):
    path = data_dir / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ParseError):
        list(BatchTableSource(path).iter_rows())


def test_batch_source_missing_file(data_dir):
    with pytest.raises(CorpusAccessError):
        list(BatchTableSource(data_dir / "gone.xlsx").iter_rows())


def test_factory_picks_backend(data_dir):
    assert isinstance(RowSourceFactory.open(data_dir / "a.csv"), DelimitedTextSource)
    assert isinstance(RowSourceFactory.open(data_dir / "a.xlsx"), BatchTableSource)
    assert isinstance(RowSourceFactory.open(data_dir / "a.xls"), BatchTableSource)
    assert isinstance(RowSourceFactory.open(data_dir / "a.json"), BatchTableSource)
    assert not RowSourceFactory.is_supported(data_dir / "notes.txt")

    with pytest.raises(ValueError):
        RowSourceFactory.open(data_dir / "notes.txt")


def test_batch_source_json_keeps_sparse_integers(data_dir):
    path = data_dir / "sparse.json"
    path.write_text(
        json.dumps(
            [
                {"Name": "A", "CIN": 123456, "Phone": 9876543210},
                {"Name": "B", "CIN": 654321},
                {"Name": "C", "Rating": 4.5, "Listed": True},
            ]
        ),
        encoding="utf-8",
    )

    rows = list(BatchTableSource(path).iter_rows())

    assert rows[0]["Phone"] == "9876543210"
    assert rows[1]["Phone"] == ""
    assert rows[1]["CIN"] == "654321"
    assert rows[2]["Rating"] == "4.5"
    assert rows[2]["CIN"] == ""


@pytest.mark.parametrize("content", ['{"Name": "A"}', "[1, 2]", '["A", "B"]'])
def test_batch_source_json_must_be_records(data_dir, content):
    path = data_dir / "odd.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ParseError):
        list(BatchTableSource(path).iter_rows())


def test_register_source_extends_factory(data_dir, monkeypatch):
    monkeypatch.setattr(registry, "SOURCE_REGISTRY", dict(registry.SOURCE_REGISTRY))

    class PipeSource(DelimitedTextSource):
        pass

    RowSourceFactory.register_source("psv", PipeSource)

    assert ".psv" in RowSourceFactory.list_extensions()
    assert RowSourceFactory.list_extensions() == sorted(RowSourceFactory.list_extensions())
    assert isinstance(RowSourceFactory.open(data_dir / "a.psv"), PipeSource)
    assert RowSourceFactory.is_supported(data_dir / "b.psv")

    with pytest.raises(TypeError):
        RowSourceFactory.register_source(".txt", dict)
