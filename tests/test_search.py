"""Tests for matching and detail resolution."""

import pytest

from company_search.core.indexer import IndexBuilder
from company_search.core.models import IndexRecord
from company_search.core.search import SearchEngine


class ExplodingRecords:
    """Record sequence that fails the test if it is ever scanned."""

    def __iter__(self):
        raise AssertionError("index was accessed")

    def __len__(self):
        raise AssertionError("index was accessed")


def _record(name, source_file="a.csv", offset=0, identifier=""):
    return IndexRecord(
        name_lower=name.lower(),
        identifier=identifier,
        region="",
        status="",
        source_file=source_file,
        row_offset=offset,
        display_name=name,
    )


@pytest.fixture
def engine(config, data_dir):
    return SearchEngine(data_dir, config=config)


@pytest.mark.parametrize("query", ["", "a", None])
def test_short_query_does_not_touch_index(engine, query):
    assert engine.search(query, ExplodingRecords()) == []


def test_match_on_name_and_identifier(engine):
    records = [
        _record("Acme Corp", offset=0, identifier="U111"),
        _record("Beta LLC", offset=1, identifier="acme-ref"),
        _record("Gamma", offset=2, identifier="U222"),
    ]

    assert engine.match("ACME", records) == records[:2]
    assert engine.match("u222", records) == [records[2]]
    assert engine.match("zz", records) == []


def test_match_cap_keeps_first_in_index_order(engine):
    records = [_record(f"Shared Name {i}", offset=i) for i in range(60)]

    matches = engine.match("shared", records)

    assert len(matches) == 50
    assert matches == records[:50]


def test_group_by_file_preserves_first_match_order():
    matches = [
        _record("x", "b.csv", 5),
        _record("x", "a.csv", 1),
        _record("x", "b.csv", 2),
    ]

    groups = SearchEngine.group_by_file(matches)

    assert list(groups) == ["b.csv", "a.csv"]
    assert groups["b.csv"] == {2, 5}


def test_resolve_returns_file_order_and_all_columns(engine, data_dir, write_csv):
    write_csv(
        data_dir / "b.csv",
        ["Name,CIN,State,Status,Email", "Zeta,Z1,KA,Active,z@x", "Omega,O1,MH,Struck Off,o@x"],
    )
    write_csv(data_dir / "a.csv", ["Name,CIN", "Alpha,A1"])

    rows = engine.resolve({"b.csv": {1, 0}, "a.csv": {0}})

    assert [row.id for row in rows] == ["b.csv-0", "b.csv-1", "a.csv-0"]
    assert rows[1].to_dict() == {
        "id": "b.csv-1",
        "name": "Omega",
        "state": "MH",
        "cin": "O1",
        "status": "Struck Off",
        "Name": "Omega",
        "CIN": "O1",
        "State": "MH",
        "Status": "Struck Off",
        "Email": "o@x",
    }


def test_resolve_skips_unreadable_files(engine, data_dir, write_csv):
    write_csv(data_dir / "a.csv", ["Name", "Alpha"])

    rows = engine.resolve({"gone.csv": {0}, "a.csv": {0}, "odd.txt": {0}})

    assert [row.name for row in rows] == ["Alpha"]


def test_search_end_to_end(config, sample_corpus):
    engine = SearchEngine(sample_corpus, config=config)
    records = IndexBuilder(config).build(sample_corpus)

    rows = engine.search("acme", records)

    assert len(rows) == 1
    result = rows[0].to_dict()
    assert result["name"] == "Acme Corp"
    assert result["cin"] == "CIN123"
    assert result["state"] == "MH"
    assert result["status"] == "Active"
    assert engine.search("zz", records) == []


def test_search_results_follow_scan_cap_across_files(config, data_dir, write_csv):
    write_csv(
        data_dir / "a.csv",
        ["Name"] + [f"Widget {i}" for i in range(30)],
    )
    write_csv(
        data_dir / "b.csv",
        ["Name"] + [f"Widget B{i}" for i in range(30)],
    )
    engine = SearchEngine(data_dir, config=config)
    records = IndexBuilder(config).build(data_dir)

    rows = engine.search("widget", records)

    assert len(rows) == 50
    assert [row.source_file for row in rows].count("a.csv") == 30
    assert rows[-1].name == "Widget B19"


def test_snapshot_and_rescan_give_identical_matches(config, data_dir, write_csv, tmp_path):
    write_csv(
        data_dir / "mixed.csv",
        ["CompanyName,CIN,CompanyStateCode", "Acme Corp,U1,MH", ",U2,KA", "Acme Two,U3,DL"],
    )
    (data_dir / "more.json").write_text(
        '[{"Company Name": "Acme Three", "CIN": "U4"}]', encoding="utf-8"
    )
    builder = IndexBuilder(config)
    engine = SearchEngine(data_dir, config=config)

    fresh = builder.build(data_dir)
    builder.save_snapshot(fresh, tmp_path / "snap.json")
    reloaded = builder.load_snapshot(tmp_path / "snap.json")

    for query in ["acme", "u3", "two", "zz"]:
        assert engine.search(query, reloaded) == engine.search(query, fresh)
    assert [row.id for row in engine.search("acme", reloaded)] == [
        "mixed.csv-0",
        "mixed.csv-2",
        "more.json-0",
    ]
