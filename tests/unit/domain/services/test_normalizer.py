from __future__ import annotations

import pytest

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.exceptions.errors import DataIntegrityError
from edgar_relay.domain.services.normalizer import (
    aggregate_company_facts,
    filter_facts,
    flatten_units,
    history_file_names,
    pivot_columns,
    rank_frame,
    recent_filings,
)
from edgar_relay.domain.value_objects.query_options import QueryOptions

FACTS = [
    {"end": "2021-12-31", "val": 1, "accn": "a", "form": "10-K", "fy": 2021},
    {"end": "2022-12-31", "val": 2, "accn": "b", "form": "10-K", "fy": 2022},
    {"end": "2023-06-30", "val": 3, "accn": "c", "form": "10-Q", "fy": 2023},
    {"end": "2023-12-31", "val": 4, "accn": "d", "form": "10-K", "fy": 2023},
]


# --------------------------------------------------------------------------- #
# Pivot                                                                        #
# --------------------------------------------------------------------------- #


def test_pivot_aligns_records_by_index_and_converts_boolean_columns() -> None:
    rows = pivot_columns(
        {
            "accessionNumber": ["x1", "x2", "x3"],
            "form": ["10-K", "10-Q", "8-K"],
            "isXBRL": [1, 0, 1],
            "isInlineXBRL": [0, 0, 1],
        }
    )

    assert len(rows) == 3
    assert rows[1] == {"accessionNumber": "x2", "form": "10-Q", "isXBRL": False, "isInlineXBRL": False}
    assert rows[2]["isXBRL"] is True
    assert rows[2]["isInlineXBRL"] is True


def test_pivot_keeps_non_boolean_integers() -> None:
    rows = pivot_columns({"size": [0, 1, 12345]})
    assert [r["size"] for r in rows] == [0, 1, 12345]


def test_pivot_rejects_mismatched_lengths() -> None:
    with pytest.raises(DataIntegrityError) as excinfo:
        pivot_columns({"form": ["10-K", "10-Q"], "filingDate": ["2023-01-01"]})
    assert excinfo.value.details["lengths"] == {"form": 2, "filingDate": 1}


def test_pivot_rejects_non_array_column() -> None:
    with pytest.raises(DataIntegrityError):
        pivot_columns({"form": "10-K"})


def test_pivot_of_empty_columns_is_empty() -> None:
    assert pivot_columns({}) == []
    assert pivot_columns({"form": []}) == []


def test_recent_filings_and_history_names() -> None:
    payload = {
        "filings": {
            "recent": {"form": ["10-K"], "isXBRL": [1]},
            "files": [{"name": "CIK0000000001-submissions-001.json"}, {"nope": 1}, "junk"],
        }
    }
    assert recent_filings(payload) == [{"form": "10-K", "isXBRL": True}]
    assert history_file_names(payload) == ["CIK0000000001-submissions-001.json"]
    assert recent_filings({}) == []
    assert history_file_names({}) == []


def test_recent_filings_rejects_non_object_section() -> None:
    with pytest.raises(DataIntegrityError):
        recent_filings({"filings": {"recent": [1, 2, 3]}})


# --------------------------------------------------------------------------- #
# Facts                                                                        #
# --------------------------------------------------------------------------- #


def test_date_window_is_inclusive_on_both_bounds() -> None:
    options = QueryOptions(start_date="2022-12-31", end_date="2023-06-30")
    kept = filter_facts(FACTS, options)
    assert [f["val"] for f in kept] == [2, 3]


def test_latest_only_keeps_greatest_end_date() -> None:
    kept = filter_facts(FACTS, QueryOptions(latest_only=True))
    assert kept == [FACTS[3]]


def test_latest_only_applies_after_window() -> None:
    options = QueryOptions(end_date="2023-01-01", latest_only=True)
    assert [f["val"] for f in filter_facts(FACTS, options)] == [2]


def test_latest_only_tie_keeps_first_seen() -> None:
    facts = [{"end": "2023-12-31", "val": "first"}, {"end": "2023-12-31", "val": "second"}]
    assert filter_facts(facts, QueryOptions(latest_only=True))[0]["val"] == "first"


def test_facts_without_end_or_wrong_shape_are_skipped() -> None:
    facts = [{"val": 1}, "junk", {"end": "2020-01-01", "val": 2}]
    assert filter_facts(facts, QueryOptions()) == [{"end": "2020-01-01", "val": 2}]
    assert filter_facts(None, QueryOptions()) == []


def test_brief_mode_projects_fact_fields() -> None:
    kept = filter_facts(FACTS[:1], QueryOptions(mode=OutputMode.BRIEF))
    assert kept == [{"end": "2021-12-31", "val": 1, "accn": "a", "form": "10-K"}]


def test_flatten_units_filters_units_and_drops_empty() -> None:
    units = {"USD": FACTS, "shares": [{"end": "2010-01-01", "val": 9}]}
    options = QueryOptions(start_date="2020-01-01")
    assert set(flatten_units(units, options)) == {"USD"}
    assert flatten_units(units, QueryOptions(units=frozenset({"shares"}))) == {
        "shares": [{"end": "2010-01-01", "val": 9}]
    }


def test_aggregate_company_facts_applies_allow_lists_and_mode() -> None:
    facts = {
        "us-gaap": {
            "Revenues": {"label": "Revenues", "description": "d", "units": {"USD": FACTS}},
            "Assets": {"label": "Assets", "units": {"USD": FACTS}},
        },
        "dei": {"EntityCommonStockSharesOutstanding": {"units": {"shares": FACTS}}},
    }

    full = aggregate_company_facts(
        facts,
        QueryOptions(taxonomies=frozenset({"us-gaap"}), tags=frozenset({"Revenues"}), latest_only=True),
    )
    assert list(full) == ["us-gaap"]
    assert list(full["us-gaap"]) == ["Revenues"]
    assert full["us-gaap"]["Revenues"]["label"] == "Revenues"
    assert full["us-gaap"]["Revenues"]["units"]["USD"] == [FACTS[3]]

    brief = aggregate_company_facts(facts, QueryOptions(mode=OutputMode.BRIEF))
    assert "label" not in brief["us-gaap"]["Assets"]
    assert set(brief) == {"us-gaap", "dei"}


def test_aggregate_omits_empty_tags_and_taxonomies() -> None:
    facts = {"us-gaap": {"Revenues": {"units": {"USD": FACTS}}}}
    assert aggregate_company_facts(facts, QueryOptions(start_date="2030-01-01")) == {}


# --------------------------------------------------------------------------- #
# Frames                                                                       #
# --------------------------------------------------------------------------- #

FRAME_DATA = [
    {"cik": 1, "entityName": "A", "val": 5, "end": "2023-03-31", "accn": "1"},
    {"cik": 2, "entityName": "B", "val": 30, "end": "2023-03-31", "accn": "2"},
    {"cik": 3, "entityName": "C", "val": 10, "end": "2023-03-31", "accn": "3"},
    {"cik": 4, "entityName": "D", "val": None, "end": "2023-03-31", "accn": "4"},
]


def test_rank_frame_orders_by_value_desc_and_truncates() -> None:
    total, rows = rank_frame(FRAME_DATA, QueryOptions(top_n=2))
    assert total == 4
    assert [r["val"] for r in rows] == [30, 10]
    assert rows[0]["cik"] == "0000000002"


def test_rank_frame_puts_missing_values_last() -> None:
    _, rows = rank_frame(FRAME_DATA, QueryOptions(top_n=10))
    assert [r["val"] for r in rows] == [30, 10, 5, None]


def test_rank_frame_orders_integers_beyond_float_range() -> None:
    data = [{"cik": 1, "val": 5}, {"cik": 2, "val": 10**400}, {"cik": 3, "val": 2.5}]
    _, rows = rank_frame(data, QueryOptions(top_n=3))
    assert [r["cik"] for r in rows] == ["0000000002", "0000000001", "0000000003"]


def test_rank_frame_is_stable_for_equal_values() -> None:
    data = [{"cik": 1, "val": 7}, {"cik": 2, "val": 7}, {"cik": 3, "val": 7}]
    _, rows = rank_frame(data, QueryOptions(top_n=3))
    assert [r["cik"] for r in rows] == ["0000000001", "0000000002", "0000000003"]


def test_rank_frame_cik_filter_and_brief_mode() -> None:
    total, rows = rank_frame(
        FRAME_DATA,
        QueryOptions(top_n=5, mode=OutputMode.BRIEF),
        ciks=frozenset({"0000000001", "0000000003"}),
    )
    assert total == 2
    assert rows == [
        {"cik": "0000000003", "entityName": "C", "val": 10, "end": "2023-03-31"},
        {"cik": "0000000001", "entityName": "A", "val": 5, "end": "2023-03-31"},
    ]
