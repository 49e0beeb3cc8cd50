from __future__ import annotations

import pytest

from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.domain.value_objects.query_options import MAX_PAGE_SIZE, QueryOptions, split_csv


def test_split_csv_strips_and_drops_empty_fragments() -> None:
    assert split_csv(" USD, ,USD/shares,") == frozenset({"USD", "USD/shares"})
    assert split_csv(None) == frozenset()
    assert split_csv(["a", " b ", ""]) == frozenset({"a", "b"})


def test_defaults_are_valid() -> None:
    options = QueryOptions()
    assert options.page == 1
    assert options.page_size == 20
    assert options.has_date_window is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_date": "2023-13-01"},
        {"end_date": "20230101"},
        {"start_date": "2023-02-01", "end_date": "2023-01-01"},
        {"page": 0},
        {"page_size": 0},
        {"page_size": MAX_PAGE_SIZE + 1},
        {"top_n": 0},
    ],
)
def test_invalid_options_raise_bad_input(kwargs: dict[str, object]) -> None:
    with pytest.raises(BadInputError):
        QueryOptions(**kwargs)  # type: ignore[arg-type]


def test_date_window_flag() -> None:
    assert QueryOptions(start_date="2020-01-01").has_date_window is True
    assert QueryOptions(end_date="2020-01-01").has_date_window is True
