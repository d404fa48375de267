"""Tests for global search and per-column filtering."""

import pytest

from table_engine import Column, FilterState, filter_rows
from table_engine.engine.filtering import (
    clear_column_filters,
    clear_query,
    with_column_filter,
    with_query,
)


def ids(rows):
    return [row["id"] for row in rows]


class TestGlobalQuery:
    """The global query matches if ANY filterable column contains it."""

    def test_empty_state_keeps_all_rows_in_order(self, invoices, invoice_columns):
        result = filter_rows(invoices, invoice_columns, FilterState())

        assert ids(result) == ids(invoices)
        assert result is not invoices

    def test_query_is_case_insensitive(self, invoices, invoice_columns):
        result = filter_rows(invoices, invoice_columns, FilterState(query="ACME"))

        assert ids(result) == ["inv-1", "inv-3"]

    def test_query_matches_across_columns(self, invoices, invoice_columns):
        """'sent' hits the status of inv-3/inv-7 and the note of inv-6."""
        result = filter_rows(invoices, invoice_columns, FilterState(query="sent"))

        assert ids(result) == ["inv-3", "inv-6", "inv-7"]

    def test_query_matches_stringified_numbers_and_dates(
        self, invoices, invoice_columns
    ):
        by_amount = filter_rows(invoices, invoice_columns, FilterState(query="1200"))
        by_date = filter_rows(invoices, invoice_columns, FilterState(query="2024-02"))

        assert ids(by_amount) == ["inv-1"]
        assert ids(by_date) == ["inv-3", "inv-4"]

    def test_query_ignores_non_filterable_columns(self, invoices):
        columns = [
            Column.for_field("number"),
            Column.for_field("status", filterable=False),
        ]

        result = filter_rows(invoices, columns, FilterState(query="overdue"))

        assert result == []

    def test_no_match_returns_empty_list(self, invoices, invoice_columns):
        result = filter_rows(invoices, invoice_columns, FilterState(query="zzz"))

        assert result == []


class TestColumnFilters:
    """Column filters combine with logical AND."""

    def test_single_column_filter(self, invoices, invoice_columns):
        state = FilterState(column_filters={"partner": "BETA"})

        result = filter_rows(invoices, invoice_columns, state)

        assert ids(result) == ["inv-2", "inv-6"]

    def test_column_filters_are_anded(self, invoices, invoice_columns):
        state = FilterState(column_filters={"partner": "beta", "status": "overdue"})

        result = filter_rows(invoices, invoice_columns, state)

        assert ids(result) == ["inv-6"]

    def test_query_and_column_filter_combine(self, invoices, invoice_columns):
        state = FilterState(query="acme", column_filters={"status": "sent"})

        result = filter_rows(invoices, invoice_columns, state)

        assert ids(result) == ["inv-3"]

    def test_missing_value_is_empty_string(self, invoices, invoice_columns):
        """None must not stringify to 'None'."""
        state = FilterState(column_filters={"note": "none"})

        result = filter_rows(invoices, invoice_columns, state)

        assert result == []

    def test_filter_applies_to_non_filterable_column(self, invoices):
        columns = [
            Column.for_field("number"),
            Column.for_field("status", filterable=False),
        ]
        state = FilterState(column_filters={"status": "overdue"})

        result = filter_rows(invoices, columns, state)

        assert ids(result) == ["inv-6"]

    def test_unknown_column_filter_is_ignored(self, invoices, invoice_columns):
        state = FilterState(column_filters={"does_not_exist": "x"})

        result = filter_rows(invoices, invoice_columns, state)

        assert ids(result) == ids(invoices)

    def test_custom_stringify(self, invoices):
        columns = [
            Column.for_field("amount", stringify=lambda value: f"{value:.2f}"),
        ]
        state = FilterState(column_filters={"amount": "350.00"})

        result = filter_rows(invoices, columns, state)

        assert ids(result) == ["inv-2", "inv-3", "inv-6"]


class TestFilterRobustness:
    """Malformed rows degrade to empty text instead of raising."""

    def test_raising_accessor_reads_as_empty(self, invoices, invoice_columns):
        broken = Column("broken", accessor=lambda row: row["missing"]["deep"])
        columns = invoice_columns + [broken]

        by_query = filter_rows(invoices, columns, FilterState(query="acme"))
        by_column = filter_rows(
            invoices, columns, FilterState(column_filters={"broken": "x"})
        )

        assert ids(by_query) == ["inv-1", "inv-3"]
        assert by_column == []

    def test_filter_is_idempotent(self, invoices, invoice_columns):
        state = FilterState(query="a", column_filters={"status": "d"})

        once = filter_rows(invoices, invoice_columns, state)
        twice = filter_rows(once, invoice_columns, state)

        assert twice == once

    def test_input_is_not_modified(self, invoices, invoice_columns):
        before = list(invoices)

        filter_rows(invoices, invoice_columns, FilterState(query="acme"))

        assert invoices == before


class TestFilterTransitions:
    """Filter state transitions return new, normalized states."""

    def test_dict_and_pairs_are_equal(self):
        from_dict = FilterState(column_filters={"b": "2", "a": "1"})
        from_pairs = FilterState(column_filters=(("a", "1"), ("b", "2")))

        assert from_dict == from_pairs
        assert hash(from_dict) == hash(from_pairs)

    def test_empty_terms_are_dropped(self):
        state = FilterState(column_filters={"a": "", "b": "x"})

        assert state.column_filters == (("b", "x"),)
        assert state.active_filter_count == 1

    def test_repeated_column_keeps_last_term(self, invoices, invoice_columns):
        state = FilterState(column_filters=[("status", "paid"), ("status", "draft")])

        assert state.column_filters == (("status", "draft"),)
        assert state.active_filter_count == 1
        assert state.term("status") == "draft"
        assert ids(filter_rows(invoices, invoice_columns, state)) == ["inv-2", "inv-5"]

    def test_with_column_filter_sets_and_removes(self):
        state = with_column_filter(FilterState(), "status", "paid")
        assert state.term("status") == "paid"

        state = with_column_filter(state, "status", "")
        assert state.term("status") == ""
        assert state.is_empty

    def test_transitions_do_not_mutate(self):
        original = FilterState(query="acme")

        changed = with_query(original, "beta")

        assert original.query == "acme"
        assert changed.query == "beta"

    def test_clear_column_filters_keeps_query(self):
        state = FilterState(query="acme", column_filters={"status": "paid"})

        cleared = clear_column_filters(state)

        assert cleared.query == "acme"
        assert cleared.column_filters == ()

    def test_clear_query_keeps_column_filters(self):
        state = FilterState(query="acme", column_filters={"status": "paid"})

        cleared = clear_query(state)

        assert cleared.query == ""
        assert cleared.as_dict() == {"status": "paid"}

    @pytest.mark.parametrize("query", [None, ""])
    def test_empty_query_values(self, query):
        assert with_query(FilterState(query="x"), query).query == ""
