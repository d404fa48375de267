"""Pytest configuration and shared fixtures for table_engine tests."""

from datetime import date
from typing import Any, Dict, List
from unittest.mock import patch

import polars as pl
import pytest

from table_engine import Column


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing session storage.

    This fixture patches st.session_state to allow testing without running
    a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state


@pytest.fixture
def invoices() -> List[Dict[str, Any]]:
    """
    Seven invoices with duplicate amounts, a missing amount and missing notes.

    Amounts 350.0 appear three times (inv-2, inv-3, inv-6) to check sort
    stability; inv-5 has no amount.
    """
    return [
        {"id": "inv-1", "number": "2024-001", "partner": {"name": "Acme d.o.o."},
         "amount": 1200.0, "status": "paid", "issued": date(2024, 1, 5),
         "note": "urgent"},
        {"id": "inv-2", "number": "2024-002", "partner": {"name": "Beta Trade"},
         "amount": 350.0, "status": "draft", "issued": date(2024, 1, 9),
         "note": None},
        {"id": "inv-3", "number": "2024-003", "partner": {"name": "Acme d.o.o."},
         "amount": 350.0, "status": "sent", "issued": date(2024, 2, 1),
         "note": "call first"},
        {"id": "inv-4", "number": "2024-004", "partner": {"name": "Gamma Solutions"},
         "amount": 980.5, "status": "paid", "issued": date(2024, 2, 14),
         "note": None},
        {"id": "inv-5", "number": "2024-005", "partner": {"name": "Delta"},
         "amount": None, "status": "draft", "issued": date(2024, 3, 3),
         "note": None},
        {"id": "inv-6", "number": "2024-006", "partner": {"name": "Beta Trade"},
         "amount": 350.0, "status": "overdue", "issued": date(2024, 3, 20),
         "note": "reminder sent"},
        {"id": "inv-7", "number": "2024-007", "partner": {"name": "Epsilon"},
         "amount": 75.25, "status": "sent", "issued": date(2024, 4, 2),
         "note": None},
    ]


@pytest.fixture
def invoice_columns() -> List[Column]:
    """Column definitions for the invoice fixture."""
    return [
        Column.for_field("number", title="Invoice"),
        Column("partner", accessor=lambda row: row["partner"]["name"]),
        Column.for_field("amount", sorter="number"),
        Column.for_field("status"),
        Column.for_field("issued", sorter="date"),
        Column.for_field("note", sortable=False),
    ]


@pytest.fixture
def many_invoices() -> List[Dict[str, Any]]:
    """37 invoices for pagination tests."""
    return [
        {"id": f"inv-{i}", "number": f"2024-{i:03d}", "amount": float(i % 5),
         "status": ["draft", "sent", "paid"][i % 3]}
        for i in range(1, 38)
    ]


@pytest.fixture
def many_invoice_columns() -> List[Column]:
    return [
        Column.for_field("number"),
        Column.for_field("amount", sorter="number"),
        Column.for_field("status"),
    ]


@pytest.fixture
def invoice_frame() -> pl.DataFrame:
    """Polars frame of invoices for frame-based tables."""
    return pl.DataFrame({
        "id": ["inv-1", "inv-2", "inv-3", "inv-4"],
        "partner": ["Acme", "Beta", "Gamma", "Acme"],
        "amount": [120.0, 35.5, None, 980.0],
        "paid": [True, False, False, True],
        "issued": [date(2024, 1, 5), date(2024, 1, 9), date(2024, 2, 1),
                   date(2024, 2, 14)],
    })
