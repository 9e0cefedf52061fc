"""Pytest configuration and shared fixtures for sms-tables tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from sms_tables.core.state import reset_default_state_manager


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing components.

    This fixture patches st.session_state to allow testing state handling
    and widget callbacks without running a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state
    reset_default_state_manager()


@pytest.fixture(autouse=True)
def quiet_diagnostics(monkeypatch):
    """Keep cell fault lines off stderr during tests."""
    monkeypatch.setenv("SMS_TABLES_QUIET", "true")


@pytest.fixture
def people_rows() -> List[Dict[str, Any]]:
    """Three people used by the concrete scenarios."""
    return [
        {"id": 1, "name": "Ann", "age": 30},
        {"id": 2, "name": "Bo", "age": 25},
        {"id": 3, "name": "Cy", "age": 40},
    ]


@pytest.fixture
def people_columns() -> List[Dict[str, Any]]:
    return [
        {"key": "name", "label": "Name"},
        {"key": "age", "label": "Age"},
    ]


@pytest.fixture
def student_rows() -> List[Dict[str, Any]]:
    """Students with nested profile and class fields."""
    return [
        {
            "id": "s1",
            "profile": {"firstName": "Amara", "lastName": "Okafor"},
            "class": {"name": "Grade 5A", "code": "5A"},
            "grade": 91,
            "guardians": [{"name": "Chidi Okafor"}],
        },
        {
            "id": "s2",
            "profile": {"firstName": "Liam", "lastName": "Brennan"},
            "class": {"name": "Grade 4B", "code": "4B"},
            "grade": 78,
            "guardians": [],
        },
        {
            "id": "s3",
            "profile": {"firstName": "Sofia", "lastName": "Marquez"},
            "class": {"name": "Grade 5A", "code": "5A"},
            "grade": 85,
            "guardians": [{"name": "Elena Marquez"}, {"name": "Jorge Marquez"}],
        },
        {
            "id": "s4",
            "profile": {"firstName": "Noah"},
            "class": None,
            "grade": None,
            "guardians": [],
        },
    ]


@pytest.fixture
def student_columns() -> List[Dict[str, Any]]:
    return [
        {"key": "profile.firstName", "label": "First name"},
        {"key": "profile.lastName", "label": "Last name"},
        {"key": "class.name", "label": "Class"},
        {"key": "grade", "label": "Grade", "filterable": False},
    ]


@pytest.fixture
def numbered_rows() -> List[Dict[str, Any]]:
    """23 rows for pagination tests (ids 1..23, name row_01..row_23)."""
    return [
        {"id": i, "name": f"row_{i:02d}", "group": "even" if i % 2 == 0 else "odd"}
        for i in range(1, 24)
    ]
