"""Shared fixtures: small CSV documents reused across the format tests."""

import pytest


@pytest.fixture
def sample_csv() -> str:
    return (
        "name,age,email\n"
        "John Doe,30,john@example.com\n"
        "Jane Smith,25,jane@example.com\n"
        "Bob Johnson,35,bob@example.com"
    )


@pytest.fixture
def location_csv() -> str:
    return (
        "name,latitude,longitude\n"
        "New York,40.7128,-74.0060\n"
        "Los Angeles,34.0522,-118.2437\n"
        "Chicago,41.8781,-87.6298"
    )


@pytest.fixture
def event_csv() -> str:
    return (
        "title,start_date,end_date,description\n"
        "Team Meeting,2025-11-05,2025-11-05,Quarterly review meeting\n"
        "Conference,2025-11-10,2025-11-12,Annual industry conference\n"
        "Workshop,2025-11-15,2025-11-15,Training workshop"
    )
