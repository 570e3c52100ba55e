"""Shared pytest fixtures for loading XML test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def chart_sample_xml() -> bytes:
    return (FIXTURES_DIR / "chart_sample.xml").read_bytes()


@pytest.fixture()
def chart_empty_xml() -> bytes:
    return (FIXTURES_DIR / "chart_empty.xml").read_bytes()
