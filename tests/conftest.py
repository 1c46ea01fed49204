"""Shared test fixtures."""

from __future__ import annotations

import pytest

from decompiler.storage import JobStorage
from tests._fixtures.fake_site import FakeRetriever, site_pages


@pytest.fixture
def site() -> FakeRetriever:
    """Retriever serving one script and one stylesheet, no source map."""
    return FakeRetriever(site_pages())


@pytest.fixture
def storage() -> JobStorage:
    return JobStorage()
