import pytest
from tenacity import wait_none

from oceandata_sync.application.domain import SourceDescriptor
from oceandata_sync.infrastructure.search_client import HttpFileLister


@pytest.fixture
def make_source(tmp_path):
    def _make(**kwargs):
        kwargs.setdefault("search_pattern", "A2016*L3m_DAY_CHL_chlor_a_9km.nc")
        kwargs.setdefault("local_root", tmp_path / "mirror")
        return SourceDescriptor(**kwargs)
    return _make


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Retry the file search immediately instead of backing off."""
    monkeypatch.setattr(
        HttpFileLister._execute_query.retry, "wait", wait_none()
    )
