"""Tests for job submission and the job registry."""

import re

import pytest

from decompiler.fetcher import RetrievalError
from decompiler.models import AnalysisResult
from decompiler.service import generate_job_id, is_valid_url, submit_job
from decompiler.storage import JobNotFoundError, JobStorage
from tests._fixtures.fake_site import SITE, FakeRetriever, site_pages


class TestSubmitJob:

    def test_success_saves_once(self, site: FakeRetriever, storage: JobStorage) -> None:
        outcome = submit_job(SITE, job_id="abc", storage=storage, retriever=site)

        assert outcome == {
            "success": True,
            "jobId": "abc",
            "results": {
                "jsFiles": 1,
                "cssFiles": 1,
                "components": 1,
                "modules": 0,
                "bundles": 2,
                "files": 5,
            },
        }
        assert storage.get("abc").analysis.components == 1
        assert len(storage.list()) == 1

    def test_generates_job_id(self, site: FakeRetriever, storage: JobStorage) -> None:
        outcome = submit_job(SITE, storage=storage, retriever=site)
        assert storage.get(outcome["jobId"]) is not None

    def test_fatal_failure_saves_nothing(self, storage: JobStorage) -> None:
        retriever = FakeRetriever({SITE: RetrievalError(SITE, "Read timed out")})
        outcome = submit_job(SITE, job_id="dead", storage=storage, retriever=retriever)

        assert outcome["error"] == "Decompilation failed"
        assert outcome["details"] == "Failed to analyze HTML structure"
        assert storage.get("dead") is None

    @pytest.mark.parametrize("url", ["notaurl", "ftp://example.com/", "https://"])
    def test_invalid_url(self, url: str, storage: JobStorage) -> None:
        retriever = FakeRetriever()
        assert submit_job(url, job_id="x", storage=storage, retriever=retriever) == {"error": "Invalid URL provided"}
        assert retriever.calls == []

    def test_missing_url(self, storage: JobStorage) -> None:
        assert submit_job("", job_id="x", storage=storage) == {"error": "URL and jobId are required"}

    def test_options_forwarded(self, site: FakeRetriever, storage: JobStorage) -> None:
        submit_job(SITE, job_id="nomaps", storage=storage, retriever=site, recover_sourcemaps=False)
        assert site.fetched("sourcemap") == []

    def test_reused_job_id_is_a_structured_failure(self, storage: JobStorage) -> None:
        first = submit_job(SITE, job_id="dup", storage=storage, retriever=FakeRetriever(site_pages()))
        assert first["success"] is True

        retriever = FakeRetriever(site_pages())
        second = submit_job(SITE, job_id="dup", storage=storage, retriever=retriever)
        assert second["error"] == "Job already exists"
        assert retriever.calls == []
        assert storage.get("dup").job_id == "dup"
        assert len(storage.list()) == 1

    def test_storage_is_required(self) -> None:
        with pytest.raises(TypeError):
            submit_job(SITE, job_id="x")


class TestJobStorage:

    def test_roundtrip(self, storage: JobStorage) -> None:
        result = AnalysisResult(job_id="j1", url=SITE)
        storage.save("j1", result)
        assert storage.get("j1") is result
        assert storage.require("j1") is result

    def test_unknown_job(self, storage: JobStorage) -> None:
        assert storage.get("nope") is None
        with pytest.raises(JobNotFoundError):
            storage.require("nope")

    def test_single_write_per_job(self, storage: JobStorage) -> None:
        storage.save("j1", AnalysisResult(job_id="j1", url=SITE))
        with pytest.raises(ValueError, match="already stored"):
            storage.save("j1", AnalysisResult(job_id="j1", url=SITE))

    def test_list_newest_first(self, storage: JobStorage) -> None:
        storage.save("old", AnalysisResult(job_id="old", url=SITE, timestamp=1))
        storage.save("new", AnalysisResult(job_id="new", url=SITE, timestamp=2))
        assert [r.job_id for r in storage.list()] == ["new", "old"]

    def test_delete_and_clear(self, storage: JobStorage) -> None:
        storage.save("a", AnalysisResult(job_id="a", url=SITE))
        storage.save("b", AnalysisResult(job_id="b", url=SITE))
        assert storage.delete("a") is True
        assert storage.delete("a") is False
        storage.clear()
        assert storage.list() == []


def test_generate_job_id() -> None:
    job_id = generate_job_id()
    assert re.fullmatch(r"[a-z0-9]{9}", job_id)


def test_is_valid_url() -> None:
    assert is_valid_url("https://example.com/app")
    assert is_valid_url("http://localhost:3000")
    assert not is_valid_url("example.com")
