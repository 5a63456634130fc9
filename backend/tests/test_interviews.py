"""
Integration tests for the interview API.

Exercises the HTTP layer end to end: input validation, error shapes,
and the PDF download. Upstream AI services are replaced with fakes on
the router module, so no network calls are made.
"""

import os
import tempfile

import pytest
from httpx import AsyncClient

from interview_analyzer.routers import interviews
from interview_analyzer.services.errors import UpstreamServiceError
from interview_analyzer.services.transcription import TranscriptionService


class FakeAnalysisService:
    qa_items = [{"question": "What is a deadlock?", "answer": "Two threads waiting on each other."}]
    evaluation = {"results": [], "overall_score": 0, "summary": ""}
    error = None

    def extract_qa(self, transcription):
        if self.error:
            raise self.error
        return self.qa_items

    def evaluate(self, qa_items):
        if self.error:
            raise self.error
        return self.evaluation


class FakeTranscriptionService:
    seen_paths = []

    def transcribe_local_file(self, file_path):
        self.seen_paths.append(file_path)
        assert os.path.exists(file_path)
        return "Interviewer: What is a deadlock? Candidate: Two threads waiting."


@pytest.fixture
def fake_analysis(monkeypatch):
    service = FakeAnalysisService()
    monkeypatch.setattr(interviews, "AnalysisService", lambda: service)
    return service


@pytest.fixture
def fake_transcription(monkeypatch):
    service = FakeTranscriptionService()
    service.seen_paths = []
    monkeypatch.setattr(interviews, "TranscriptionService", lambda: service)
    return service


# --- /transcribe-audio ---

@pytest.mark.asyncio
async def test_transcribe_audio_success(client: AsyncClient, fake_transcription):
    """POST /transcribe-audio returns text and removes the temp file."""
    response = await client.post(
        "/transcribe-audio",
        files={"audio": ("answer.mp3", b"ID3fake-audio-bytes", "audio/mpeg")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "deadlock" in data["transcription"]
    assert len(fake_transcription.seen_paths) == 1
    assert not os.path.exists(fake_transcription.seen_paths[0])


@pytest.mark.asyncio
async def test_transcribe_audio_without_file(client: AsyncClient):
    """POST /transcribe-audio returns 400 when no file is attached."""
    response = await client.post("/transcribe-audio")

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "No audio file uploaded"


@pytest.mark.asyncio
async def test_transcribe_audio_rejects_non_audio(client: AsyncClient):
    """POST /transcribe-audio returns 400 for a non-audio upload."""
    response = await client.post(
        "/transcribe-audio",
        files={"audio": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Invalid audio file format"


@pytest.mark.asyncio
async def test_transcribe_audio_rejects_large_upload(client: AsyncClient, fake_transcription, monkeypatch):
    """POST /transcribe-audio returns 400 above the size limit."""
    from interview_analyzer.config import settings

    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 1)
    response = await client.post(
        "/transcribe-audio",
        files={"audio": ("long.wav", b"0" * (2 * 1024 * 1024), "audio/wav")},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Audio file too large"
    assert fake_transcription.seen_paths == []


@pytest.mark.asyncio
async def test_transcribe_audio_upstream_failure(client: AsyncClient, monkeypatch):
    """POST /transcribe-audio returns 500 with details when the service fails."""
    class FailingService:
        def transcribe_local_file(self, file_path):
            raise UpstreamServiceError("Failed to transcribe audio", "Audio file is corrupt")

    monkeypatch.setattr(interviews, "TranscriptionService", FailingService)
    response = await client.post(
        "/transcribe-audio",
        files={"audio": ("answer.m4a", b"....", "audio/x-m4a")},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == {
        "error": "Failed to transcribe audio",
        "details": "Audio file is corrupt",
    }


@pytest.mark.asyncio
async def test_transcribe_audio_sdk_exception(client: AsyncClient, monkeypatch):
    """POST /transcribe-audio returns 500 when the SDK itself raises."""
    class RaisingTranscriber:
        def transcribe(self, file_path, config=None):
            raise ConnectionError("network down")

    monkeypatch.setattr(
        interviews, "TranscriptionService",
        lambda: TranscriptionService(transcriber=RaisingTranscriber()),
    )
    response = await client.post(
        "/transcribe-audio",
        files={"audio": ("answer.mp3", b"ID3fake-audio-bytes", "audio/mpeg")},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == {
        "error": "Failed to transcribe audio",
        "details": "network down",
    }


class BrokenUpload:
    """An upload whose stream fails after the first chunk."""

    def __init__(self):
        self.reads = 0

    async def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("client disconnected")
        return b"ID3partial"


@pytest.mark.asyncio
async def test_spool_upload_removes_temp_file_when_read_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    with pytest.raises(OSError, match="client disconnected"):
        await interviews._spool_upload(BrokenUpload(), ".mp3")

    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_spool_upload_removes_temp_file_when_too_large(tmp_path, monkeypatch):
    from fastapi import HTTPException

    from interview_analyzer.config import settings

    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 0)

    with pytest.raises(HTTPException) as exc_info:
        await interviews._spool_upload(BrokenUpload(), ".mp3")

    assert exc_info.value.status_code == 400
    assert list(tmp_path.iterdir()) == []


# --- /extract-qa ---

@pytest.mark.asyncio
async def test_extract_qa_success(client: AsyncClient, fake_analysis):
    """POST /extract-qa returns the pairs and their count."""
    response = await client.post("/extract-qa", json={"transcription": "..."})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["count"] == 1
    assert data["qaItems"][0]["question"] == "What is a deadlock?"


@pytest.mark.asyncio
async def test_extract_qa_requires_transcription(client: AsyncClient):
    """POST /extract-qa returns 400 without a transcription."""
    response = await client.post("/extract-qa", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "No transcription provided"


@pytest.mark.asyncio
async def test_extract_qa_with_no_pairs_found(client: AsyncClient, fake_analysis):
    """POST /extract-qa returns 400 when the model finds nothing."""
    fake_analysis.qa_items = []
    response = await client.post("/extract-qa", json={"transcription": "hello"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "No Q/A pairs found in transcription"


# --- /evaluate-interview ---

@pytest.mark.asyncio
async def test_evaluate_interview_success(client: AsyncClient, fake_analysis, evaluation):
    """POST /evaluate-interview returns the evaluation object unchanged."""
    fake_analysis.evaluation = evaluation
    response = await client.post(
        "/evaluate-interview",
        json={"qaItems": [{"question": "Q", "answer": "A"}]},
    )

    assert response.status_code == 200
    assert response.json() == evaluation


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"qaItems": []}, {"qaItems": "not a list"}])
async def test_evaluate_interview_rejects_bad_input(client: AsyncClient, body):
    """POST /evaluate-interview returns 400 without a non-empty qaItems list."""
    response = await client.post("/evaluate-interview", json=body)

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Invalid input. Provide qaItems array."


@pytest.mark.asyncio
async def test_evaluate_interview_upstream_failure(client: AsyncClient, fake_analysis):
    """POST /evaluate-interview returns 500 with details on upstream failure."""
    fake_analysis.error = UpstreamServiceError("Failed to evaluate interview", "rate limited")
    response = await client.post(
        "/evaluate-interview",
        json={"qaItems": [{"question": "Q", "answer": "A"}]},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == {
        "error": "Failed to evaluate interview",
        "details": "rate limited",
    }


# --- /reports/pdf ---

@pytest.mark.asyncio
async def test_download_report_pdf(client: AsyncClient, candidate, evaluation):
    """POST /reports/pdf returns a PDF with a sanitized filename."""
    response = await client.post(
        "/reports/pdf",
        json={
            "filename": "Report #1 (final).pdf",
            "candidate": candidate,
            "groupName": "Backend Panel",
            "evaluation": evaluation,
        },
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="report__1__final_.pdf"' in response.headers["content-disposition"]
    assert response.content[:5] == b"%PDF-"


@pytest.mark.asyncio
async def test_download_report_pdf_with_minimal_body(client: AsyncClient):
    """POST /reports/pdf renders placeholders instead of failing on empty input."""
    response = await client.post("/reports/pdf", json={})

    assert response.status_code == 200
    assert response.content[:5] == b"%PDF-"
    assert 'filename="interview_evaluation_report.pdf"' in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_download_report_pdf_accepts_quoted_scores(client: AsyncClient):
    """Scores sent as strings are coerced, not rejected."""
    response = await client.post(
        "/reports/pdf",
        json={"evaluation": {"results": [{"question": "Q", "technical_depth": "8",
                                          "final_score": "7.5", "extra": "kept"}]}},
    )

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"evaluation": {"overall_score": "N/A", "results": []}},
    {"evaluation": {"results": [{"question": 5}]}},
    {"evaluation": {"results": [None]}},
    {"candidate": {"name": 123}},
    {"evaluation": {"summary": 42}},
    {"evaluation": {"results": [{"question": "Q", "excluded": "n/a"}]}},
    {"filename": 7, "groupName": 3},
])
async def test_download_report_pdf_tolerates_loosely_typed_fields(client: AsyncClient, body):
    """Odd types from model output render instead of failing validation."""
    response = await client.post("/reports/pdf", json=body)

    assert response.status_code == 200
    assert response.content[:5] == b"%PDF-"
