"""
Interview API endpoints.

These map one-to-one onto the steps of the front-end flow:
1. POST /transcribe-audio   - audio file -> transcript text
2. POST /extract-qa         - transcript -> question/answer pairs
3. POST /evaluate-interview - question/answer pairs -> scored evaluation
4. POST /reports/pdf        - candidate + evaluation -> downloadable PDF

Design notes:
- Routers are THIN: they validate the HTTP input and call services
- Nothing is stored; every request stands alone
- Blocking SDK calls run in a worker thread via asyncio.to_thread()
- Failures come back as {"error": ..., "details": ...} in the detail
"""

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response

from interview_analyzer.config import settings
from interview_analyzer.schemas.interviews import (
    EvaluateRequest,
    ExtractQARequest,
    ExtractQAResponse,
    ReportRequest,
    TranscriptionResponse,
)
from interview_analyzer.services.analysis import AnalysisService
from interview_analyzer.services.errors import UpstreamServiceError
from interview_analyzer.services.pdf_report import InterviewReportRenderer, sanitize_filename
from interview_analyzer.services.transcription import TranscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["interviews"])

# Both the extension and the MIME type must mention one of these
ALLOWED_AUDIO_TYPES = re.compile(r"mp3|wav|m4a|webm|mp4|mpeg|mpga|ogg|flac")
CHUNK_SIZE = 1024 * 1024  # 1MB


def _error(status_code: int, message: str, details: Optional[str] = None) -> HTTPException:
    detail = {"error": message}
    if details:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)


@router.post("/transcribe-audio", response_model=TranscriptionResponse)
async def transcribe_audio(audio: Optional[UploadFile] = File(None)):
    """Transcribe an uploaded interview recording.

    Accepts common audio formats up to MAX_UPLOAD_MB. The upload is
    spooled to a temp file for the SDK and removed afterwards, whether
    transcription succeeds or not.
    """
    if audio is None or not audio.filename:
        raise _error(400, "No audio file uploaded")

    extension = Path(audio.filename).suffix.lower()
    if not (ALLOWED_AUDIO_TYPES.search(extension)
            and ALLOWED_AUDIO_TYPES.search(audio.content_type or "")):
        raise _error(
            400, "Invalid audio file format",
            f"Got '{audio.filename}' ({audio.content_type})",
        )

    logger.info("Transcribing audio file: %s", audio.filename)
    tmp_path = await _spool_upload(audio, extension)
    try:
        service = TranscriptionService()
        text = await asyncio.to_thread(service.transcribe_local_file, tmp_path)
    except UpstreamServiceError as e:
        logger.error("Transcription failed: %s (%s)", e.message, e.details)
        raise _error(500, "Failed to transcribe audio", e.details or e.message)
    finally:
        try:
            os.unlink(tmp_path)
        except OSError:
            logger.warning("Failed to clean up temp file %s", tmp_path)

    return TranscriptionResponse(transcription=text)


@router.post("/extract-qa", response_model=ExtractQAResponse)
async def extract_qa(request: ExtractQARequest):
    """Extract question/answer pairs from a transcript."""
    if not request.transcription:
        raise _error(400, "No transcription provided")

    try:
        service = AnalysisService()
        qa_items = await asyncio.to_thread(service.extract_qa, request.transcription)
    except UpstreamServiceError as e:
        raise _error(500, "Failed to extract Q/A", e.details or e.message)

    if not qa_items:
        raise _error(
            400, "No Q/A pairs found in transcription",
            "The AI could not identify any question-answer pairs in the transcript",
        )

    return ExtractQAResponse(qaItems=qa_items, count=len(qa_items))


@router.post("/evaluate-interview")
async def evaluate_interview(request: EvaluateRequest):
    """Score each Q/A pair. Returns the evaluation object unchanged."""
    qa_items = request.qaItems
    if not isinstance(qa_items, list) or not qa_items:
        raise _error(400, "Invalid input. Provide qaItems array.")

    try:
        service = AnalysisService()
        return await asyncio.to_thread(service.evaluate, qa_items)
    except UpstreamServiceError as e:
        raise _error(500, "Failed to evaluate interview", e.details or "Unknown error occurred")


@router.post("/reports/pdf")
async def download_report_pdf(request: ReportRequest):
    """Render the evaluation report as a PDF download.

    Missing candidate fields, summary, or results never fail the
    request; they render as placeholders or an empty table.
    """
    candidate = request.candidate.model_dump() if request.candidate else {}
    evaluation = request.evaluation.model_dump() if request.evaluation else {}
    group_label = request.group_name or settings.REPORT_GROUP_LABEL

    pdf_bytes = InterviewReportRenderer().render(candidate, group_label, evaluation)

    filename = sanitize_filename(request.filename, default=settings.REPORT_DEFAULT_FILENAME)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _spool_upload(upload: UploadFile, suffix: str) -> str:
    """Write an upload to a temp file in chunks, enforcing the size limit."""
    total_bytes = 0
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=suffix)
    try:
        with tmp:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_bytes += len(chunk)
                if total_bytes > settings.max_upload_bytes:
                    raise _error(
                        400, "Audio file too large",
                        f"Maximum size is {settings.MAX_UPLOAD_MB}MB",
                    )
                tmp.write(chunk)
    except BaseException:
        # The temp file outlives the request only on success
        os.unlink(tmp.name)
        raise

    logger.debug("Spooled %d bytes to %s", total_bytes, tmp.name)
    return tmp.name
