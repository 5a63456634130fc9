"""
Transcription service - converts an interview recording to plain text.

Uses AssemblyAI for speech-to-text with punctuation and formatting.
The Q/A extraction step only needs the words, so unlike a diarized
transcript we return the plain text as-is.

Key concept: This service is SYNCHRONOUS (blocking). AssemblyAI's SDK
uploads the file, polls for completion, and returns the result. The
router runs it via asyncio.to_thread() so the server stays responsive.
"""

import logging
import time

import assemblyai as aai

from interview_analyzer.config import settings
from interview_analyzer.services.errors import UpstreamServiceError

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Wraps AssemblyAI's SDK for audio transcription.

    Usage:
        service = TranscriptionService()
        text = service.transcribe_local_file("/tmp/interview.mp3")
    """

    def __init__(self, transcriber=None):
        if transcriber is None:
            if not settings.ASSEMBLYAI_API_KEY:
                raise UpstreamServiceError(
                    "Failed to transcribe audio",
                    "ASSEMBLYAI_API_KEY is not set",
                )
            aai.settings.api_key = settings.ASSEMBLYAI_API_KEY
            transcriber = aai.Transcriber()
        self.transcriber = transcriber

    def transcribe_local_file(self, file_path: str) -> str:
        """Transcribe a local audio file and return its text.

        AssemblyAI's SDK handles the upload of local files itself.

        Raises:
            UpstreamServiceError: if the SDK call fails or AssemblyAI
                reports an error status.
        """
        start_time = time.time()

        config = aai.TranscriptionConfig(
            language_code=settings.TRANSCRIPTION_LANGUAGE,
            punctuate=True,
            format_text=True,
        )

        try:
            transcript = self.transcriber.transcribe(file_path, config=config)
        except Exception as e:
            logger.exception("AssemblyAI transcription call failed")
            raise UpstreamServiceError("Failed to transcribe audio", str(e)) from e

        if transcript.status == aai.TranscriptStatus.error:
            raise UpstreamServiceError("Failed to transcribe audio", transcript.error)

        text = transcript.text or ""
        logger.info(
            "Transcription completed in %ds (%d chars)",
            int(time.time() - start_time), len(text),
        )
        return text
