"""
Pydantic schemas for the interview API.

Request models are deliberately lenient. The evaluation object comes
from a language model, so every field is optional and unknown fields
are kept; the report renderer substitutes placeholders for anything
missing rather than rejecting the request.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class LenientModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Candidate(LenientModel):
    """Who was interviewed. Absent fields print as "Not specified"."""
    name: Any = None
    college: Any = None
    department: Any = None


class QuestionResult(LenientModel):
    """Scores for one question. Excluded items are listed but not averaged."""
    # Model output is not trusted to be well-typed ("8", "N/A", 5 as a
    # question); the renderer coerces every value itself.
    question: Any = None
    technical_depth: Any = None
    communication: Any = None
    confidence: Any = None
    final_score: Any = None
    feedback: Any = None
    excluded: Any = None
    exclusion_reason: Any = None


class Evaluation(LenientModel):
    overall_score: Any = None
    summary: Any = None
    results: Optional[list[Optional[QuestionResult]]] = None


# --- Requests ---

class ExtractQARequest(BaseModel):
    transcription: Optional[str] = None


class EvaluateRequest(BaseModel):
    # Validated by hand in the router so the 400 body matches the
    # {"error": ...} shape of every other failure.
    qaItems: Any = None


class ReportRequest(LenientModel):
    """Everything needed to render the PDF report."""
    filename: Any = None
    candidate: Optional[Candidate] = None
    group_name: Any = Field(default=None, alias="groupName")
    evaluation: Optional[Evaluation] = None


# --- Responses ---

class TranscriptionResponse(BaseModel):
    success: bool = True
    transcription: str


class ExtractQAResponse(BaseModel):
    success: bool = True
    qaItems: list
    count: int
