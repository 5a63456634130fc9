"""
Test fixtures shared across the test suite.

Architecture:
- The HTTP client runs against the real FastAPI app over ASGITransport,
  so routing, validation and response shaping are all exercised.
- The upstream AI services (AssemblyAI, Anthropic) are never called.
  Tests swap the service classes on the router module for fakes via
  monkeypatch.
- Evaluation fixtures are plain dicts shaped like the evaluation
  service's JSON output.
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from interview_analyzer.main import app


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client bound to the real app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def generated_at():
    """A fixed timestamp so layouts can be compared across renders."""
    return datetime(2026, 3, 14, 9, 30)


@pytest.fixture
def candidate():
    return {
        "name": "Asha Rao",
        "college": "IIT Madras",
        "department": "Computer Science",
    }


@pytest.fixture
def evaluation():
    """Three scored questions plus one excluded introduction."""
    return {
        "overall_score": 7.1,
        "summary": "Solid fundamentals with clear explanations of data structures.",
        "results": [
            {
                "question": "Tell me about yourself.",
                "technical_depth": 0,
                "communication": 0,
                "confidence": 0,
                "final_score": 0,
                "feedback": "",
                "excluded": True,
                "exclusion_reason": "Introductory question",
            },
            {
                "question": "Explain how a hash map handles collisions.",
                "technical_depth": 8,
                "communication": 7,
                "confidence": 5,
                "final_score": 7.3,
                "feedback": "Good coverage of chaining and open addressing.",
            },
            {
                "question": "What is the difference between a process and a thread?",
                "technical_depth": 6,
                "communication": 9,
                "confidence": 7,
                "final_score": 6.9,
                "feedback": "Clear answer, light on scheduling details.",
            },
        ],
    }


@pytest.fixture
def make_results():
    """Factory for `count` scored results with distinguishable questions."""
    def _make(count: int) -> list[dict]:
        return [
            {
                "question": f"Question number {i + 1} about system design",
                "technical_depth": 7,
                "communication": 7,
                "confidence": 7,
                "final_score": 7.0,
                "feedback": "Fine.",
            }
            for i in range(count)
        ]
    return _make
