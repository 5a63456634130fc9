"""
Score aggregation and severity mapping for interview evaluations.

Everything here is a pure function of the evaluation dict returned by
the evaluation service. The PDF renderer (and anything else that wants
the same numbers) calls in here so the thresholds live in one place.

Thresholds are ordered (lower_bound, value) tables checked top-down;
the first bound the score reaches wins.
"""

import math
from dataclasses import dataclass
from typing import Optional

# --- Severity colors ---
SUCCESS = "#38a169"   # Green
WARNING = "#d69e2e"   # Amber
DANGER = "#e53e3e"    # Red
NEUTRAL = "#718096"   # Light gray - excluded / placeholder values

SEVERITY_THRESHOLDS = (
    (8.0, SUCCESS),
    (6.0, WARNING),
)

RATING_THRESHOLDS = (
    (9.0, "Exceptional Candidate"),
    (8.0, "Excellent Performer"),
    (7.0, "Strong Performer"),
    (6.0, "Good Performer"),
    (5.0, "Average Performer"),
)

PLACEHOLDER = "-"
SCORE_MAX = 10


@dataclass(frozen=True)
class ScoreCard:
    """One summary tile on the report (overall, technical, ...)."""
    label: str
    value: float
    severity_color: str
    description: str
    max: int = SCORE_MAX


def _lookup(score: float, table, default):
    for lower_bound, value in table:
        if score >= lower_bound:
            return value
    return default


def severity_color(value: Optional[float], excluded: bool = False) -> str:
    """Map a 0-10 score to success/warning/danger (neutral when excluded)."""
    if excluded:
        return NEUTRAL
    return _lookup(to_number(value), SEVERITY_THRESHOLDS, DANGER)


def overall_rating(score: float) -> str:
    """Describe an overall score, e.g. 8.4 -> "Excellent Performer"."""
    return _lookup(score, RATING_THRESHOLDS, "Needs Development")


def to_number(value) -> float:
    """Coerce a score to float; anything unusable counts as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def round1(value: float) -> float:
    """Round half-up to one decimal (7.25 -> 7.3, not banker's 7.2)."""
    return math.floor(value * 10 + 0.5) / 10


def format_score(value) -> str:
    """Render a score the way it appears in table cells: 8 -> "8", 7.5 -> "7.5"."""
    number = to_number(value)
    if number.is_integer():
        return str(int(number))
    return str(round(number, 2))


def get_results(evaluation: Optional[dict]) -> list:
    """The evaluation's results list, or [] when absent or malformed."""
    results = (evaluation or {}).get("results")
    return results if isinstance(results, list) else []


def is_excluded(result: dict) -> bool:
    return bool(result.get("excluded"))


def included_results(evaluation: Optional[dict]) -> list[dict]:
    return [
        r for r in get_results(evaluation)
        if isinstance(r, dict) and not is_excluded(r)
    ]


def average(results: list[dict], key: str) -> float:
    """Mean of one metric over the given results (0 when empty)."""
    if not results:
        return 0.0
    return sum(to_number(r.get(key)) for r in results) / len(results)


def overall_score(evaluation: Optional[dict]) -> float:
    """Overall score for the report.

    Mean of final_score over non-excluded results that carry a numeric
    final_score. Only when there are none does the evaluation's own
    overall_score field get used.
    """
    scored = [
        r["final_score"] for r in included_results(evaluation)
        if _is_number(r.get("final_score"))
    ]
    if scored:
        return round1(sum(scored) / len(scored))

    supplied = (evaluation or {}).get("overall_score")
    if _is_number(supplied):
        return round1(supplied)
    return 0.0


def build_score_cards(evaluation: Optional[dict]) -> list[ScoreCard]:
    """The four summary cards, in display order."""
    included = included_results(evaluation)
    overall = overall_score(evaluation)
    technical = round1(average(included, "technical_depth"))
    communication = round1(average(included, "communication"))
    confidence = round1(average(included, "confidence"))

    return [
        ScoreCard("OVERALL SCORE", overall, severity_color(overall),
                  overall_rating(overall)),
        ScoreCard("TECHNICAL", technical, severity_color(technical),
                  "Technical Depth & Knowledge"),
        ScoreCard("COMMUNICATION", communication, severity_color(communication),
                  "Clarity & Structure"),
        ScoreCard("CONFIDENCE", confidence, severity_color(confidence),
                  "Delivery & Presence"),
    ]


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
