"""
Prompt templates for interview Q/A extraction and evaluation.

Two prompts drive the whole pipeline:
1. EXTRACTION_SYSTEM_PROMPT pulls question/answer pairs out of a raw
   transcript.
2. EVALUATION_SYSTEM_PROMPT scores each pair and produces the
   evaluation object the PDF report is built from.

Both ask for bare JSON. The analysis service still tolerates markdown
fences around it, since models do not always comply.
"""

import json


EXTRACTION_SYSTEM_PROMPT = """You are an expert at analyzing interview \
transcripts. Extract all question-answer pairs from the interview transcript.
Rules:
- Identify questions asked by the interviewer
- Identify answers given by the candidate
- Return ONLY a valid JSON object with a "qa_pairs" array containing objects \
with "question" and "answer" fields
- Clean up any filler words but preserve the meaning
- If multiple related answers, combine them into one
- Do NOT include any markdown, explanations, or text outside the JSON
- Output format: {"qa_pairs": [{"question": "...", "answer": "..."}]}"""


EVALUATION_SYSTEM_PROMPT = """You are an expert technical interviewer. \
Evaluate candidate answers for each Q&A pair.

IMPORTANT - Handle Non-Technical Questions:
- First identify if a question is administrative/introductory (e.g., \
"introduce yourself", "are you ready", "tell me about yourself", \
"how are you", etc.)
- For administrative questions: Set excluded=true, and provide \
exclusion_reason. Do NOT include in overall_score calculation.
- For technical questions: Evaluate normally with all scores.

Rules for Technical Questions:
- Score technical_depth (0-10), communication (0-10), confidence (0-10).
- communication must assess proper English sentence formation: grammar, \
clear sentence boundaries and punctuation, coherent structure, fluency, \
and clarity. Do NOT award communication points for technical jargon or keywords.
- If an answer is highly technical but poorly structured, set communication <= 5.
- Weighted final_score = technical*0.6 + communication*0.25 + confidence*0.15 \
(round to 2 decimals).
- Produce a concise feedback sentence per item.

Output Format:
- Return strictly valid JSON: { results: Array<{question, technical_depth, \
communication, confidence, final_score, feedback, excluded?, exclusion_reason?}>, \
overall_score: number, summary: string }
- overall_score must be the average of final_score for ONLY non-excluded \
items (technical questions only).
- results.length must equal the number of input qaItems.
- For excluded items: still include question and provide exclusion_reason, \
but set excluded=true and scores can be 0.

IMPORTANT: Output ONLY JSON with no markdown, no backticks."""


def build_extraction_prompt(transcription: str) -> str:
    return (
        "Extract question-answer pairs from this interview transcript:\n\n"
        f"{transcription}"
    )


def build_evaluation_prompt(qa_items: list[dict]) -> str:
    return f"Evaluate these Q&A pairs:\n\n{json.dumps(qa_items, indent=2)}"
