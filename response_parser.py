from __future__ import annotations

import json
import re

from pydantic import ValidationError

from errors import ParseError
from schemas.problems import MathProblem

# First "{" through the last "}"; also skips ```json fences and chatter around the object.
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> dict:
    if not isinstance(text, str):
        raise ParseError("AI response is not text")
    m = _OBJECT_RE.search(text)
    if m is None:
        raise ParseError("Invalid response format from AI")
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"AI response is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise ParseError("AI response JSON is not an object")
    return data


def parse_math_problem(text: str) -> MathProblem:
    """
    Pull the problem object out of a free-text model reply.

    Raises ParseError when no {...} block is present, when the block is not
    valid JSON, or when it lacks a non-empty problem_text and a numeric
    final_answer. Extra keys are ignored.
    """
    data = extract_json_object(text)
    try:
        return MathProblem.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"AI response has the wrong shape: {e.error_count()} error(s)") from e
