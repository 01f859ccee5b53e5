from __future__ import annotations

from typing import Any, Dict

from controller import ControllerState, Correctness

GENERATE_LABEL = "Generate New Problem"
GENERATING_LABEL = "Generating..."
NOT_SAVED_NOTICE = "We couldn't save this attempt, but here is your feedback."

_FEEDBACK_HEADINGS = {
    Correctness.CORRECT: ("✅ Correct!", "correct"),
    Correctness.INCORRECT: ("❌ Not quite right", "incorrect"),
    Correctness.UNKNOWN: ("Heads up", "neutral"),
}


def page_context(state: ControllerState) -> Dict[str, Any]:
    """Everything index.html needs, derived from controller state only."""
    title, style = _FEEDBACK_HEADINGS[state.correctness]
    return {
        "generate_label": GENERATING_LABEL if state.busy else GENERATE_LABEL,
        "generate_disabled": state.busy,
        "show_problem": state.problem is not None,
        "problem_text": state.problem.problem_text if state.problem is not None else "",
        "user_answer": state.user_answer,
        # empty answers are blocked client-side by the required attribute
        "submit_disabled": state.busy,
        "show_feedback": bool(state.feedback),
        "feedback": state.feedback,
        "feedback_title": title,
        "feedback_style": style,
        "show_not_saved": bool(state.feedback) and not state.feedback_saved,
        "not_saved_notice": NOT_SAVED_NOTICE,
    }
