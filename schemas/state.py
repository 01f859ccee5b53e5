# schemas/state.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from controller import ControllerState, Correctness
from schemas.problems import MathProblem


class SubmitRequest(BaseModel):
    answer: str


class StateOut(BaseModel):
    problem: Optional[MathProblem] = None
    session_id: Optional[str] = None
    user_answer: str = ""
    feedback: str = ""
    correctness: Correctness = Correctness.UNKNOWN
    is_loading: bool = False
    feedback_saved: bool = True

    @classmethod
    def from_state(cls, state: ControllerState) -> "StateOut":
        return cls(
            problem=state.problem,
            session_id=state.session_id,
            user_answer=state.user_answer,
            feedback=state.feedback,
            correctness=state.correctness,
            is_loading=state.busy,
            feedback_saved=state.feedback_saved,
        )
