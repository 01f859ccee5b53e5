# schemas/problems.py
from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


class MathProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    problem_text: str = Field(min_length=1)
    final_answer: float

    @field_validator("problem_text")
    @classmethod
    def _strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("problem_text must not be blank")
        return v

    @field_validator("final_answer", mode="before")
    @classmethod
    def _numeric_only(cls, v: Any) -> Any:
        # bool is an int subclass; "12" would otherwise be coerced
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("final_answer must be a JSON number")
        if not math.isfinite(v):
            raise ValueError("final_answer must be finite")
        return v


# ---------- Persisted rows ----------


def _as_utc(v: datetime) -> datetime:
    # SQLite hands DateTime(timezone=True) back naive; rows are always written in UTC
    if v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: Optional[UtcDatetime]
    session_id: str
    user_answer: float
    is_correct: bool
    feedback_text: str


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    created_at: Optional[UtcDatetime]
    problem_text: str
    correct_answer: float
    # usually excluded in list views
    submissions: Optional[List[SubmissionOut]] = None
