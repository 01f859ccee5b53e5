from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi.concurrency import run_in_threadpool

import answers
from errors import AppError, StorageError
from response_parser import parse_math_problem
from schemas.problems import MathProblem, SessionOut, SubmissionOut

logger = logging.getLogger(__name__)

GENERATE_ERROR_MSG = "An error occurred. Please try again."
SUBMIT_ERROR_MSG = "An error occurred while submitting your answer. Please try again."

PROBLEM_PROMPT = """Generate a math word problem suitable for elementary or middle school students.
The problem should be clear, engaging, and have a single numerical answer.
Return the response in JSON format with the following structure:
{
  "problem_text": "the full problem description",
  "final_answer": numeric_answer
}
Only return the JSON object, no additional text."""

FEEDBACK_PROMPT = """A student answered a math problem.
Problem: {problem_text}
Correct answer: {correct_answer}
Student's answer: {user_answer}
Is correct: {is_correct}

Generate encouraging feedback for the student. If correct, congratulate them and explain the solution briefly. If incorrect, gently explain what went wrong and guide them to the correct answer. Keep it friendly and educational."""


class Correctness(str, enum.Enum):
    UNKNOWN = "unknown"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class TextGenerator(Protocol):
    async def generate_text(self, prompt: str, *, response_schema=None) -> str: ...


class Store(Protocol):
    def create_session(self, problem_text: str, correct_answer: float) -> SessionOut: ...

    def create_submission(
        self, session_id: str, user_answer: float, is_correct: bool, feedback_text: str
    ) -> SubmissionOut: ...


@dataclass
class ControllerState:
    problem: Optional[MathProblem] = None
    session_id: Optional[str] = None
    user_answer: str = ""
    feedback: str = ""
    correctness: Correctness = Correctness.UNKNOWN
    busy: bool = False
    # False only when AI feedback was shown but its submission row failed to save
    feedback_saved: bool = True


def _fmt_number(x: float) -> str:
    return str(int(x)) if float(x).is_integer() else repr(float(x))


class InteractionController:
    """
    Runs the two user workflows (generate a problem, submit an answer) and
    owns the state the page is rendered from.

    The busy flag is advisory: it drives the disabled buttons, it does not
    lock out a second call made directly.
    """

    def __init__(self, ai: TextGenerator, store: Store) -> None:
        self.ai = ai
        self.store = store
        self.state = ControllerState()

    async def generate_problem(self) -> None:
        s = self.state
        s.busy = True
        s.feedback = ""
        s.user_answer = ""
        s.correctness = Correctness.UNKNOWN
        s.feedback_saved = True
        s.problem = None
        s.session_id = None

        try:
            text = await self.ai.generate_text(PROBLEM_PROMPT, response_schema=MathProblem)
            problem = parse_math_problem(text)
            session = await run_in_threadpool(
                self.store.create_session, problem.problem_text, problem.final_answer
            )
            s.problem = problem
            s.session_id = session.id
            logger.info("generated problem for session %s", session.id)
        except AppError:
            logger.exception("generate_problem failed")
            s.feedback = GENERATE_ERROR_MSG
        finally:
            s.busy = False

    async def submit_answer(self, answer_text: str) -> None:
        s = self.state
        if not s.session_id or s.problem is None:
            return
        if not answer_text or not answer_text.strip():
            return

        s.user_answer = answer_text.strip()
        s.feedback_saved = True
        try:
            value = answers.parse_answer(s.user_answer)
        except ValueError as e:
            s.feedback = str(e)
            s.correctness = Correctness.UNKNOWN
            return

        s.busy = True
        problem = s.problem
        try:
            correct = answers.is_correct(value, problem.final_answer)
            s.correctness = Correctness.CORRECT if correct else Correctness.INCORRECT

            prompt = FEEDBACK_PROMPT.format(
                problem_text=problem.problem_text,
                correct_answer=_fmt_number(problem.final_answer),
                user_answer=s.user_answer,
                is_correct=str(correct).lower(),
            )
            feedback_text = await self.ai.generate_text(prompt)

            try:
                await run_in_threadpool(
                    self.store.create_submission,
                    s.session_id,
                    answers.stored_value(value),
                    correct,
                    feedback_text,
                )
            except StorageError:
                logger.exception("submission for session %s was not saved", s.session_id)
                s.feedback_saved = False

            s.feedback = feedback_text
        except AppError:
            # correctness computed above is kept as is
            logger.exception("submit_answer failed")
            s.feedback = SUBMIT_ERROR_MSG
        finally:
            s.busy = False
