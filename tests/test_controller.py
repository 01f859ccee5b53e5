import asyncio

from conftest import PROBLEM_JSON, FakeAI, FakeStore
from controller import (
    GENERATE_ERROR_MSG,
    SUBMIT_ERROR_MSG,
    Correctness,
    InteractionController,
)
from errors import RequestError
from presentation import page_context


def _run(coro):
    return asyncio.run(coro)


def _with_problem(*feedback_replies, store=None, answer_json=PROBLEM_JSON):
    store = store or FakeStore()
    ai = FakeAI(answer_json, *feedback_replies)
    c = InteractionController(ai=ai, store=store)
    _run(c.generate_problem())
    return c, ai, store


def test_generate_problem_success():
    c, ai, store = _with_problem()
    s = c.state
    assert s.problem is not None
    assert s.problem.final_answer == 10
    assert s.session_id in store.sessions
    assert store.sessions[s.session_id].correct_answer == 10
    assert s.feedback == ""
    assert s.correctness is Correctness.UNKNOWN
    assert s.busy is False
    assert "final_answer" in ai.prompts[0]


def test_generate_clears_previous_state():
    c, _, _ = _with_problem("Nice job!")
    _run(c.submit_answer("10"))
    assert c.state.feedback == "Nice job!"

    c.ai.replies.append('{"problem_text": "What is 3 + 4?", "final_answer": 7}')
    _run(c.generate_problem())
    s = c.state
    assert s.problem.problem_text == "What is 3 + 4?"
    assert s.feedback == ""
    assert s.user_answer == ""
    assert s.correctness is Correctness.UNKNOWN


def test_generate_ai_failure():
    store = FakeStore()
    c = InteractionController(ai=FakeAI(RequestError("quota exceeded")), store=store)
    _run(c.generate_problem())
    assert c.state.problem is None
    assert c.state.session_id is None
    assert c.state.feedback == GENERATE_ERROR_MSG
    assert c.state.busy is False
    assert store.sessions == {}


def test_generate_parse_failure_creates_no_session():
    store = FakeStore()
    c = InteractionController(ai=FakeAI("Here is a fun problem about trains!"), store=store)
    _run(c.generate_problem())
    assert c.state.problem is None
    assert c.state.feedback == GENERATE_ERROR_MSG
    assert store.sessions == {}


def test_generate_storage_failure_leaves_problem_unset():
    c = InteractionController(ai=FakeAI(PROBLEM_JSON), store=FakeStore(fail_sessions=True))
    _run(c.generate_problem())
    assert c.state.problem is None
    assert c.state.session_id is None
    assert c.state.feedback == GENERATE_ERROR_MSG
    assert c.state.busy is False


def test_busy_only_while_in_flight():
    seen = []
    ai = FakeAI(PROBLEM_JSON, "Well done!")
    c = InteractionController(ai=ai, store=FakeStore())
    ai.observer = lambda: seen.append(c.state.busy)

    assert c.state.busy is False
    _run(c.generate_problem())
    assert c.state.busy is False
    _run(c.submit_answer("10"))
    assert c.state.busy is False
    assert seen == [True, True]


def test_busy_reset_after_failure():
    c = InteractionController(ai=FakeAI(RequestError("offline")), store=FakeStore())
    _run(c.generate_problem())
    assert c.state.busy is False


def test_submit_correct_answer():
    c, ai, store = _with_problem("Correct! 4 x 2 = 8 and 8 + 2 = 10.")
    _run(c.submit_answer("10"))
    s = c.state
    assert s.correctness is Correctness.CORRECT
    assert s.feedback == "Correct! 4 x 2 = 8 and 8 + 2 = 10."
    assert s.feedback_saved is True
    assert len(store.submissions) == 1
    sub = store.submissions[0]
    assert sub.session_id == s.session_id
    assert sub.user_answer == 10
    assert sub.is_correct is True
    assert sub.feedback_text == s.feedback

    prompt = ai.prompts[1]
    assert "Correct answer: 10" in prompt
    assert "Student's answer: 10" in prompt
    assert "Is correct: true" in prompt


def test_submit_decimal_form_of_integer_is_correct():
    c, _, store = _with_problem("Yes!")
    _run(c.submit_answer("10.0"))
    assert c.state.correctness is Correctness.CORRECT
    assert store.submissions[0].is_correct is True


def test_submit_wrong_answer():
    c, ai, store = _with_problem("Not quite, try multiplying first.")
    _run(c.submit_answer("12"))
    assert c.state.correctness is Correctness.INCORRECT
    assert store.submissions[0].is_correct is False
    assert store.submissions[0].user_answer == 12
    assert "Is correct: false" in ai.prompts[1]


def test_submit_without_problem_is_noop():
    ai = FakeAI()
    store = FakeStore()
    c = InteractionController(ai=ai, store=store)
    _run(c.submit_answer("3"))
    assert ai.prompts == []
    assert store.submissions == []
    assert c.state.feedback == ""


def test_submit_empty_answer_is_noop():
    c, ai, store = _with_problem()
    _run(c.submit_answer("   "))
    assert len(ai.prompts) == 1
    assert store.submissions == []
    assert c.state.correctness is Correctness.UNKNOWN


def test_submit_non_number():
    c, ai, store = _with_problem()
    _run(c.submit_answer("ten"))
    assert c.state.feedback == "Please enter a number."
    assert c.state.correctness is Correctness.UNKNOWN
    assert len(ai.prompts) == 1
    assert store.submissions == []


def test_submit_ai_failure_keeps_correctness():
    c, _, store = _with_problem(RequestError("timeout"))
    _run(c.submit_answer("10"))
    assert c.state.feedback == SUBMIT_ERROR_MSG
    assert c.state.correctness is Correctness.CORRECT
    assert c.state.busy is False
    assert store.submissions == []


def test_submit_storage_failure_shows_unsaved_feedback():
    store = FakeStore()
    c, _, _ = _with_problem("Great job!", store=store)
    store.fail_submissions = True
    _run(c.submit_answer("10"))
    assert c.state.feedback == "Great job!"
    assert c.state.feedback_saved is False
    assert c.state.correctness is Correctness.CORRECT
    assert c.state.busy is False


def test_saved_row_agrees_with_its_correctness():
    near_point_three = '{"problem_text": "A cup holds 0.3 litres. How much is in one cup?", "final_answer": 0.3}'
    c, _, store = _with_problem("Nice.", answer_json=near_point_three)
    _run(c.submit_answer("0.30000000000000001"))
    assert c.state.correctness is Correctness.CORRECT
    sub = store.submissions[0]
    assert sub.user_answer == store.sessions[c.state.session_id].correct_answer
    assert sub.is_correct is True


def test_unsaved_notice_cleared_by_next_submit():
    store = FakeStore()
    c, _, _ = _with_problem("Great job!", store=store)
    store.fail_submissions = True
    _run(c.submit_answer("10"))
    assert page_context(c.state)["show_not_saved"] is True

    _run(c.submit_answer("abc"))
    assert c.state.feedback == "Please enter a number."
    assert c.state.feedback_saved is True
    assert page_context(c.state)["show_not_saved"] is False
