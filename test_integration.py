#!/usr/bin/env python3
"""
Integration test: bundled exams + session workflow.
Demonstrates:
1. Loading exam metadata and questions from the static bundle
2. Sampling, option shuffling and correct-answer remapping
3. Timed auto-submission and scoring
"""
import logging
import random
from pathlib import Path

from engine import MODE_PRACTICE, MODE_REAL
from examcore.models import ExamRunParameters
from examcore.providers import StaticBankProvider, load_static_exams
from examcore.session import ExamSession

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

DATA = Path(__file__).resolve().parent / "data"


def _exams():
    return {e.id: e for e in load_static_exams(DATA / "exams.json")}


def test_real_exam_workflow():
    """Full end-to-end run of a timed exam that the clock submits."""
    exam = _exams()["1"]
    provider = StaticBankProvider(DATA / "questions.json")
    session = ExamSession.for_exam(exam, MODE_REAL, provider=provider, rng=random.Random(3))

    logger.info(f"Created session {session.session_id} for '{exam.title}'")
    assert session.state == "running"
    assert len(session.questions) == 5
    assert session.time_left == exam.time * 60

    # Answer the first two correctly, the third wrongly, leave the rest
    q1, q2, q3 = session.questions[:3]
    session.set_answer(q1.session_id, q1.correct_index)
    session.set_answer(q2.session_id, q2.correct_index)
    session.set_answer(q3.session_id, (q3.correct_index + 1) % len(q3.options))
    assert session.needs_submit_confirmation

    while session.is_running:
        session.tick()

    result = session.result
    logger.info(f"Score: {result.score}/{result.total_questions} ({result.percent}%)")
    assert session.forced
    assert result.score == 2
    assert result.total_graded == 5
    assert [o.correct for o in result.per_question] == [True, True, False, False, False]


def test_mixed_exam_counts_essay_as_shown_but_ungraded():
    exam = _exams()["2"]
    provider = StaticBankProvider(DATA / "questions.json")
    session = ExamSession.for_exam(exam, MODE_PRACTICE, provider=provider, rng=random.Random(8))

    # `questions: 4` in exams.json caps the six bundled questions
    assert len(session.questions) == 4
    for q in session.questions:
        if q.is_essay:
            session.set_answer(q.session_id, "Lists are mutable.")
        else:
            session.set_answer(q.session_id, q.correct_index)

    assert session.request_submit()
    result = session.result
    graded = sum(1 for q in session.questions if q.is_graded)
    assert result.score == graded
    assert result.total_graded == graded
    assert result.total_questions == 4


def test_essay_only_exam():
    exam = _exams()["3"]
    provider = StaticBankProvider(DATA / "questions.json")
    session = ExamSession.for_exam(exam, MODE_REAL, provider=provider)
    for q in session.questions:
        session.set_answer(q.session_id, f"Answer to {q.text}")
    assert session.request_submit()
    assert (session.result.score, session.result.total_graded, session.result.total_questions) == (0, 0, 3)


def test_unknown_exam_fails():
    provider = StaticBankProvider(DATA / "questions.json")
    session = ExamSession("404", ExamRunParameters(mode=MODE_REAL), provider)
    assert session.state == "failed"
    assert session.clock is None


if __name__ == "__main__":
    test_real_exam_workflow()
    test_mixed_exam_counts_essay_as_shown_but_ungraded()
    test_essay_only_exam()
    test_unknown_exam_fails()
    logger.info("✓ Integration test completed successfully")
