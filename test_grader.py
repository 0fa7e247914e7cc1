"""Scoring: multiple choice only, essays shown but never graded."""
from engine import MODE_REAL
from examcore.grader import grade, score
from examcore.ledger import AnswerLedger
from examcore.models import ESSAY, SessionQuestion


def _mc(sid, correct):
    return SessionQuestion(session_id=sid, text=f"q{sid}", options=("a", "b", "c", "d"), correct_index=correct)


def _essay(sid):
    return SessionQuestion(session_id=sid, text=f"e{sid}", options=(), correct_index=-1, type=ESSAY)


def test_score_counts_matching_answers():
    questions = [_mc(1, 0), _mc(2, 3), _mc(3, 1), _mc(4, 2)]
    ledger = AnswerLedger(MODE_REAL)
    ledger.set_answer(questions[0], 0)
    ledger.set_answer(questions[1], 3)
    ledger.set_answer(questions[2], 2)
    assert score(questions, ledger) == 2


def test_essay_only_exam_scores_zero():
    questions = [_essay(1), _essay(2), _essay(3)]
    ledger = AnswerLedger(MODE_REAL)
    for q in questions:
        ledger.set_answer(q, f"answer {q.session_id}")

    result = grade(questions, ledger)
    assert result.score == 0
    assert result.total_graded == 0
    assert result.total_questions == 3
    assert all(o.correct is None for o in result.per_question)
    assert result.per_question[0].answer == "answer 1"


def test_mixed_exam_result():
    questions = [_mc(1, 1), _essay(2), _mc(3, 0), _mc(4, 2)]
    ledger = AnswerLedger(MODE_REAL)
    ledger.set_answer(questions[0], 1)
    ledger.set_answer(questions[1], "essay text")
    ledger.set_answer(questions[2], 3)

    result = grade(questions, ledger)
    assert result.score == 1
    assert result.total_graded == 3
    assert result.total_questions == 4
    assert result.percent == 25
    assert [o.correct for o in result.per_question] == [True, None, False, False]
    assert result.per_question[3].answer is None


def test_question_without_correct_answer_never_scores():
    question = SessionQuestion(session_id=1, text="broken", options=("a", "b"), correct_index=-1)
    ledger = AnswerLedger(MODE_REAL)
    ledger.set_answer(question, 0)
    result = grade([question], ledger)
    assert result.score == 0
    assert result.total_graded == 1


def test_result_wire_shape():
    questions = [_mc(1, 2), _essay(2)]
    ledger = AnswerLedger(MODE_REAL)
    ledger.set_answer(questions[0], 2)
    assert grade(questions, ledger).to_dict() == {
        "score": 1,
        "totalGraded": 1,
        "totalQuestions": 2,
        "perQuestion": [
            {"sessionId": 1, "answer": 2, "correct": True},
            {"sessionId": 2, "answer": None, "correct": None},
        ],
    }
