"""Scoring: +1 per multiple choice answer that matches the remapped correct index. Essays are never graded."""
import logging
from typing import Sequence

from examcore.ledger import AnswerLedger
from examcore.models import ExamResult, QuestionOutcome, SessionQuestion

logger = logging.getLogger(__name__)


def is_correct(question: SessionQuestion, ledger: AnswerLedger) -> bool:
    answer = ledger.get(question.session_id)
    return question.is_graded and answer is not None and answer == question.correct_index


def score(questions: Sequence[SessionQuestion], ledger: AnswerLedger) -> int:
    return sum(1 for q in questions if is_correct(q, ledger))


def grade(questions: Sequence[SessionQuestion], ledger: AnswerLedger) -> ExamResult:
    """
    Build the terminal result for a session.

    total_questions counts every question shown; total_graded counts only
    multiple choice. Essay outcomes carry correct=None.
    """
    outcomes = []
    for q in questions:
        answer = ledger.get(q.session_id)
        correct = is_correct(q, ledger) if q.is_graded else None
        outcomes.append(QuestionOutcome(session_id=q.session_id, answer=answer, correct=correct))

    result = ExamResult(
        score=sum(1 for o in outcomes if o.correct),
        total_graded=sum(1 for q in questions if q.is_graded),
        total_questions=len(questions),
        per_question=outcomes,
    )
    logger.info(f"Graded: {result.score}/{result.total_graded} correct ({result.total_questions} questions)")
    return result
