"""Learner answers for one session, with the per-mode mutability and reveal rules."""
import logging
from typing import Dict, Iterable, Optional, Tuple

from engine import MODE_PRACTICE
from examcore.models import Answer, SessionQuestion, as_int

logger = logging.getLogger(__name__)

# Question map states
UNANSWERED = "unanswered"
ANSWERED = "answered"
CORRECT = "correct"
INCORRECT = "incorrect"
ESSAY_DONE = "essay"
MISSED = "missed"


class AnswerLedger:
    """
    Maps session_id -> answer (option index or essay text).

    Practice mode locks a multiple choice question on its first answer; real
    mode allows overwrites. Essay text stays editable until the ledger is
    frozen in both modes, and blank text clears the entry.
    """

    def __init__(self, mode: str):
        self.mode = mode
        self.entries: Dict[int, Answer] = {}
        self.frozen = False

    def __contains__(self, session_id: int) -> bool:
        return session_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, session_id: int) -> Optional[Answer]:
        return self.entries.get(session_id)

    def freeze(self) -> None:
        self.frozen = True

    def set_answer(self, question: SessionQuestion, value: Answer) -> bool:
        """Record an answer. Returns False when the rules reject it (nothing changes)."""
        if self.frozen:
            return False

        sid = question.session_id
        if question.is_essay:
            if not isinstance(value, str):
                return False
            if value.strip():
                self.entries[sid] = value
            else:
                self.entries.pop(sid, None)
            return True

        index = as_int(value)
        if index is None or not 0 <= index < len(question.options):
            logger.debug(f"Rejected option {value!r} for question {sid}")
            return False
        if self.mode == MODE_PRACTICE and sid in self.entries:
            return False
        self.entries[sid] = index
        return True

    def is_revealed(self, question: SessionQuestion) -> bool:
        """Practice reveals answered questions at once; real mode waits for submission."""
        if self.frozen:
            return True
        return self.mode == MODE_PRACTICE and question.session_id in self.entries

    def question_status(self, question: SessionQuestion) -> str:
        answer = self.entries.get(question.session_id)
        if self.is_revealed(question):
            if question.is_essay:
                return ESSAY_DONE
            if answer is None:
                return MISSED
            return CORRECT if answer == question.correct_index else INCORRECT
        return ANSWERED if answer is not None else UNANSWERED

    def unanswered(self, questions: Iterable[SessionQuestion]) -> Tuple[int, ...]:
        return tuple(q.session_id for q in questions if q.session_id not in self.entries)

    def progress(self, total: int) -> Tuple[int, int, int]:
        """(answered, total, percent)."""
        done = len(self.entries)
        percent = 0 if total == 0 else round(done / total * 100)
        return done, total, percent
