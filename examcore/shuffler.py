"""Per-question option shuffling with correct-answer remapping."""
import logging
import random
from typing import List, Optional, Sequence, Tuple

from examcore.models import NO_CORRECT_ANSWER, QuestionRecord, SessionQuestion

logger = logging.getLogger(__name__)


def shuffle_options(record: QuestionRecord, rng: random.Random) -> Tuple[Tuple[str, ...], int]:
    """
    Return (options, correct_index) after a uniform permutation.

    Each option travels with its original position, so the correct pointer
    follows the original correct slot even when two options share the same text.
    Records without a usable answer keep their source order and -1.
    """
    if record.is_essay:
        return (), NO_CORRECT_ANSWER
    if not record.has_valid_answer:
        return record.options, NO_CORRECT_ANSWER

    tagged = list(enumerate(record.options))
    rng.shuffle(tagged)
    options = tuple(text for _, text in tagged)
    correct_index = next(pos for pos, (orig, _) in enumerate(tagged) if orig == record.correct_index)
    return options, correct_index


def build_session_questions(
    records: Sequence[QuestionRecord], rng: Optional[random.Random] = None
) -> List[SessionQuestion]:
    """Turn sampled records into session questions numbered 1..N in sampled order."""
    rng = rng or random.Random()
    questions = []
    for session_id, record in enumerate(records, start=1):
        options, correct_index = shuffle_options(record, rng)
        questions.append(
            SessionQuestion(
                session_id=session_id,
                text=record.text,
                options=options,
                correct_index=correct_index,
                type=record.type,
                explanation=record.explanation,
            )
        )
    ungraded = sum(1 for q in questions if q.is_graded and q.correct_index == NO_CORRECT_ANSWER)
    if ungraded:
        logger.debug(f"{ungraded} multiple choice question(s) have no valid correct answer")
    return questions
