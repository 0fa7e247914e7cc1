"""Question sampling: uniform shuffle of the whole bank, then truncate to the resolved limit."""
import logging
import random
from typing import Any, List, Optional, Sequence

from examcore.errors import EmptyBankError
from examcore.models import QuestionRecord, parse_int

logger = logging.getLogger(__name__)


def resolve_limit(limit: Any, questions_count: Any, bank_size: int) -> int:
    """
    Resolve how many questions a session takes.

    Priority: explicit limit > 0, then a numeric `questions` count > 0, then the whole bank.
    The result is never larger than the bank.
    """
    resolved = bank_size
    explicit = parse_int(limit)
    if explicit is not None and explicit > 0:
        resolved = explicit
    elif isinstance(questions_count, int) and not isinstance(questions_count, bool) and questions_count > 0:
        resolved = questions_count
    return min(resolved, bank_size)


def sample_questions(
    bank: Sequence[QuestionRecord],
    limit: Any = None,
    questions_count: Any = None,
    rng: Optional[random.Random] = None,
) -> List[QuestionRecord]:
    """
    Pick the working set for a session.

    The full bank is permuted first so every member has the same chance of
    surviving the truncation.
    """
    if not bank:
        raise EmptyBankError("Question bank is empty")
    rng = rng or random.Random()

    size = resolve_limit(limit, questions_count, len(bank))
    pool = list(bank)
    rng.shuffle(pool)
    selected = pool[:size]

    logger.info(f"Sampled {len(selected)} of {len(bank)} questions")
    return selected
