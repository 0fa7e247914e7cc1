"""
Typed records for exam sessions.
Raw provider dicts are normalized once here; everything downstream works on QuestionRecord / SessionQuestion.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup

from engine import DEFAULT_DURATION_MINUTES, MODE_PRACTICE, MODE_REAL
from examcore.errors import InvalidRecordError

logger = logging.getLogger(__name__)

MULTIPLE_CHOICE = "multiple_choice"
ESSAY = "essay"
QUESTION_TYPES = (MULTIPLE_CHOICE, ESSAY)
MODES = (MODE_PRACTICE, MODE_REAL)

NO_CORRECT_ANSWER = -1

# Raw key aliases, first match wins
TEXT_KEYS = ("text", "question")
CORRECT_KEYS = ("correctIndex", "answer", "correct_answer_idx")

Answer = Union[int, str]


def _first_present(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def as_int(value: Any) -> Optional[int]:
    """Strict integer check: bools and floats like 1.5 are not integers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_int(value: Any) -> Optional[int]:
    """Lenient integer parse for exam settings ("40", 40, "40 questions")."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    digits = ""
    for ch in str(value).strip():
        if ch.isdigit() or (ch == "-" and not digits):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def plain_text(html: Optional[str]) -> str:
    """Strip markup from stored question text or explanation."""
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text(separator=" ", strip=True)


@dataclass(frozen=True)
class QuestionRecord:
    text: str
    options: Tuple[str, ...] = ()
    correct_index: int = NO_CORRECT_ANSWER
    type: str = MULTIPLE_CHOICE
    explanation: Optional[str] = None

    @property
    def is_essay(self) -> bool:
        return self.type == ESSAY

    @property
    def has_valid_answer(self) -> bool:
        return 0 <= self.correct_index < len(self.options)

    @classmethod
    def from_raw(cls, raw: Any) -> "QuestionRecord":
        """
        Build a record from a provider dict, repairing what can be repaired.

        Missing options -> (), non-integer answer -> -1, missing/unknown type -> multiple_choice.
        Raises InvalidRecordError only when the entry is not a mapping at all.
        """
        if not isinstance(raw, Mapping):
            raise InvalidRecordError(f"Expected a mapping, got {type(raw).__name__}")

        text = _first_present(raw, TEXT_KEYS)
        text = "" if text is None else str(text)

        qtype = raw.get("type") or MULTIPLE_CHOICE
        if qtype not in QUESTION_TYPES:
            logger.debug(f"Unknown question type {qtype!r}, using {MULTIPLE_CHOICE}")
            qtype = MULTIPLE_CHOICE

        options_raw = raw.get("options")
        if isinstance(options_raw, (list, tuple)):
            options = tuple("" if o is None else str(o) for o in options_raw)
        else:
            options = ()

        correct = as_int(_first_present(raw, CORRECT_KEYS))
        if correct is None:
            correct = NO_CORRECT_ANSWER

        explanation = raw.get("explanation")
        if explanation is not None:
            explanation = str(explanation) or None

        if qtype == ESSAY:
            options = ()
            correct = NO_CORRECT_ANSWER

        return cls(text=text, options=options, correct_index=correct, type=qtype, explanation=explanation)


def normalize_bank(raw_questions: Any) -> List[QuestionRecord]:
    """Normalize a provider payload. Non-list payloads yield an empty bank; bad entries are dropped."""
    if not isinstance(raw_questions, (list, tuple)):
        logger.debug(f"Question payload is {type(raw_questions).__name__}, treating as empty")
        return []
    records = []
    for i, raw in enumerate(raw_questions):
        try:
            records.append(QuestionRecord.from_raw(raw))
        except InvalidRecordError as e:
            logger.debug(f"Dropping record {i}: {e}")
    return records


@dataclass(frozen=True)
class SessionQuestion:
    session_id: int
    text: str
    options: Tuple[str, ...]
    correct_index: int
    type: str = MULTIPLE_CHOICE
    explanation: Optional[str] = None

    @property
    def is_essay(self) -> bool:
        return self.type == ESSAY

    @property
    def is_graded(self) -> bool:
        return self.type == MULTIPLE_CHOICE

    @property
    def correct_option(self) -> Optional[str]:
        if 0 <= self.correct_index < len(self.options):
            return self.options[self.correct_index]
        return None


@dataclass(frozen=True)
class ExamDefinition:
    """Exam metadata as listed by the exam library."""

    id: str
    title: str = ""
    time: Any = None
    limit: Any = None
    questions: Any = None
    is_static: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExamDefinition":
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or ""),
            time=raw.get("time"),
            limit=raw.get("limit"),
            questions=raw.get("questions"),
            is_static=bool(raw.get("isStatic", raw.get("is_static", False))),
        )

    @property
    def embedded_questions(self) -> Optional[list]:
        if isinstance(self.questions, list) and self.questions:
            return self.questions
        return None

    @property
    def question_count(self) -> Optional[int]:
        """The `questions` field when it encodes a count instead of a list."""
        return as_int(self.questions)


@dataclass(frozen=True)
class ExamRunParameters:
    mode: str = MODE_PRACTICE
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    limit: Optional[int] = None
    questions_count: Optional[int] = None

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"Unknown exam mode {self.mode!r}, expected one of {MODES}")

    @property
    def is_real(self) -> bool:
        return self.mode == MODE_REAL

    @classmethod
    def from_exam(cls, exam: ExamDefinition, mode: str) -> "ExamRunParameters":
        duration = parse_int(exam.time)
        if not duration:
            duration = DEFAULT_DURATION_MINUTES
        return cls(
            mode=mode,
            duration_minutes=duration,
            limit=parse_int(exam.limit),
            questions_count=exam.question_count,
        )


@dataclass
class QuestionOutcome:
    session_id: int
    answer: Optional[Answer]
    correct: Optional[bool]

    def to_dict(self) -> Dict[str, Any]:
        return {"sessionId": self.session_id, "answer": self.answer, "correct": self.correct}


@dataclass
class ExamResult:
    score: int
    total_graded: int
    total_questions: int
    per_question: List[QuestionOutcome] = field(default_factory=list)

    @property
    def percent(self) -> int:
        if self.total_questions == 0:
            return 0
        return round(self.score / self.total_questions * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "totalGraded": self.total_graded,
            "totalQuestions": self.total_questions,
            "perQuestion": [o.to_dict() for o in self.per_question],
        }
