"""Record normalization and run parameters."""
import pytest

from engine import DEFAULT_DURATION_MINUTES, MODE_PRACTICE, MODE_REAL
from examcore.errors import InvalidRecordError
from examcore.models import (
    ESSAY,
    MULTIPLE_CHOICE,
    NO_CORRECT_ANSWER,
    ExamDefinition,
    ExamRunParameters,
    QuestionRecord,
    normalize_bank,
    parse_int,
    plain_text,
)


def test_record_accepts_key_aliases():
    a = QuestionRecord.from_raw({"text": "t", "options": ["x", "y"], "correctIndex": 1})
    b = QuestionRecord.from_raw({"question": "t", "options": ["x", "y"], "answer": 1})
    c = QuestionRecord.from_raw({"question": "t", "options": ["x", "y"], "correct_answer_idx": 1})
    assert a == b == c
    assert a.type == MULTIPLE_CHOICE


def test_permissive_defaults():
    record = QuestionRecord.from_raw({"question": "no options"})
    assert record.options == ()
    assert record.correct_index == NO_CORRECT_ANSWER
    assert record.type == MULTIPLE_CHOICE
    assert record.explanation is None

    for bad in ("2", 1.5, None, True, [1]):
        assert QuestionRecord.from_raw({"options": ["a", "b"], "answer": bad}).correct_index == NO_CORRECT_ANSWER
    assert QuestionRecord.from_raw({"options": ["a", "b"], "answer": 1.0}).correct_index == 1
    assert QuestionRecord.from_raw({"options": "a,b"}).options == ()
    assert QuestionRecord.from_raw({"type": "matching"}).type == MULTIPLE_CHOICE


def test_essay_drops_options():
    record = QuestionRecord.from_raw({"question": "Explain", "type": ESSAY, "options": ["a"], "answer": 0})
    assert record.is_essay
    assert record.options == ()
    assert record.correct_index == NO_CORRECT_ANSWER


def test_non_mapping_record_is_invalid():
    with pytest.raises(InvalidRecordError):
        QuestionRecord.from_raw("just a string")


def test_normalize_bank_drops_bad_entries():
    records = normalize_bank([{"question": "ok", "options": ["a"], "answer": 0}, 42, None])
    assert len(records) == 1
    assert normalize_bank({"questions": []}) == []
    assert normalize_bank(None) == []


def test_parse_int():
    assert parse_int("40") == 40
    assert parse_int(" 45 min") == 45
    assert parse_int(30.7) == 30
    assert parse_int("abc") is None
    assert parse_int(None) is None
    assert parse_int(False) is None


def test_run_parameters_from_exam():
    exam = ExamDefinition.from_dict({"id": 3, "time": "abc", "limit": None, "questions": 12})
    params = ExamRunParameters.from_exam(exam, MODE_REAL)
    assert params.duration_minutes == DEFAULT_DURATION_MINUTES
    assert params.limit is None
    assert params.questions_count == 12
    assert params.is_real

    listed = ExamDefinition.from_dict({"id": 4, "time": 20, "questions": [{"question": "q"}]})
    params = ExamRunParameters.from_exam(listed, MODE_PRACTICE)
    assert params.duration_minutes == 20
    assert params.questions_count is None
    assert listed.embedded_questions == [{"question": "q"}]


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        ExamRunParameters(mode="exam")


def test_plain_text_strips_markup():
    assert plain_text("The <b>Pacific</b> is largest.") == "The Pacific is largest."
    assert plain_text(None) == ""
