"""
Exam session controller: load -> sample -> shuffle -> run -> submit.

States: loading -> ready | failed, ready -> running, running -> submitted.
failed and submitted are terminal. Submission (manual or forced by the
clock) grades exactly once; later calls return the stored result.
"""
import logging
import random
import time
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from examcore import config
from examcore.clock import SessionClock
from examcore.errors import EmptyBankError, ExamEngineError, ProviderError
from examcore.grader import grade
from examcore.ledger import AnswerLedger
from examcore.models import Answer, ExamDefinition, ExamResult, ExamRunParameters, SessionQuestion, normalize_bank
from examcore.providers import QuestionBankProvider, provider_for_exam
from examcore.sampler import sample_questions
from examcore.shuffler import build_session_questions

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
RUNNING = "running"
SUBMITTED = "submitted"
FAILED = "failed"

EMPTY_BANK_MESSAGE = "This exam has no questions yet."
LOAD_FAILED_MESSAGE = "Could not load the exam. Please go back and try again."

# confirm(answered, total) -> bool
ConfirmCallback = Callable[[int, int], bool]


class ExamSession:
    """One learner attempt at a sampled, shuffled question set."""

    def __init__(
        self,
        exam_id: str,
        params: ExamRunParameters,
        provider: QuestionBankProvider,
        rng: Optional[random.Random] = None,
        time_func: Callable[[], float] = time.monotonic,
    ):
        self.session_id = uuid4()
        self.exam_id = str(exam_id)
        self.params = params
        self.provider = provider
        self.rng = rng or config.make_rng()
        self._time_func = time_func

        self.state = LOADING
        self.error: Optional[str] = None
        self.exception: Optional[Exception] = None
        self.questions: List[SessionQuestion] = []
        self._by_id: Dict[int, SessionQuestion] = {}
        self.ledger = AnswerLedger(params.mode)
        self.clock: Optional[SessionClock] = None
        self.result: Optional[ExamResult] = None
        self.forced = False
        self.closed = False

        self._load()
        if self.state == READY:
            self._start()

    @classmethod
    def for_exam(
        cls,
        exam: ExamDefinition,
        mode: str,
        provider: Optional[QuestionBankProvider] = None,
        **kwargs,
    ) -> "ExamSession":
        """Build run parameters from the exam metadata and pick its provider."""
        params = ExamRunParameters.from_exam(exam, mode)
        return cls(exam.id, params, provider or provider_for_exam(exam), **kwargs)

    # ---- lifecycle ----

    def _load(self) -> None:
        try:
            raw = self.provider.fetch(self.exam_id)
            records = normalize_bank(raw)
            if not records:
                raise EmptyBankError(f"Exam {self.exam_id} has no usable questions")
            selected = sample_questions(records, self.params.limit, self.params.questions_count, self.rng)
            self.questions = build_session_questions(selected, self.rng)
        except EmptyBankError as e:
            self._fail(EMPTY_BANK_MESSAGE, e)
            return
        except ProviderError as e:
            self._fail(LOAD_FAILED_MESSAGE, e)
            return
        except Exception as e:
            self._fail(LOAD_FAILED_MESSAGE, ProviderError(str(e)))
            return

        self._by_id = {q.session_id: q for q in self.questions}
        self.state = READY
        logger.info(f"Session {self.session_id}: exam {self.exam_id} ready with {len(self.questions)} questions ({self.params.mode})")

    def _fail(self, message: str, exc: ExamEngineError) -> None:
        self.state = FAILED
        self.error = message
        self.exception = exc
        logger.error(f"Session {self.session_id}: failed to load exam {self.exam_id}: {exc}")

    def _start(self) -> None:
        self.state = RUNNING
        if self.params.is_real:
            self.clock = SessionClock(self.params.duration_minutes, self.force_submit, time_func=self._time_func)
            self.clock.start()

    def close(self) -> None:
        """Tear the session down (learner exit). Stops the clock; safe to call repeatedly."""
        if self.clock is not None:
            self.clock.stop()
        if not self.closed:
            logger.info(f"Session {self.session_id}: closed in state {self.state}")
        self.closed = True

    def retry(self) -> "ExamSession":
        """Close this attempt and start a fresh one with the same exam and parameters."""
        self.close()
        return ExamSession(self.exam_id, self.params, self.provider, rng=self.rng, time_func=self._time_func)

    # ---- answering ----

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING and not self.closed

    @property
    def is_submitted(self) -> bool:
        return self.state == SUBMITTED

    def question(self, session_id: int) -> SessionQuestion:
        return self._by_id[session_id]

    def set_answer(self, session_id: int, value: Answer) -> bool:
        if not self.is_running:
            return False
        question = self._by_id.get(session_id)
        if question is None:
            logger.warning(f"Session {self.session_id}: unknown question {session_id}")
            return False
        return self.ledger.set_answer(question, value)

    def answer_of(self, session_id: int) -> Optional[Answer]:
        return self.ledger.get(session_id)

    def is_revealed(self, session_id: int) -> bool:
        return self.ledger.is_revealed(self._by_id[session_id])

    def status(self, session_id: int) -> str:
        return self.ledger.question_status(self._by_id[session_id])

    def progress(self):
        return self.ledger.progress(len(self.questions))

    # ---- clock ----

    def tick(self) -> None:
        if self.clock is not None and self.is_running:
            self.clock.tick()

    def catch_up(self, now: Optional[float] = None) -> None:
        if self.clock is not None and self.is_running:
            self.clock.catch_up(now)

    @property
    def time_left(self) -> Optional[int]:
        return self.clock.time_left if self.clock is not None else None

    # ---- submission ----

    @property
    def needs_submit_confirmation(self) -> bool:
        return self.is_running and self.params.is_real and len(self.ledger) < len(self.questions)

    @property
    def needs_exit_confirmation(self) -> bool:
        return self.is_running and len(self.ledger) > 0

    def request_submit(self, confirm: Optional[ConfirmCallback] = None) -> bool:
        """
        Learner-initiated submit. Returns True once the session is submitted.

        Real mode asks confirm(answered, total) before submitting; without a
        callback, an incomplete real-mode attempt is not submitted.
        """
        if self.is_submitted:
            return True
        if not self.is_running:
            return False
        if self.params.is_real:
            answered, total, _ = self.progress()
            if confirm is not None:
                if not confirm(answered, total):
                    logger.info(f"Session {self.session_id}: submit declined ({answered}/{total} answered)")
                    return False
            elif answered < total:
                return False
        self._submit(forced=False)
        return True

    def force_submit(self) -> None:
        """Clock-initiated submit; no confirmation."""
        if not self.is_running:
            return
        self._submit(forced=True)

    def _submit(self, forced: bool) -> None:
        self.state = SUBMITTED
        self.forced = forced
        self.ledger.freeze()
        if self.clock is not None:
            self.clock.stop()
        self.result = grade(self.questions, self.ledger)
        logger.info(
            f"Session {self.session_id} submitted ({'auto' if forced else 'manual'}): "
            f"Score={self.result.score}/{self.result.total_questions}"
        )
