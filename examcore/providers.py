"""
Question bank providers.

A provider turns an exam id into the raw ordered list of question dicts.
Transport and parse failures are raised as ProviderError; an exam with no
questions comes back as an empty list and is rejected later by the session.
"""
import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol

import requests

from examcore import config
from examcore.errors import ProviderError
from examcore.models import ExamDefinition

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15


class QuestionBankProvider(Protocol):
    def fetch(self, exam_id: str) -> List[Any]:
        ...


class EmbeddedBankProvider:
    """Serves questions already embedded in the exam definition."""

    def __init__(self, questions: List[Any]):
        self.questions = list(questions)

    def fetch(self, exam_id: str) -> List[Any]:
        return list(self.questions)


class StaticBankProvider:
    """Reads a bundled JSON file shaped {"<exam id>": [question, ...]}."""

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path or config.EXAM_STATIC_QUESTIONS)
        self._data: Optional[dict] = None

    def _load(self) -> dict:
        if self._data is None:
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ProviderError(f"Could not read question bundle {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise ProviderError(f"Question bundle {self.path} must be a JSON object keyed by exam id")
            self._data = data
        return self._data

    def fetch(self, exam_id: str) -> List[Any]:
        # Ids in the bundle are strings ("1") while callers may pass 1
        return self._load().get(str(exam_id)) or []


class SupabaseBankProvider:
    """Reads the `question_bank` column of the `exams` table."""

    def __init__(self, client=None, fetch_bank: Optional[Callable[..., List[Any]]] = None):
        self.client = client
        self._fetch_bank = fetch_bank

    def fetch(self, exam_id: str) -> List[Any]:
        fetch_bank = self._fetch_bank
        if fetch_bank is None:
            from db import get_question_bank

            fetch_bank = get_question_bank
        try:
            return fetch_bank(exam_id, client=self.client)
        except Exception as e:
            raise ProviderError(f"Supabase fetch failed for exam {exam_id}: {e}") from e


class HttpBankProvider:
    """GET {base_url}/api/exams/{id} -> {"success": true, "exam": {"questionBank": [...]}}."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None, timeout: int = REQUEST_TIMEOUT):
        base_url = base_url or config.EXAM_API_BASE_URL
        if not base_url:
            raise ValueError("EXAM_API_BASE_URL must be set for the HTTP provider")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, exam_id: str) -> List[Any]:
        url = f"{self.base_url}/api/exams/{exam_id}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise ProviderError(f"Request failed for {url}: {e}") from e
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {url}: {e}") from e

        if isinstance(data, dict) and data.get("success") and isinstance(data.get("exam"), dict):
            return data["exam"].get("questionBank") or []
        logger.warning(f"No question bank in response for exam {exam_id}")
        return []


def default_remote_provider() -> QuestionBankProvider:
    """HTTP API when EXAM_API_BASE_URL is configured, Supabase otherwise."""
    if config.EXAM_API_BASE_URL:
        return HttpBankProvider(config.EXAM_API_BASE_URL)
    return SupabaseBankProvider()


def provider_for_exam(
    exam: ExamDefinition,
    static_path: Optional[str | Path] = None,
    remote: Optional[QuestionBankProvider] = None,
) -> QuestionBankProvider:
    """Embedded questions win, then the static bundle for static exams, then the remote store."""
    if exam.embedded_questions:
        return EmbeddedBankProvider(exam.embedded_questions)
    if exam.is_static:
        return StaticBankProvider(static_path)
    return remote or default_remote_provider()


def load_static_exams(path: Optional[str | Path] = None) -> List[ExamDefinition]:
    """Exam list bundled next to the static questions (exams.json); [] when absent."""
    path = Path(path or config.EXAM_STATIC_EXAMS)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning(f"No static exam list at {path}")
        return []
    except (OSError, json.JSONDecodeError) as e:
        raise ProviderError(f"Could not read exam list {path}: {e}") from e
    return [ExamDefinition.from_dict({**r, "isStatic": r.get("isStatic", True)}) for r in raw if isinstance(r, dict)]
