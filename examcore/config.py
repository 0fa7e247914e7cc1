"""Environment-backed settings (.env is loaded on import)."""
import os
import random
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

EXAM_API_BASE_URL = os.getenv("EXAM_API_BASE_URL")
EXAM_STATIC_QUESTIONS = os.getenv("EXAM_STATIC_QUESTIONS", "data/questions.json")
EXAM_STATIC_EXAMS = os.getenv("EXAM_STATIC_EXAMS", "data/exams.json")
EXAM_SEED = os.getenv("EXAM_SEED")


def make_rng(seed: Optional[int] = None) -> random.Random:
    """RNG for sampling/shuffling; EXAM_SEED makes runs reproducible when no seed is passed."""
    if seed is None and EXAM_SEED is not None:
        try:
            seed = int(EXAM_SEED)
        except ValueError:
            seed = None
    return random.Random(seed)
