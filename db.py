"""Supabase reads for exam definitions and question banks. Client is cached via Streamlit."""
import logging
import os

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

logger = logging.getLogger(__name__)


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


@st.cache_resource
def get_supabase() -> Client:
    return _env_client()


def get_supabase_uncached() -> Client:
    """For CLI/scripts (no Streamlit context)."""
    return _env_client()


# --- Exams ---

def get_exams(client: Client | None = None, limit: int = 200) -> list[dict]:
    """Exam metadata for the library list (without the question bank column)."""
    client = client or get_supabase()
    r = (
        client.table("exams")
        .select("id", "title", "time", "limit", "questions")
        .order("title")
        .limit(limit)
        .execute()
    )
    return r.data or []


def get_exam(exam_id: str, client: Client | None = None) -> dict | None:
    client = client or get_supabase()
    r = client.table("exams").select("*").eq("id", str(exam_id)).limit(1).execute()
    rows = r.data or []
    return rows[0] if rows else None


def get_question_bank(exam_id: str, client: Client | None = None) -> list:
    """Raw question records stored on the exam row; [] when the exam has none."""
    exam = get_exam(exam_id, client=client)
    if not exam:
        logger.warning(f"Exam {exam_id} not found")
        return []
    return exam.get("question_bank") or []
