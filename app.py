"""Exam runner: pick an exam and a mode, take the session, see the result."""
import logging
import sys
import time
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st

from engine import MODE_PRACTICE, MODE_REAL, option_label
from examcore.errors import ProviderError
from examcore.models import ExamDefinition, plain_text
from examcore.providers import load_static_exams
from examcore.session import ExamSession

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

STATUS_ICONS = {
    "unanswered": "⬜",
    "answered": "🟦",
    "correct": "🟩",
    "incorrect": "🟥",
    "essay": "🟨",
    "missed": "⬛",
}

st.set_page_config(page_title="Exam Practice", layout="wide")
st.sidebar.title("Exam Practice")


def _load_exams() -> list[ExamDefinition]:
    exams = []
    try:
        exams.extend(load_static_exams())
    except ProviderError as e:
        st.warning(f"Could not read bundled exams: {e}")
    try:
        from db import get_exams

        exams.extend(ExamDefinition.from_dict(r) for r in get_exams())
    except Exception as e:
        logging.getLogger(__name__).warning(f"Remote exam list unavailable: {e}")
    return exams


def _exit_session():
    session = st.session_state.get("exam_session")
    if session is not None:
        session.close()
    st.session_state["exam_session"] = None
    st.session_state["confirm_submit"] = False
    st.session_state["confirm_exit"] = False
    st.rerun()


if "exam_session" not in st.session_state:
    st.session_state["exam_session"] = None
if "confirm_submit" not in st.session_state:
    st.session_state["confirm_submit"] = False
if "confirm_exit" not in st.session_state:
    st.session_state["confirm_exit"] = False

session: ExamSession | None = st.session_state["exam_session"]

# ----- Exam library -----
if session is None:
    st.header("Exams")
    exams = _load_exams()
    if not exams:
        st.info("No exams available. Add data/exams.json or configure SUPABASE_URL / SUPABASE_KEY.")
        st.stop()

    exam = st.selectbox("Select exam", exams, format_func=lambda e: e.title or f"Exam {e.id}")
    mode = st.radio(
        "Mode",
        [MODE_PRACTICE, MODE_REAL],
        format_func=lambda m: "Practice (instant feedback)" if m == MODE_PRACTICE else "Real exam (timed)",
        horizontal=True,
    )
    if st.button("Start", type="primary", use_container_width=True):
        st.session_state["exam_session"] = ExamSession.for_exam(exam, mode)
        st.rerun()
    st.stop()

# ----- Failed to load -----
if session.state == "failed":
    st.error(session.error)
    if st.button("Back to exams"):
        _exit_session()
    st.stop()

# Clock is driven by reruns: apply every whole second since the last one
session.catch_up()

# ----- Header / sidebar -----
st.header("Real exam" if session.params.is_real else "Practice")
answered, total, percent = session.progress()
st.sidebar.progress(percent / 100)
st.sidebar.caption(f"{answered}/{total} answered ({percent}%)")

if session.clock is not None and not session.is_submitted:
    label = "Time left ⚠️" if session.clock.is_running_low else "Time left"
    st.sidebar.metric(label, session.clock.display)

map_cols = st.sidebar.columns(5)
for i, q in enumerate(session.questions):
    map_cols[i % 5].write(f"{STATUS_ICONS[session.status(q.session_id)]} {i + 1}")

# ----- Result -----
if session.is_submitted:
    result = session.result
    if session.forced:
        st.warning("Time is up. Your exam was submitted automatically.")
    st.metric("Score", f"{result.score}/{result.total_questions}", f"{result.percent}%")
    if result.total_graded < result.total_questions:
        st.caption(f"{result.total_questions - result.total_graded} essay question(s) are not graded.")

# ----- Questions -----
for i, q in enumerate(session.questions):
    st.subheader(f"Question {i + 1}")
    st.markdown(q.text, unsafe_allow_html=True)
    user_ans = session.answer_of(q.session_id)
    revealed = session.is_revealed(q.session_id)

    if q.is_essay:
        text = st.text_area(
            "Your answer",
            value=user_ans or "",
            key=f"essay_{session.session_id}_{q.session_id}",
            disabled=not session.is_running,
        )
        if session.is_running and text != (user_ans or ""):
            session.set_answer(q.session_id, text)
    elif revealed:
        for j, opt in enumerate(q.options):
            label = f"{option_label(j)}. {plain_text(opt)}"
            if j == q.correct_index:
                st.success(f"✓ {label}")
            elif j == user_ans:
                st.error(f"✗ {label}")
            else:
                st.write(f"○ {label}")
    else:
        choice = st.radio(
            "Choose one:",
            list(range(len(q.options))),
            format_func=lambda j, q=q: f"{option_label(j)}. {plain_text(q.options[j])}",
            index=user_ans if isinstance(user_ans, int) else None,
            key=f"mc_{session.session_id}_{q.session_id}",
        )
        if choice is not None and choice != user_ans:
            session.set_answer(q.session_id, choice)
            st.rerun()

    if revealed and q.explanation:
        st.info(plain_text(q.explanation))
    st.divider()

# ----- Actions -----
col1, col2 = st.columns(2)
with col1:
    if session.is_running:
        if st.session_state["confirm_submit"]:
            st.warning(f"You have answered {answered}/{total} questions. Submit now?")
            yes, no = st.columns(2)
            if yes.button("Yes, submit"):
                session.request_submit(confirm=lambda a, t: True)
                st.session_state["confirm_submit"] = False
                st.rerun()
            if no.button("Keep working"):
                st.session_state["confirm_submit"] = False
                st.rerun()
        elif st.button("Submit", type="primary"):
            if session.params.is_real:
                st.session_state["confirm_submit"] = True
            else:
                session.request_submit()
            st.rerun()
    elif st.button("Try again"):
        st.session_state["exam_session"] = session.retry()
        st.rerun()
with col2:
    if st.session_state["confirm_exit"]:
        st.warning("Leave this exam? Your answers will be lost.")
        if st.button("Leave"):
            _exit_session()
    elif st.button("Back to exams"):
        if session.needs_exit_confirmation:
            st.session_state["confirm_exit"] = True
            st.rerun()
        _exit_session()

# Keep the countdown moving while a real exam is running
if session.clock is not None and session.is_running:
    time.sleep(1)
    st.rerun()
