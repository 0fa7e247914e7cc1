"""
Simulate one learner attempt: load an exam, answer some right, some wrong, skip the rest, then submit.
Verifies the remapped correct answers and the score (+1 per correct multiple choice, essays ungraded).

Run: python simulate.py 1 --bundle data/questions.json --mode real --limit 5
     python simulate.py 1 --mode real --time-out        # let the clock run out instead of submitting
     python simulate.py <exam uuid> --supabase           # read the bank from Supabase
"""
import argparse
import logging
import random
import sys
from pathlib import Path

path = Path(__file__).resolve().parent
if str(path) not in sys.path:
    sys.path.insert(0, str(path))

from engine import MODE_PRACTICE, MODE_REAL, option_label
from examcore.models import ExamRunParameters, plain_text
from examcore.providers import StaticBankProvider, SupabaseBankProvider
from examcore.session import ExamSession


def main():
    parser = argparse.ArgumentParser(description="Simulate an exam session and print the graded result.")
    parser.add_argument("exam_id", help="Exam id (key in the JSON bundle, or exams.id in Supabase)")
    parser.add_argument("--bundle", default=None, help="Path to questions.json (default: EXAM_STATIC_QUESTIONS)")
    parser.add_argument("--supabase", action="store_true", help="Read the question bank from Supabase")
    parser.add_argument("--mode", choices=[MODE_PRACTICE, MODE_REAL], default=MODE_REAL)
    parser.add_argument("--duration", type=int, default=1, help="Minutes (real mode, default 1)")
    parser.add_argument("--limit", type=int, default=None, help="Cap on sampled questions")
    parser.add_argument("--correct-ratio", type=float, default=0.5, help="Fraction to answer correctly (default 0.5)")
    parser.add_argument("--wrong-ratio", type=float, default=0.3, help="Fraction to answer wrongly (default 0.3)")
    parser.add_argument("--time-out", action="store_true", help="Tick the clock to zero instead of submitting")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    provider = SupabaseBankProvider() if args.supabase else StaticBankProvider(args.bundle)
    params = ExamRunParameters(mode=args.mode, duration_minutes=args.duration, limit=args.limit)
    rng = random.Random(args.seed)
    session = ExamSession(args.exam_id, params, provider, rng=random.Random(args.seed))

    if session.state == "failed":
        print(f"Could not start exam {args.exam_id}: {session.error}")
        sys.exit(1)

    correct_ratio = max(0, min(1, args.correct_ratio))
    wrong_ratio = max(0, min(1 - correct_ratio, args.wrong_ratio))

    rows = []
    for q in session.questions:
        r = rng.random()
        if q.is_essay:
            outcome = "essay"
            session.set_answer(q.session_id, "Simulated essay answer.")
        elif r < correct_ratio and q.correct_index >= 0:
            outcome = "correct"
            session.set_answer(q.session_id, q.correct_index)
        elif r < correct_ratio + wrong_ratio and len(q.options) > 1:
            outcome = "wrong"
            wrong_options = [j for j in range(len(q.options)) if j != q.correct_index]
            session.set_answer(q.session_id, rng.choice(wrong_options))
        else:
            outcome = "skip"
        rows.append((q, outcome))

    if args.time_out and session.clock is not None:
        while session.is_running:
            session.tick()
    elif not session.request_submit(confirm=lambda answered, total: True):
        print("Submission was not accepted")
        sys.exit(1)

    result = session.result
    print()
    print("=" * 70)
    print(f"EXAM {args.exam_id} ({args.mode}{', auto-submitted' if session.forced else ''})")
    print("=" * 70)
    for q, outcome in rows:
        answer = session.answer_of(q.session_id)
        if q.is_essay:
            shown = "(essay, not graded)"
        else:
            chosen = option_label(answer) if isinstance(answer, int) else "-"
            key = option_label(q.correct_index) if q.correct_index >= 0 else "?"
            shown = f"chose {chosen} / key {key}"
        print(f"  Q{q.session_id:<3} {outcome:<8} {shown:<22} {plain_text(q.text)[:40]}")
    print("-" * 70)
    print(f"  Score: {result.score}/{result.total_questions} ({result.percent}%)  graded: {result.total_graded}")
    print()


if __name__ == "__main__":
    main()
