"""Exam session constants shared by the UI, the simulator and examcore. No UI."""
# Modes: practice = reveal per question, lock on first answer; real = timed, reveal on submit

DEFAULT_DURATION_MINUTES = 45
LOW_TIME_WARNING_SECONDS = 300
TICK_SECONDS = 1
OPTION_LABELS = "ABCDEFGHIJ"
MODE_PRACTICE = "practice"
MODE_REAL = "real"


def option_label(index: int) -> str:
    """A, B, C ... for the first ten options, then the 1-based number."""
    return OPTION_LABELS[index] if 0 <= index < len(OPTION_LABELS) else str(index + 1)
