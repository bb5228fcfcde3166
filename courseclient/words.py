"""Word counting for the editor's expected-length hint."""
from typing import Optional


def word_count(text: str) -> int:
    return len(text.split())


def word_count_status(count: int, expected_min: Optional[int] = None, expected_max: Optional[int] = None) -> str:
    """'short', 'ok' or 'long' relative to the task's expected word range."""
    if expected_min is not None and count < expected_min:
        return "short"
    if expected_max is not None and count > expected_max:
        return "long"
    return "ok"
