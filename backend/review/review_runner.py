"""Review session runner - glue between the Flask resources and the review engine."""
import asyncio
import logging
import threading

from review.cursor import ReviewCursor
from review.errors import NoActiveSession, ReviewError
from review.sql_store import SqlVocabularyStore

logger = logging.getLogger(__name__)

# one live session per user, kept in process memory only
_cursors: dict[int, ReviewCursor] = {}
_cursors_lock = threading.Lock()


def run_async(coro):
    """Wraps the async engine calls for synchronous Flask using asyncio.run()."""
    return asyncio.run(coro)


def get_store():
    return SqlVocabularyStore()


def get_cursor(user_id: int) -> ReviewCursor | None:
    with _cursors_lock:
        return _cursors.get(user_id)


def replace_cursor(user_id: int, cursor: ReviewCursor):
    with _cursors_lock:
        previous = _cursors.get(user_id)
        _cursors[user_id] = cursor
    if previous is not None:
        previous.discard()


def end_review(user_id: int) -> bool:
    with _cursors_lock:
        cursor = _cursors.pop(user_id, None)
    if cursor is None:
        return False
    cursor.discard()
    return True


def reset_review_sessions():
    """Discard every live session (used between tests and on shutdown)."""
    with _cursors_lock:
        cursors = list(_cursors.values())
        _cursors.clear()
    for cursor in cursors:
        cursor.discard()


def start_review(user_id: int, force_review: bool = False, rng=None):
    """Start (or restart) the user's review session. Any previous session is thrown away."""
    cursor = ReviewCursor(get_store(), user_id, rng=rng)
    replace_cursor(user_id, cursor)
    try:
        state = run_async(cursor.restart(force_review))
    except ReviewError as e:
        logger.warning("Review session for user %s did not start: %s", user_id, e)
        return None, e
    return state.format_data(), None


def get_review_state(user_id: int):
    cursor = get_cursor(user_id)
    if cursor is None:
        return None, NoActiveSession()
    return cursor.state.format_data(), None


def reveal_card(user_id: int):
    cursor = get_cursor(user_id)
    if cursor is None:
        return None, NoActiveSession()
    try:
        state = cursor.reveal()
    except ReviewError as e:
        return None, e
    return state.format_data(), None


def grade_card(user_id: int, status):
    cursor = get_cursor(user_id)
    if cursor is None:
        return None, NoActiveSession()
    try:
        state = run_async(cursor.grade(status))
    except ReviewError as e:
        return None, e
    return state.format_data(), None
