"""Errors raised by the review engine.

Every error carries the HTTP status the API layer answers with, so resources
don't need to know the engine's taxonomy.
"""
from http import HTTPStatus


class ReviewError(Exception):
    http_status = HTTPStatus.BAD_REQUEST
    retryable = False

    def format_data(self) -> dict:
        return {'error': str(self), 'retryable': self.retryable}


class VocabularyStoreError(ReviewError):
    """Raised by a VocabularyStore when a read or write does not go through."""
    http_status = HTTPStatus.SERVICE_UNAVAILABLE


class StoreUnavailable(ReviewError):
    # snapshot read failed, the session cannot start
    http_status = HTTPStatus.SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, message="Vocabulary store is unavailable, please try again"):
        super().__init__(message)


class RetryableWriteFailure(ReviewError):
    http_status = HTTPStatus.SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, word_id, status):
        self.word_id = word_id
        self.status = status
        super().__init__(f"Could not save status {int(status)} for word {word_id}, please retry")


class InvalidTransition(ReviewError):
    http_status = HTTPStatus.CONFLICT

    def __init__(self, action: str, phase, message=None):
        self.action = action
        self.phase = phase
        if message is None:
            message = f"Cannot {action} while session is {getattr(phase, 'value', phase)}"
        super().__init__(message)


class GradePending(InvalidTransition):
    """A grade write for the current card has not resolved yet."""

    def __init__(self, action: str, phase):
        super().__init__(action, phase, f"Cannot {action} while a grade is still being saved")


class InvalidStatus(ReviewError, ValueError):
    http_status = HTTPStatus.BAD_REQUEST

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid status {value!r}. Must be 0 (new), 1 (familiar) or 2 (mastered)")


class NoActiveSession(ReviewError):
    http_status = HTTPStatus.NOT_FOUND

    def __init__(self):
        super().__init__("No review session found, start one first")
