"""
Session cursor: the review state machine and the grading protocol.

The module-level functions are pure transitions on SessionState values.
ReviewCursor wraps them for one live session and owns the calls out to the
vocabulary store.
"""
import logging
import threading

from review.context import CardFace, Phase, SessionState, validate_status
from review.errors import (
    GradePending, InvalidTransition, RetryableWriteFailure,
    StoreUnavailable, VocabularyStoreError,
)
from review.session_builder import AllMastered, Empty, build_session
from review.store import VocabularyStore

logger = logging.getLogger(__name__)


def loading_state(force_review: bool = False) -> SessionState:
    return SessionState(phase=Phase.LOADING, force_review=force_review)


def apply_result(state: SessionState, result) -> SessionState:
    """Leave the loading phase according to the session builder's result."""
    if state.phase != Phase.LOADING:
        raise InvalidTransition('load a session', state.phase)
    if isinstance(result, Empty):
        return state.evolve(phase=Phase.EMPTY)
    if isinstance(result, AllMastered):
        return state.evolve(phase=Phase.ALL_MASTERED)
    return state.evolve(
        phase=Phase.IN_PROGRESS,
        queue=result.queue,
        position=0,
        card_face=CardFace.FRONT,
    )


def start_session(all_words, force_review: bool = False, rng=None) -> SessionState:
    return apply_result(loading_state(force_review), build_session(all_words, force_review, rng))


def reveal(state: SessionState) -> SessionState:
    if state.phase != Phase.IN_PROGRESS:
        raise InvalidTransition('reveal', state.phase)
    if state.card_face == CardFace.BACK:
        return state
    return state.evolve(card_face=CardFace.BACK)


def advance(state: SessionState) -> SessionState:
    if state.phase != Phase.IN_PROGRESS:
        raise InvalidTransition('advance', state.phase)
    if state.is_last_card:
        return state.evolve(phase=Phase.FINISHED, card_face=CardFace.FRONT)
    return state.evolve(position=state.position + 1, card_face=CardFace.FRONT)


class ReviewCursor:
    """One user's review session."""

    def __init__(self, store: VocabularyStore, user_id, rng=None):
        self.store = store
        self.user_id = user_id
        self.rng = rng
        self.state = loading_state()
        self.discarded = False
        self._write_pending = False
        # bumped on every restart so late store replies can tell they are stale
        self._generation = 0
        # guards the check-then-set of _write_pending across request threads
        self._lock = threading.Lock()

    @property
    def write_pending(self) -> bool:
        return self._write_pending

    def discard(self):
        self.discarded = True

    def _is_stale(self, generation: int) -> bool:
        return self.discarded or generation != self._generation

    def _check_can_act(self, action: str):
        if self.discarded:
            raise InvalidTransition(action, self.state.phase, "Session was discarded, start a new one")
        if self._write_pending:
            raise GradePending(action, self.state.phase)
        if self.state.phase != Phase.IN_PROGRESS:
            raise InvalidTransition(action, self.state.phase)

    async def restart(self, force_review: bool = False) -> SessionState:
        if self.discarded:
            raise InvalidTransition('restart', self.state.phase, "Session was discarded, start a new one")
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._write_pending = False
            self.state = loading_state(force_review)

        try:
            words = await self.store.list_all(self.user_id)
        except VocabularyStoreError as e:
            logger.warning("Could not load words for user %s: %s", self.user_id, e)
            raise StoreUnavailable() from e

        if self._is_stale(generation):
            return self.state

        self.state = apply_result(self.state, build_session(words, force_review, self.rng))
        logger.info("Review session for user %s is %s with %d cards",
                    self.user_id, self.state.phase.value, len(self.state.queue))
        return self.state

    def reveal(self) -> SessionState:
        with self._lock:
            self._check_can_act('reveal')
            self.state = reveal(self.state)
        return self.state

    async def grade(self, status) -> SessionState:
        """
        Save the learner's grade for the current card and move on.

        The store write happens first. Only when it succeeds does the card
        flip back to its front and the cursor advance; on failure the state
        is left exactly as it was and RetryableWriteFailure is raised.
        """
        with self._lock:
            self._check_can_act('grade')
            status = validate_status(status)
            state = self.state
            word = state.current_word
            generation = self._generation
            self._write_pending = True

        try:
            await self.store.update_status(word.id, status)
        except VocabularyStoreError as e:
            logger.warning("Grade %d for word %s not saved: %s", status, word.id, e)
            raise RetryableWriteFailure(word.id, status) from e
        finally:
            if not self._is_stale(generation):
                self._write_pending = False

        if self._is_stale(generation):
            # the write reached the store, but nobody is looking at this session any more
            return self.state

        self.state = advance(state)
        logger.debug("User %s graded word %s as %s", self.user_id, word.id, status.label)
        return self.state
