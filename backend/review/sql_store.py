"""VocabularyStore backed by the Flask-SQLAlchemy Word model."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Word
from review.context import MasteryStatus
from review.errors import VocabularyStoreError

logger = logging.getLogger(__name__)


class SqlVocabularyStore:

    async def list_all(self, user_id):
        try:
            words = Word.get_full_list(user_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Failed to load words for user %s", user_id)
            raise VocabularyStoreError("Could not load vocabulary") from e
        return [w.to_record() for w in words]

    async def update_status(self, word_id, status: MasteryStatus) -> None:
        try:
            word = Word.get_by_id(word_id)
            if word is None:
                # deleted while the session was running, nothing left to update
                logger.warning("Status update for missing word %s ignored", word_id)
                return
            word.update_status(status)
            word.update()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Failed to update status of word %s", word_id)
            raise VocabularyStoreError(f"Could not update word {word_id}") from e
