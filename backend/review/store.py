"""
Vocabulary store contract used by the review engine, plus an in-memory store.

The engine only ever reads a user's full snapshot and writes a single word's
status. Anything richer (insert, delete, existence checks) belongs to the
CRUD layer; the in-memory store offers those so tests can set up data.
"""

import itertools
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Protocol

from review.context import MasteryStatus, WordRecord, validate_status

logger = logging.getLogger(__name__)


class VocabularyStore(Protocol):
    async def list_all(self, user_id) -> List[WordRecord]:
        """Return every WordRecord owned by `user_id`. Raises VocabularyStoreError."""
        ...

    async def update_status(self, word_id, status: MasteryStatus) -> None:
        """Persist a new mastery status. Raises VocabularyStoreError."""
        ...


class InMemoryVocabularyStore:
    """Keeps word records in a dict, keyed by id, grouped by owner."""

    def __init__(self):
        self._data: Dict[int, WordRecord] = {}
        self._owners: Dict[int, object] = {}
        self._ids = itertools.count(1)

    def insert(self, user_id, word: str, definition_cn: str = '', sentence_1_en: str = '',
               sentence_1_cn: str = '', sentence_2_en: str = '', sentence_2_cn: str = '',
               status=MasteryStatus.NEW) -> WordRecord:
        if self.find_by_word(user_id, word) is not None:
            raise ValueError(f"'{word}' is already in the collection")
        record = WordRecord(
            id=next(self._ids),
            word=word,
            definition_cn=definition_cn,
            sentence_1_en=sentence_1_en,
            sentence_1_cn=sentence_1_cn,
            sentence_2_en=sentence_2_en,
            sentence_2_cn=sentence_2_cn,
            status=validate_status(status),
        )
        self._data[record.id] = record
        self._owners[record.id] = user_id
        return record

    def find_by_word(self, user_id, word: str) -> Optional[WordRecord]:
        # word identity is case-insensitive within one collection
        needle = word.strip().lower()
        for word_id, record in self._data.items():
            if self._owners[word_id] == user_id and record.word.lower() == needle:
                return record
        return None

    def get(self, word_id) -> Optional[WordRecord]:
        return self._data.get(word_id)

    def delete(self, word_id) -> bool:
        if word_id not in self._data:
            return False
        del self._data[word_id]
        del self._owners[word_id]
        return True

    async def list_all(self, user_id) -> List[WordRecord]:
        return [r for wid, r in self._data.items() if self._owners[wid] == user_id]

    async def update_status(self, word_id, status: MasteryStatus) -> None:
        record = self._data.get(word_id)
        if record is None:
            logger.warning("Status update for missing word %s ignored", word_id)
            return
        self._data[word_id] = replace(record, status=validate_status(status))
