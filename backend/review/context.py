# Plain data objects the review engine works on
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum

from review.errors import InvalidStatus


class MasteryStatus(IntEnum):
    NEW = 0
    FAMILIAR = 1
    MASTERED = 2

    @property
    def label(self) -> str:
        return self.name.lower()


def validate_status(value) -> MasteryStatus:
    """Return the MasteryStatus for 0, 1 or 2. Anything else raises InvalidStatus."""
    # bool is an int subclass, True would silently become FAMILIAR
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStatus(value)
    try:
        return MasteryStatus(value)
    except ValueError:
        raise InvalidStatus(value) from None


class CardFace(str, Enum):
    FRONT = 'front'
    BACK = 'back'


class Phase(str, Enum):
    LOADING = 'loading'
    EMPTY = 'empty'
    ALL_MASTERED = 'all_mastered'
    IN_PROGRESS = 'in_progress'
    FINISHED = 'finished'


@dataclass(frozen=True)
class WordRecord:
    id: int
    word: str
    definition_cn: str
    sentence_1_en: str
    sentence_1_cn: str
    sentence_2_en: str = ''
    sentence_2_cn: str = ''
    status: MasteryStatus = MasteryStatus.NEW

    def __post_init__(self):
        if not self.word or not self.word.strip():
            raise ValueError("WordRecord.word must be non-empty")
        object.__setattr__(self, 'status', validate_status(self.status))

    def front(self) -> dict:
        # prompt side: the word and its English example sentences
        return {
            'id': self.id,
            'word': self.word,
            'sentence_1_en': self.sentence_1_en,
            'sentence_2_en': self.sentence_2_en,
        }

    def back(self) -> dict:
        data = self.front()
        data.update({
            'definition_cn': self.definition_cn,
            'sentence_1_cn': self.sentence_1_cn,
            'sentence_2_cn': self.sentence_2_cn,
            'status': int(self.status),
            'status_label': self.status.label,
        })
        return data


@dataclass(frozen=True)
class SessionState:
    phase: Phase
    queue: tuple[WordRecord, ...] = field(default_factory=tuple)
    position: int = 0
    card_face: CardFace = CardFace.FRONT
    force_review: bool = False

    @property
    def current_word(self) -> WordRecord | None:
        if self.phase != Phase.IN_PROGRESS:
            return None
        return self.queue[self.position]

    @property
    def is_last_card(self) -> bool:
        return self.position >= len(self.queue) - 1

    def evolve(self, **changes) -> 'SessionState':
        return replace(self, **changes)

    def format_data(self) -> dict:
        word = self.current_word
        card = None
        if word is not None:
            card = word.back() if self.card_face == CardFace.BACK else word.front()
        return {
            'phase': self.phase.value,
            'card_face': self.card_face.value,
            'position': self.position,
            'total': len(self.queue),
            'force_review': self.force_review,
            'current_card': card,
        }
