# File containing all models for Flask SQLAlchemy
# 3 models: User, Word (one vocabulary entry), TokenBlocklist

from datetime import datetime

from extensions import db
from review.context import MasteryStatus, WordRecord, validate_status


class Word(db.Model):
    __tablename__ = 'word'

    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(150), nullable=False)
    definition_cn = db.Column(db.String(300), nullable=False)
    sentence_1_en = db.Column(db.String(500), nullable=False, default='')
    sentence_1_cn = db.Column(db.String(500), nullable=False, default='')
    sentence_2_en = db.Column(db.String(500), nullable=False, default='')
    sentence_2_cn = db.Column(db.String(500), nullable=False, default='')
    # 0 = new, 1 = familiar, 2 = mastered
    status = db.Column(db.Integer, nullable=False, default=0)
    created_ds = db.Column(db.DateTime, default=datetime.utcnow)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)

    user = db.relationship('User', back_populates='words')

    @property
    def status_label(self):
        try:
            return MasteryStatus(self.status).label
        except ValueError:
            return "unknown"

    def __repr__(self):
        return f"{self.id} - {self.word} - {self.definition_cn}"

    def format_data(self, viewer=None):
        # Only the owner may see a word
        if viewer is None or viewer.id != self.user_id:
            return None
        return {
            'id': self.id,
            'word': self.word,
            'definition_cn': self.definition_cn,
            'sentence_1_en': self.sentence_1_en,
            'sentence_1_cn': self.sentence_1_cn,
            'sentence_2_en': self.sentence_2_en,
            'sentence_2_cn': self.sentence_2_cn,
            'status': self.status,
            'status_label': self.status_label,
            'created_ds': self.created_ds.isoformat() if self.created_ds else None,
        }

    def to_record(self) -> WordRecord:
        return WordRecord(
            id=self.id,
            word=self.word,
            definition_cn=self.definition_cn,
            sentence_1_en=self.sentence_1_en or '',
            sentence_1_cn=self.sentence_1_cn or '',
            sentence_2_en=self.sentence_2_en or '',
            sentence_2_cn=self.sentence_2_cn or '',
            status=self.status,
        )

    def is_owner(self, viewer) -> bool:
        if viewer is None:
            return False
        return viewer.id == self.user_id

    def update_status(self, new_value):
        # raises InvalidStatus for anything outside 0/1/2
        self.status = int(validate_status(new_value))
        return self

    # Model owns all database update logic, not resource
    def add(self):
        try:
            db.session.add(self)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def delete(self):
        try:
            db.session.delete(self)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def update(self):
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def add_list(cls, list_of_instances):
        try:
            db.session.add_all(list_of_instances)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def delete_all(cls, viewer):
        # delete all words for the logged in user
        try:
            db.session.query(Word).filter_by(user_id=viewer.id).delete(synchronize_session=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def get_query_for_user(cls, viewer):
        return cls.query.filter_by(user_id=viewer.id)

    @classmethod
    def get_full_list(cls, user_id: int):
        return cls.query.filter_by(user_id=user_id).all()

    @classmethod
    def get_by_id(cls, id: int):
        return cls.query.filter_by(id=id).first()

    @classmethod
    def get_by_word(cls, user_id: int, word: str):
        # ilike without wildcards: case-insensitive exact match
        escaped = word.strip().replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
        return cls.query.filter_by(user_id=user_id).filter(cls.word.ilike(escaped, escape='\\')).first()

    @classmethod
    def exists_for_user(cls, user_id: int, word: str) -> bool:
        return cls.get_by_word(user_id, word) is not None

    @classmethod
    def count_by_status(cls, user_id: int) -> dict:
        rows = db.session.query(cls.status, db.func.count(cls.id)).filter(
            cls.user_id == user_id
        ).group_by(cls.status).all()
        counts = {int(s): 0 for s in MasteryStatus}
        for status, count in rows:
            counts[status] = count
        return counts


class User(db.Model):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), nullable=False, unique=True)
    email = db.Column(db.String(200), nullable=False, unique=True)
    password = db.Column(db.String(200))
    created_ds = db.Column(db.DateTime)

    words = db.relationship('Word', back_populates='user', cascade='all, delete-orphan')

    def __repr__(self):
        return f"{self.id} - {self.username}"

    def format_data(self, viewer=None):
        # viewer should be the User object of the logged in user
        if viewer is not None and viewer.id == self.id:
            return {
                'id': self.id,
                'username': self.username,
                'email': self.email,
            }
        return {'id': self.id}

    def add(self):
        try:
            db.session.add(self)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def get_by_id(cls, id: int):
        return cls.query.filter_by(id=id).first()

    @classmethod
    def get_by_username(cls, username: str):
        return cls.query.filter_by(username=username).first()

    @classmethod
    def is_username_valid(cls, username: str) -> bool:
        if username is None:
            return False
        # ilike for a case INSENSITIVE match, filter_by is case sensitive
        existing_username = cls.query.filter(cls.username.ilike(username)).first()
        return existing_username is None

    @classmethod
    def is_email_valid(cls, email: str) -> bool:
        # Simplistic pattern matching to catch ill-formatted emails
        if not isinstance(email, str):
            return False
        if email.count('@') != 1:
            return False

        local, domain = email.split("@")
        if not local or not domain:
            return False
        if "." not in domain:
            return False
        if domain.startswith(".") or domain.endswith("."):
            return False

        existing_user = cls.query.filter(cls.email.ilike(email.lower())).first()
        return existing_user is None


class TokenBlocklist(db.Model):
    __tablename__ = 'token_blocklist'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), nullable=False, index=True, unique=True)
    created_ds = db.Column(db.DateTime, nullable=False)

    def add(self):
        try:
            db.session.add(self)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def is_blocklisted(cls, jti: str) -> bool:
        return cls.query.filter_by(jti=jti).first() is not None
