from minigames import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import enum


class Role(str, enum.Enum):
    USER = 'USER'
    ADMIN = 'ADMIN'
    SUPER_ADMIN = 'SUPER_ADMIN'


def _utcnow():
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.Enum(Role, name='role'), nullable=False, default=Role.USER)
    games = db.relationship('Game', back_populates='creator')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role.value if self.role else None,
        }


class GameTemplate(db.Model):
    __tablename__ = 'game_template'
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    games = db.relationship('Game', back_populates='game_template')

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
        }


# Every game type the platform knows about; seeded by the CLI commands
GAME_TEMPLATES = [
    ('quiz', 'Quiz'),
    ('flip-tiles', 'Flip Tiles'),
    ('speed-sorting', 'Speed Sorting'),
    ('anagram', 'Anagram'),
    ('pair-or-no-pair', 'Pair or No Pair'),
    ('type-speed', 'Type Speed'),
]


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default='')
    creator_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    game_template_id = db.Column(db.Integer, db.ForeignKey('game_template.id'), nullable=False)
    thumbnail_image = db.Column(db.String(512), nullable=True)
    is_published = db.Column(db.Boolean, default=False, nullable=False)
    game_json = db.Column(db.JSON, nullable=True)  # per-type payload, shape chosen by template slug
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    creator = db.relationship('User', back_populates='games')
    game_template = db.relationship('GameTemplate', back_populates='games')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'creator_id': self.creator_id,
            'game_template_id': self.game_template_id,
            'thumbnail_image': self.thumbnail_image,
            'is_published': self.is_published,
            'game_json': self.game_json,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
