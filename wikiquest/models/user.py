"""User model."""

from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from wikiquest import db
from wikiquest.progression import get_level_engine


class User(db.Model):
    """Learner account with XP, level marker and check-in streak."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)

    # Profile
    display_name = db.Column(db.String(255), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    interests = db.Column(db.JSON, nullable=True)
    avatar_id = db.Column(db.Integer, nullable=True)
    learning_path = db.Column(db.String(100), nullable=True)
    has_completed_onboarding = db.Column(db.Boolean, default=False, nullable=False)
    # UI preferences; NULL until the user saves them
    settings = db.Column(db.JSON, nullable=True)

    # Progression
    total_xp = db.Column(db.Integer, default=0, nullable=False)
    # Marker rewritten with every XP change; reads derive the level from total_xp
    level = db.Column(db.Integer, default=1, nullable=False)
    streak = db.Column(db.Integer, default=0, nullable=False)
    longest_streak = db.Column(db.Integer, default=0, nullable=False)
    # Naive UTC; NULL means the user has never checked in
    last_check_in = db.Column(db.DateTime, nullable=True)
    contributions = db.Column(db.Integer, default=0, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    quest_progress = db.relationship(
        "QuestProgress", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )

    def set_password(self, password: str) -> None:
        """Set password hash."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        """Public profile fields."""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "displayName": self.display_name,
            "bio": self.bio,
            "interests": self.interests or [],
            "avatarId": self.avatar_id,
            "learningPath": self.learning_path,
            "hasCompletedOnboarding": self.has_completed_onboarding,
            "level": get_level_engine().level_for_xp(self.total_xp or 0),
            "totalXP": self.total_xp,
            "streak": self.streak,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
