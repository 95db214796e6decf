"""Goal and challenge models.

Both carry a one-way completion flag (is_achieved / is_completed). The flag
only ever flips false -> true; the trackers in goals.py and challenges.py
credit the one-time bonus on that edge.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text

from extensions import db


GOAL_TYPES = ("percentage_reduction", "specific_target", "eco_challenge")

CHALLENGE_MEATLESS_WEEK = "meatless_week"
CHALLENGE_PUBLIC_TRANSPORT = "public_transport_challenge"
CHALLENGE_ENERGY_REDUCTION = "energy_reduction"
CHALLENGE_TYPES = (CHALLENGE_MEATLESS_WEEK, CHALLENGE_PUBLIC_TRANSPORT, CHALLENGE_ENERGY_REDUCTION)


class Goal(db.Model):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    goal_type = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, nullable=False, default=0.0)
    is_achieved = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_goals_user_achieved", "user_id", "is_achieved"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "goal_type": self.goal_type,
            "title": self.title,
            "description": self.description,
            "target_value": float(self.target_value or 0.0),
            "current_value": float(self.current_value or 0.0),
            "is_achieved": bool(self.is_achieved),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Challenge(db.Model):
    __tablename__ = "challenges"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    challenge_type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    target_days = Column(Integer, nullable=False)
    completed_days = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # set when the challenge completes
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_challenges_user_completed", "user_id", "is_completed"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "challenge_type": self.challenge_type,
            "title": self.title,
            "description": self.description,
            "target_days": int(self.target_days or 0),
            "completed_days": int(self.completed_days or 0),
            "is_completed": bool(self.is_completed),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
