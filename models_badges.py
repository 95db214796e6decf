from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint

from extensions import db


BADGE_FIRST_STEP = "first_step"
BADGE_CARBON_CUTTER = "carbon_cutter"
BADGE_ECO_WARRIOR = "eco_warrior"
BADGE_TRANSPORT_HERO = "transport_hero"
BADGE_DIET_CHAMPION = "diet_champion"
BADGE_ENERGY_SAVER = "energy_saver"

BADGE_TYPES = (
    BADGE_FIRST_STEP,
    BADGE_CARBON_CUTTER,
    BADGE_ECO_WARRIOR,
    BADGE_TRANSPORT_HERO,
    BADGE_DIET_CHAMPION,
    BADGE_ENERGY_SAVER,
)


class Badge(db.Model):
    """One-time achievement marker. At most one row per (user_id, badge_type)."""

    __tablename__ = "badges"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    badge_type = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    earned_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "badge_type", name="uq_badges_user_type"),
        Index("idx_badges_user_earned", "user_id", "earned_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "badge_type": self.badge_type,
            "title": self.title,
            "description": self.description,
            "earned_at": self.earned_at.isoformat() if self.earned_at else None,
        }
