"""Logged activity records.

One table, three shapes. `category` is the discriminant; each subclass only
fills its own columns and leaves the others NULL. Rows are never updated
after insert.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String

from extensions import db


CATEGORY_TRANSPORT = "transport"
CATEGORY_DIET = "diet"
CATEGORY_ENERGY = "energy"
CATEGORIES = (CATEGORY_TRANSPORT, CATEGORY_DIET, CATEGORY_ENERGY)

TRANSPORT_TYPES = ("car", "bus", "train", "subway", "flight_short", "flight_medium", "flight_long")
FUEL_TYPES = ("gasoline", "diesel", "electric", "hybrid")
MEAL_TYPES = ("meat", "vegetarian", "vegan")
ENERGY_TYPES = ("electricity", "natural_gas")


class Activity(db.Model):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category = Column(String(16), nullable=False)
    emissions_kg_co2 = Column(Float, nullable=False, default=0.0)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __mapper_args__ = {"polymorphic_on": category}

    __table_args__ = (
        CheckConstraint("emissions_kg_co2 >= 0", name="ck_activities_emissions_non_negative"),
        Index("idx_activities_user_date", "user_id", "date"),
        Index("idx_activities_user_category", "user_id", "category"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category": self.category,
            "emissions_kg_co2": float(self.emissions_kg_co2 or 0.0),
            "date": self.date.isoformat() if self.date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TransportActivity(Activity):
    transport_type = Column(String(20), nullable=True)
    fuel_type = Column(String(20), nullable=True)  # only meaningful for cars
    distance_km = Column(Float, nullable=True)

    __mapper_args__ = {"polymorphic_identity": CATEGORY_TRANSPORT}

    def to_dict(self):
        d = super().to_dict()
        d.update(
            {
                "transport_type": self.transport_type,
                "fuel_type": self.fuel_type,
                "distance_km": float(self.distance_km or 0.0),
            }
        )
        return d


class DietActivity(Activity):
    meal_type = Column(String(20), nullable=True)
    meal_count = Column(Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": CATEGORY_DIET}

    def to_dict(self):
        d = super().to_dict()
        d.update({"meal_type": self.meal_type, "meal_count": int(self.meal_count or 0)})
        return d


class EnergyActivity(Activity):
    energy_type = Column(String(20), nullable=True)
    consumption = Column(Float, nullable=True)
    unit = Column(String(16), nullable=True)  # kWh, therms, m³

    __mapper_args__ = {"polymorphic_identity": CATEGORY_ENERGY}

    def to_dict(self):
        d = super().to_dict()
        d.update(
            {
                "energy_type": self.energy_type,
                "consumption": float(self.consumption or 0.0),
                "unit": self.unit,
            }
        )
        return d
