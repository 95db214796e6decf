from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Index, Integer, String

from extensions import db


class EmissionFactor(db.Model):
    """Operator-maintained factor table. Looked up before the built-in defaults."""

    __tablename__ = "emission_factors"

    id = Column(Integer, primary_key=True)
    activity_type = Column(String(16), nullable=False)  # transport / diet / energy
    sub_type = Column(String(64), nullable=False)  # car_gasoline, meat_meal, electricity_kWh, ...
    factor_kg_co2 = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False)  # km, meal, kWh, ...
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("factor_kg_co2 > 0", name="ck_emission_factors_positive"),
        Index("idx_emission_factors_lookup", "activity_type", "sub_type"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "activity_type": self.activity_type,
            "sub_type": self.sub_type,
            "factor_kg_co2": float(self.factor_kg_co2),
            "unit": self.unit,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
