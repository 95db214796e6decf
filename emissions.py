"""Emission calculator.

Factor resolution order for (category, sub_type):
1. emission_factors table
2. DEFAULT_FACTORS below
3. FALLBACK_FACTOR_KG_CO2

A missing factor never fails a calculation; it only degrades to the next level.

Routes:
- GET /api/emission-factors
"""

from __future__ import annotations

import math

from flask import Blueprint, current_app, jsonify

from errors import MissingFactor, ValidationFailure
from models_activity import CATEGORIES, CATEGORY_DIET, CATEGORY_ENERGY, CATEGORY_TRANSPORT
from models_factors import EmissionFactor


factors_api = Blueprint("factors_api", __name__)

# (category, sub_type) -> (kg CO2 per unit, unit)
DEFAULT_FACTORS: dict[tuple[str, str], tuple[float, str]] = {
    (CATEGORY_TRANSPORT, "car_gasoline"): (0.21, "km"),
    (CATEGORY_TRANSPORT, "car_diesel"): (0.17, "km"),
    (CATEGORY_TRANSPORT, "car_hybrid"): (0.11, "km"),
    (CATEGORY_TRANSPORT, "car_electric"): (0.05, "km"),
    (CATEGORY_TRANSPORT, "car"): (0.19, "km"),
    (CATEGORY_TRANSPORT, "bus"): (0.08, "km"),
    (CATEGORY_TRANSPORT, "train"): (0.041, "km"),
    (CATEGORY_TRANSPORT, "subway"): (0.028, "km"),
    (CATEGORY_TRANSPORT, "flight_short"): (0.255, "km"),
    (CATEGORY_TRANSPORT, "flight_medium"): (0.156, "km"),
    (CATEGORY_TRANSPORT, "flight_long"): (0.15, "km"),
    (CATEGORY_DIET, "meat_meal"): (6.61, "meal"),
    (CATEGORY_DIET, "vegetarian_meal"): (1.79, "meal"),
    (CATEGORY_DIET, "vegan_meal"): (0.89, "meal"),
    (CATEGORY_ENERGY, "electricity_kWh"): (0.4, "kWh"),
    (CATEGORY_ENERGY, "natural_gas_therms"): (5.3, "therms"),
    (CATEGORY_ENERGY, "natural_gas_m³"): (2.0, "m³"),
    (CATEGORY_ENERGY, "natural_gas_kWh"): (0.2, "kWh"),
}

FALLBACK_FACTOR_KG_CO2 = 0.3


def transport_sub_type(transport_type: str, fuel_type: str | None = None) -> str:
    # Fuel only refines the key for cars (car_gasoline, car_diesel, ...).
    if fuel_type and transport_type == "car":
        return f"{transport_type}_{fuel_type}"
    return transport_type


def diet_sub_type(meal_type: str) -> str:
    return f"{meal_type}_meal"


def energy_sub_type(energy_type: str, unit: str) -> str:
    return f"{energy_type}_{unit}"


def _stored_factor(category: str, sub_type: str) -> float:
    row = (
        EmissionFactor.query.filter_by(activity_type=category, sub_type=sub_type)
        .order_by(EmissionFactor.id.asc())
        .first()
    )
    if row is None or not row.factor_kg_co2 or row.factor_kg_co2 <= 0:
        raise MissingFactor(f"No stored factor for {category}/{sub_type}")
    return float(row.factor_kg_co2)


def _default_factor(category: str, sub_type: str) -> float:
    entry = DEFAULT_FACTORS.get((category, sub_type))
    if entry is None:
        raise MissingFactor(f"No default factor for {category}/{sub_type}")
    return entry[0]


def resolve_factor(category: str, sub_type: str) -> float:
    try:
        return _stored_factor(category, sub_type)
    except MissingFactor:
        pass
    try:
        return _default_factor(category, sub_type)
    except MissingFactor:
        current_app.logger.warning(
            "No emission factor for %s/%s; using fallback %s", category, sub_type, FALLBACK_FACTOR_KG_CO2
        )
        return FALLBACK_FACTOR_KG_CO2


def calculate_emissions(category: str, sub_type: str, quantity: float) -> float:
    """Return kg CO2 for `quantity` units. Unrounded; rounding is a display concern."""
    if category not in CATEGORIES:
        raise ValidationFailure(f"Unknown activity category: {category}")
    if quantity is None or not math.isfinite(quantity) or quantity <= 0:
        raise ValidationFailure("quantity must be > 0")
    return float(quantity) * resolve_factor(category, sub_type)


def list_emission_factors() -> list[EmissionFactor]:
    return EmissionFactor.query.order_by(EmissionFactor.id.asc()).all()


@factors_api.get("/api/emission-factors")
def get_emission_factors():
    factors = list_emission_factors()
    return jsonify({"success": True, "factors": [f.to_dict() for f in factors]})
