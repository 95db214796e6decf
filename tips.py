"""Reduction tips generated from a user's last 30 days of activity.

GET /api/users/<id>/tips
"""

from __future__ import annotations

from datetime import date, timedelta

from flask import Blueprint, jsonify

from emissions import DEFAULT_FACTORS
from models_activity import CATEGORY_DIET, CATEGORY_ENERGY, CATEGORY_TRANSPORT
from stores import activity_store, user_store


tips_api = Blueprint("tips_api", __name__)


TIP_WINDOW_DAYS = 30
MAX_TIPS = 5

PUBLIC_TRANSPORT_TYPES = ("bus", "train", "subway")

CAR_EMISSIONS_THRESHOLD = 50.0
FLIGHT_EMISSIONS_THRESHOLD = 100.0
MEATLESS_DAY_MEAL_THRESHOLD = 10
PLANT_BASED_WEEK_MEAL_THRESHOLD = 20
UNPLUG_KWH_THRESHOLD = 150.0
LED_KWH_THRESHOLD = 300.0
APPLIANCES_KWH_THRESHOLD = 500.0
THERMOSTAT_GAS_THRESHOLD = 50.0

MEAT_TO_VEGETARIAN_SAVING = (
    DEFAULT_FACTORS[(CATEGORY_DIET, "meat_meal")][0]
    - DEFAULT_FACTORS[(CATEGORY_DIET, "vegetarian_meal")][0]
)

# Consumption thresholds are in kWh (electricity) and therms (natural gas).
# Gas logged in other units is converted through the factor table; readings in
# units with no known conversion still count toward emissions but not toward
# consumption.
ELECTRICITY_UNITS_TO_KWH = {"kWh": 1.0}
GAS_UNITS_TO_THERMS = {
    unit: DEFAULT_FACTORS[(CATEGORY_ENERGY, f"natural_gas_{unit}")][0]
    / DEFAULT_FACTORS[(CATEGORY_ENERGY, "natural_gas_therms")][0]
    for unit in ("therms", "m³", "kWh")
}


def _converted(consumption, unit, table) -> float:
    rate = table.get(unit)
    if rate is None:
        return 0.0
    return float(consumption or 0.0) * rate


def analyze_patterns(activities) -> dict:
    p = {
        "car_emissions": 0.0,
        "flight_emissions": 0.0,
        "transport_emissions": 0.0,
        "car_trips": 0,
        "public_transport_trips": 0,
        "meat_meals": 0,
        "plant_meals": 0,
        "meat_emissions": 0.0,
        "electricity_kwh": 0.0,
        "electricity_emissions": 0.0,
        "gas_therms": 0.0,
        "gas_emissions": 0.0,
    }
    for a in activities:
        amount = float(a.emissions_kg_co2 or 0.0)
        if a.category == CATEGORY_TRANSPORT:
            kind = a.transport_type or ""
            p["transport_emissions"] += amount
            if kind == "car":
                p["car_emissions"] += amount
                p["car_trips"] += 1
            elif kind.startswith("flight_"):
                p["flight_emissions"] += amount
            elif kind in PUBLIC_TRANSPORT_TYPES:
                p["public_transport_trips"] += 1
        elif a.category == CATEGORY_DIET:
            if a.meal_type == "meat":
                p["meat_meals"] += int(a.meal_count or 0)
                p["meat_emissions"] += amount
            else:
                p["plant_meals"] += int(a.meal_count or 0)
        elif a.category == CATEGORY_ENERGY:
            if a.energy_type == "electricity":
                p["electricity_kwh"] += _converted(a.consumption, a.unit, ELECTRICITY_UNITS_TO_KWH)
                p["electricity_emissions"] += amount
            elif a.energy_type == "natural_gas":
                p["gas_therms"] += _converted(a.consumption, a.unit, GAS_UNITS_TO_THERMS)
                p["gas_emissions"] += amount
    return p


def _tip(category, title, description, savings, difficulty):
    return {
        "category": category,
        "title": title,
        "description": description,
        "potential_savings_kg_co2": max(0.0, float(savings)),
        "difficulty": difficulty,
    }


def candidate_tips(p: dict) -> list[dict]:
    tips = []

    # transport
    if p["car_emissions"] > CAR_EMISSIONS_THRESHOLD:
        tips.append(_tip(
            CATEGORY_TRANSPORT,
            "Switch to public transportation",
            "Replace some car trips with bus, train or subway rides.",
            p["car_emissions"] * 0.30,
            "medium",
        ))
        tips.append(_tip(
            CATEGORY_TRANSPORT,
            "Carpool for regular trips",
            "Share rides for commutes and errands you make often.",
            p["car_emissions"] * 0.25,
            "easy",
        ))
    if p["flight_emissions"] > FLIGHT_EMISSIONS_THRESHOLD:
        tips.append(_tip(
            CATEGORY_TRANSPORT,
            "Reduce air travel",
            "Take the train for shorter trips or combine journeys.",
            p["flight_emissions"] * 0.20,
            "hard",
        ))
    if p["car_trips"] > 0 and p["public_transport_trips"] == 0:
        tips.append(_tip(
            CATEGORY_TRANSPORT,
            "Try public transit once a week",
            "Pick one regular trip and make it by public transport.",
            p["transport_emissions"] * 0.10,
            "easy",
        ))

    # diet
    if p["meat_meals"] > MEATLESS_DAY_MEAL_THRESHOLD:
        tips.append(_tip(
            CATEGORY_DIET,
            "Have one meatless day per week",
            "Swap meat for vegetarian meals one day a week.",
            p["meat_meals"] / 7 * MEAT_TO_VEGETARIAN_SAVING,
            "easy",
        ))
    if p["meat_meals"] > PLANT_BASED_WEEK_MEAL_THRESHOLD:
        tips.append(_tip(
            CATEGORY_DIET,
            "Try a plant-based week",
            "Eat only plant-based meals for a full week.",
            p["meat_emissions"] * 0.25,
            "medium",
        ))

    # energy
    kwh = p["electricity_kwh"]
    if kwh > UNPLUG_KWH_THRESHOLD:
        tips.append(_tip(
            CATEGORY_ENERGY,
            "Unplug idle electronics",
            "Standby power adds up; switch devices off at the wall.",
            p["electricity_emissions"] * 0.05,
            "easy",
        ))
    if kwh > LED_KWH_THRESHOLD:
        tips.append(_tip(
            CATEGORY_ENERGY,
            "Switch to LED bulbs",
            "LED bulbs use a fraction of the power of incandescent ones.",
            p["electricity_emissions"] * 0.10,
            "easy",
        ))
    if kwh > APPLIANCES_KWH_THRESHOLD:
        tips.append(_tip(
            CATEGORY_ENERGY,
            "Upgrade to energy-efficient appliances",
            "Replace old fridges, washers and heaters with efficient models.",
            p["electricity_emissions"] * 0.20,
            "hard",
        ))
    if p["gas_therms"] > THERMOSTAT_GAS_THRESHOLD:
        tips.append(_tip(
            CATEGORY_ENERGY,
            "Lower your thermostat by 2°C",
            "A slightly cooler home cuts heating gas noticeably.",
            p["gas_emissions"] * 0.10,
            "easy",
        ))
    return tips


def rank_tips(tips: list[dict]) -> list[dict]:
    ranked = sorted(tips, key=lambda t: t["potential_savings_kg_co2"], reverse=True)[:MAX_TIPS]
    return [{"id": i, **t} for i, t in enumerate(ranked, start=1)]


def generate_tips(user_id: int, today: date | None = None) -> list[dict]:
    user_store.read(user_id)
    today = today or date.today()
    activities = activity_store.query(
        user_id, start_date=today - timedelta(days=TIP_WINDOW_DAYS - 1), end_date=today
    )
    if not activities:
        return []
    return rank_tips(candidate_tips(analyze_patterns(activities)))


@tips_api.get("/api/users/<int:user_id>/tips")
def api_tips(user_id: int):
    return jsonify({"success": True, "tips": generate_tips(user_id)})
