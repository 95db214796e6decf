"""Activity logging APIs.

Routes:
- POST /api/activities/transport
- POST /api/activities/diet
- POST /api/activities/energy
- GET  /api/users/<id>/activities?category=&start_date=&end_date=

Every log computes emissions up front and stores an immutable record.
Low-carbon choices also earn eco points in the same transaction:
- diet: per meal, vegan 15 / vegetarian 10 / meat 5
- energy: 2 points per unit below the daily threshold (electricity 10, natural gas 5)
"""

from __future__ import annotations

import math
from datetime import date

from flask import Blueprint, current_app, jsonify, request

from emissions import calculate_emissions, diet_sub_type, energy_sub_type, transport_sub_type
from models_activity import (
    CATEGORIES,
    CATEGORY_DIET,
    CATEGORY_ENERGY,
    CATEGORY_TRANSPORT,
    ENERGY_TYPES,
    FUEL_TYPES,
    MEAL_TYPES,
    TRANSPORT_TYPES,
    Activity,
    DietActivity,
    EnergyActivity,
    TransportActivity,
)
from payloads import parse_choice, parse_date, parse_int, parse_number, parse_text
from stores import activity_store, atomic, user_store


activities_api = Blueprint("activities_api", __name__)


DIET_POINTS_PER_MEAL = {"vegan": 15, "vegetarian": 10, "meat": 5}
ENERGY_DAILY_THRESHOLDS = {"electricity": 10.0, "natural_gas": 5.0}
ENERGY_POINTS_PER_UNIT_SAVED = 2


def energy_points(energy_type: str, consumption: float) -> int:
    threshold = ENERGY_DAILY_THRESHOLDS.get(energy_type, 0.0)
    if consumption >= threshold:
        return 0
    return int(math.floor((threshold - consumption) * ENERGY_POINTS_PER_UNIT_SAVED))


def log_transport_activity(user_id: int, transport_type, distance_km, activity_date, fuel_type=None) -> TransportActivity:
    transport_type = parse_choice(transport_type, "transport_type", TRANSPORT_TYPES)
    fuel_type = parse_choice(fuel_type, "fuel_type", FUEL_TYPES, required=False)
    distance_km = parse_number(distance_km, "distance_km", positive=True)
    activity_date = parse_date(activity_date, "date")

    with atomic("Log transport activity"):
        user_store.read(user_id)
        emissions = calculate_emissions(
            CATEGORY_TRANSPORT, transport_sub_type(transport_type, fuel_type), distance_km
        )
        activity = activity_store.create(
            TransportActivity(
                user_id=user_id,
                transport_type=transport_type,
                fuel_type=fuel_type,
                distance_km=distance_km,
                emissions_kg_co2=emissions,
                date=activity_date,
            )
        )
    return activity


def log_diet_activity(user_id: int, meal_type, meal_count, activity_date) -> DietActivity:
    meal_type = parse_choice(meal_type, "meal_type", MEAL_TYPES)
    meal_count = parse_int(meal_count, "meal_count", positive=True)
    activity_date = parse_date(activity_date, "date")

    with atomic("Log diet activity"):
        user_store.read(user_id)
        emissions = calculate_emissions(CATEGORY_DIET, diet_sub_type(meal_type), meal_count)
        activity = activity_store.create(
            DietActivity(
                user_id=user_id,
                meal_type=meal_type,
                meal_count=meal_count,
                emissions_kg_co2=emissions,
                date=activity_date,
            )
        )
        user_store.increment_points(user_id, meal_count * DIET_POINTS_PER_MEAL[meal_type])
    return activity


def log_energy_activity(user_id: int, energy_type, consumption, unit, activity_date) -> EnergyActivity:
    energy_type = parse_choice(energy_type, "energy_type", ENERGY_TYPES)
    consumption = parse_number(consumption, "consumption", positive=True)
    unit = parse_text(unit, "unit")
    activity_date = parse_date(activity_date, "date")

    with atomic("Log energy activity"):
        user_store.read(user_id)
        emissions = calculate_emissions(CATEGORY_ENERGY, energy_sub_type(energy_type, unit), consumption)
        activity = activity_store.create(
            EnergyActivity(
                user_id=user_id,
                energy_type=energy_type,
                consumption=consumption,
                unit=unit,
                emissions_kg_co2=emissions,
                date=activity_date,
            )
        )
        points = energy_points(energy_type, consumption)
        if points > 0:
            user_store.increment_points(user_id, points)
    return activity


def list_user_activities(
    user_id: int,
    category: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Activity]:
    user_store.read(user_id)
    return activity_store.query(user_id, category=category, start_date=start_date, end_date=end_date)


def _user_id_from(data: dict) -> int:
    return parse_int(data.get("user_id"), "user_id", positive=True)


@activities_api.post("/api/activities/transport")
def api_log_transport():
    data = request.get_json(silent=True) or {}
    activity = log_transport_activity(
        _user_id_from(data),
        data.get("transport_type"),
        data.get("distance_km"),
        data.get("date"),
        fuel_type=data.get("fuel_type"),
    )
    current_app.logger.info(
        "Transport activity %s logged for user %s (%.4f kg CO2)",
        activity.id, activity.user_id, activity.emissions_kg_co2,
    )
    return jsonify({"success": True, "activity": activity.to_dict()}), 201


@activities_api.post("/api/activities/diet")
def api_log_diet():
    data = request.get_json(silent=True) or {}
    activity = log_diet_activity(
        _user_id_from(data), data.get("meal_type"), data.get("meal_count"), data.get("date")
    )
    return jsonify({"success": True, "activity": activity.to_dict()}), 201


@activities_api.post("/api/activities/energy")
def api_log_energy():
    data = request.get_json(silent=True) or {}
    activity = log_energy_activity(
        _user_id_from(data),
        data.get("energy_type"),
        data.get("consumption"),
        data.get("unit"),
        data.get("date"),
    )
    return jsonify({"success": True, "activity": activity.to_dict()}), 201


@activities_api.get("/api/users/<int:user_id>/activities")
def api_list_activities(user_id: int):
    category = parse_choice(request.args.get("category"), "category", CATEGORIES, required=False)
    start_date = parse_date(request.args.get("start_date"), "start_date", required=False)
    end_date = parse_date(request.args.get("end_date"), "end_date", required=False)

    rows = list_user_activities(user_id, category=category, start_date=start_date, end_date=end_date)
    return jsonify({"success": True, "activities": [a.to_dict() for a in rows], "count": len(rows)})
