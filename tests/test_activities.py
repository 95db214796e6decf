from datetime import date

import pytest

from activities import (
    energy_points,
    list_user_activities,
    log_diet_activity,
    log_energy_activity,
    log_transport_activity,
)
from errors import NotFound, ValidationFailure


def test_transport_uses_fuel_key_for_cars(user, points):
    a = log_transport_activity(user.id, "car", 100, "2026-03-01", fuel_type="electric")
    assert a.category == "transport"
    assert a.emissions_kg_co2 == pytest.approx(5.0)
    assert a.fuel_type == "electric"
    assert points(user.id) == 0


def test_transport_ignores_fuel_for_non_cars(user):
    a = log_transport_activity(user.id, "bus", 10, "2026-03-01", fuel_type="diesel")
    assert a.emissions_kg_co2 == pytest.approx(0.8)


def test_diet_credits_points_per_meal(user, points):
    a = log_diet_activity(user.id, "meat", 2, "2026-03-01")
    assert a.emissions_kg_co2 == pytest.approx(13.22)
    assert points(user.id) == 10

    log_diet_activity(user.id, "vegan", 3, "2026-03-01")
    assert points(user.id) == 10 + 45


def test_energy_points_below_threshold():
    assert energy_points("electricity", 4) == 12
    assert energy_points("electricity", 9.8) == 0  # floor(0.4)
    assert energy_points("electricity", 10) == 0
    assert energy_points("natural_gas", 2.5) == 5
    assert energy_points("natural_gas", 50) == 0


def test_energy_activity(user, points):
    a = log_energy_activity(user.id, "electricity", 4, "kWh", "2026-03-01")
    assert a.emissions_kg_co2 == pytest.approx(1.6)
    assert points(user.id) == 12

    log_energy_activity(user.id, "electricity", 250, "kWh", "2026-03-02")
    assert points(user.id) == 12


def test_accepts_iso_datetime(user):
    a = log_diet_activity(user.id, "vegetarian", 1, "2026-03-01T18:30:00Z")
    assert a.date == date(2026, 3, 1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"transport_type": "rocket", "distance_km": 10, "activity_date": "2026-03-01"},
        {"transport_type": "car", "distance_km": 0, "activity_date": "2026-03-01"},
        {"transport_type": "car", "distance_km": -5, "activity_date": "2026-03-01"},
        {"transport_type": "car", "distance_km": "far", "activity_date": "2026-03-01"},
        {"transport_type": "car", "distance_km": 10, "activity_date": None},
        {"transport_type": "car", "distance_km": 10, "activity_date": "yesterday"},
    ],
)
def test_transport_validation(user, kwargs):
    with pytest.raises(ValidationFailure):
        log_transport_activity(user.id, **kwargs)


def test_unknown_user(app):
    with pytest.raises(NotFound):
        log_diet_activity(999, "vegan", 1, "2026-03-01")
    with pytest.raises(NotFound):
        list_user_activities(999)


def test_list_filters_and_ordering(user):
    log_transport_activity(user.id, "train", 10, "2026-03-01")
    log_diet_activity(user.id, "meat", 1, "2026-03-03")
    log_energy_activity(user.id, "natural_gas", 2, "therms", "2026-03-02")
    log_diet_activity(user.id, "vegan", 1, "2026-03-05")

    rows = list_user_activities(user.id)
    assert [a.date.isoformat() for a in rows] == ["2026-03-05", "2026-03-03", "2026-03-02", "2026-03-01"]

    diet = list_user_activities(user.id, category="diet")
    assert {a.category for a in diet} == {"diet"}
    assert len(diet) == 2

    window = list_user_activities(user.id, start_date=date(2026, 3, 2), end_date=date(2026, 3, 3))
    assert [a.date.isoformat() for a in window] == ["2026-03-03", "2026-03-02"]


def test_same_day_newest_first(user):
    first = log_diet_activity(user.id, "meat", 1, "2026-03-01")
    second = log_diet_activity(user.id, "vegan", 1, "2026-03-01")
    rows = list_user_activities(user.id)
    assert [a.id for a in rows] == [second.id, first.id]
