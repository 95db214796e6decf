import pytest

from emissions import (
    FALLBACK_FACTOR_KG_CO2,
    calculate_emissions,
    diet_sub_type,
    energy_sub_type,
    list_emission_factors,
    resolve_factor,
    transport_sub_type,
)
from errors import ValidationFailure
from extensions import db
from models_factors import EmissionFactor


def test_sub_type_keys():
    assert transport_sub_type("car", "diesel") == "car_diesel"
    assert transport_sub_type("car") == "car"
    assert transport_sub_type("bus", "diesel") == "bus"
    assert diet_sub_type("vegan") == "vegan_meal"
    assert energy_sub_type("natural_gas", "therms") == "natural_gas_therms"


def test_two_meat_meals(app):
    assert calculate_emissions("diet", "meat_meal", 2) == pytest.approx(13.22)


def test_default_factors(app):
    assert calculate_emissions("transport", "car_gasoline", 100) == pytest.approx(21.0)
    assert calculate_emissions("transport", "train", 10) == pytest.approx(0.41)
    assert calculate_emissions("energy", "electricity_kWh", 100) == pytest.approx(40.0)


def test_unknown_sub_type_uses_fallback(app):
    assert resolve_factor("energy", "electricity_MWh") == FALLBACK_FACTOR_KG_CO2
    assert calculate_emissions("energy", "electricity_MWh", 10) == pytest.approx(3.0)


def test_stored_factor_wins_over_default(app):
    db.session.add(EmissionFactor(activity_type="transport", sub_type="car", factor_kg_co2=0.5, unit="km"))
    db.session.commit()
    assert calculate_emissions("transport", "car", 10) == pytest.approx(5.0)
    # other categories are not affected by a transport row
    assert calculate_emissions("diet", "vegan_meal", 1) == pytest.approx(0.89)


@pytest.mark.parametrize("quantity", [0, -1, float("nan"), float("inf")])
def test_rejects_bad_quantity(app, quantity):
    with pytest.raises(ValidationFailure):
        calculate_emissions("transport", "car", quantity)


def test_rejects_unknown_category(app):
    with pytest.raises(ValidationFailure):
        calculate_emissions("shopping", "shoes", 1)


def test_list_emission_factors(app, client):
    assert list_emission_factors() == []
    db.session.add(EmissionFactor(activity_type="diet", sub_type="meat_meal", factor_kg_co2=7.0, unit="meal"))
    db.session.add(EmissionFactor(activity_type="transport", sub_type="bus", factor_kg_co2=0.1, unit="km"))
    db.session.commit()

    assert [f.sub_type for f in list_emission_factors()] == ["meat_meal", "bus"]

    resp = client.get("/api/emission-factors")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert [f["sub_type"] for f in body["factors"]] == ["meat_meal", "bus"]
