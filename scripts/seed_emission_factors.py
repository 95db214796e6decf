#!/usr/bin/env python3
"""Insert the built-in emission factors into the emission_factors table.

Rows that already exist for a (activity_type, sub_type) are left alone, so
operator edits survive re-runs.
"""

from app import app
from emissions import DEFAULT_FACTORS
from extensions import db
from models_factors import EmissionFactor


def seed_factors() -> dict:
    inserted = skipped = 0
    for (category, sub_type), (factor, unit) in DEFAULT_FACTORS.items():
        exists = EmissionFactor.query.filter_by(activity_type=category, sub_type=sub_type).first()
        if exists:
            skipped += 1
            continue
        db.session.add(
            EmissionFactor(activity_type=category, sub_type=sub_type, factor_kg_co2=factor, unit=unit)
        )
        inserted += 1
    db.session.commit()
    return {"inserted": inserted, "skipped": skipped}


def main():
    with app.app_context():
        result = seed_factors()
    print({"ok": True, **result})


if __name__ == "__main__":
    main()
