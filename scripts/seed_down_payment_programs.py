"""
Seed the down-payment assistance program catalog.
Re-running skips programs that already exist by name.
"""
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from realty_analytics.db.database import SessionLocal, init_db
from realty_analytics.db.models import DownPaymentProgram

PROGRAMS = [
    {
        "name": "Good Neighbor Next Door",
        "description": "50% off list price for teachers, officers, firefighters and EMTs in revitalization areas",
        "program_type": "DISCOUNT",
        "state": "FEDERAL",
        "first_time_buyer": False,
        "percentage_of_price": 50,
        "application_url": "https://www.hud.gov/program_offices/housing/sfh/reo/goodn/gnndabot",
    },
    {
        "name": "My First Texas Home",
        "description": "Down payment and closing cost assistance as a 0% deferred second lien",
        "program_type": "LOAN",
        "state": "TX",
        "max_income": 115000,
        "max_purchase_price": 510000,
        "first_time_buyer": True,
        "min_credit_score": 620,
        "percentage_of_price": 5,
    },
    {
        "name": "Austin Down Payment Assistance",
        "description": "Forgivable loan for income-qualified buyers within city limits",
        "program_type": "GRANT",
        "state": "TX",
        "county": "Travis",
        "city": "Austin",
        "max_income": 95000,
        "max_purchase_price": 425000,
        "first_time_buyer": True,
        "max_amount": 40000,
        "deadline": datetime(2026, 12, 31),
    },
    {
        "name": "CalHFA MyHome Assistance",
        "description": "Deferred-payment junior loan up to 3% of price",
        "program_type": "LOAN",
        "state": "CA",
        "max_income": 180000,
        "first_time_buyer": True,
        "min_credit_score": 660,
        "percentage_of_price": 3,
    },
    {
        "name": "Mortgage Credit Certificate",
        "description": "Federal tax credit on a share of annual mortgage interest",
        "program_type": "TAX_CREDIT",
        "first_time_buyer": True,
        "max_amount": 2000,
    },
]


def main():
    init_db()
    db = SessionLocal()

    try:
        created = 0
        for fields in PROGRAMS:
            existing = (
                db.query(DownPaymentProgram)
                .filter(DownPaymentProgram.name == fields["name"])
                .first()
            )
            if existing:
                print(f"Program '{fields['name']}' already exists (ID: {existing.id})")
                continue

            program = DownPaymentProgram(**fields)
            db.add(program)
            created += 1
            print(f"Created program: {fields['name']}")

        db.commit()
        print(f"\nSeeded {created} of {len(PROGRAMS)} programs")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
