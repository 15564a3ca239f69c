"""
Seed a demo property, rent ledger and portfolio, and print a bearer token
for the demo investor so the API can be tried locally.
"""
import sys
import os
from datetime import date, datetime, timedelta
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from realty_analytics.auth.jwt import create_access_token
from realty_analytics.db.database import SessionLocal, init_db
from realty_analytics.db.models import Expense, Lease, Property, RentPayment
from realty_analytics.services import portfolio as portfolio_service

DEMO_USER_ID = "demo-investor"
DEMO_ADDRESS = "1402 Elm Street"


def main():
    init_db()
    db = SessionLocal()

    try:
        prop = db.query(Property).filter(Property.address == DEMO_ADDRESS).first()
        if prop:
            print(f"Demo property already exists (ID: {prop.id})")
        else:
            prop = Property(
                owner_id=DEMO_USER_ID,
                title="Elm Street Duplex",
                address=DEMO_ADDRESS,
                city="Austin",
                state="TX",
                country="US",
                base_price=Decimal("385000"),
                square_meters=168,
                bedrooms=4,
                bathrooms=2,
                year_built=1998,
                published_at=datetime(2024, 2, 12, 9, 30),
            )
            db.add(prop)
            db.flush()

            lease = Lease(
                property_id=prop.id,
                landlord_id=DEMO_USER_ID,
                tenant_id="demo-tenant",
                monthly_rent=Decimal("2650"),
                start_date=date(2024, 5, 1),
                end_date=date(2026, 4, 30),
            )
            db.add(lease)
            db.flush()

            for month in range(1, 13):
                due = date(2025, month, 1)
                db.add(
                    RentPayment(
                        lease_id=lease.id,
                        due_date=due,
                        amount=Decimal("2650"),
                        status="PAID",
                        paid_amount=Decimal("2650"),
                        paid_at=datetime.combine(due, datetime.min.time()) + timedelta(days=3),
                    )
                )

            for category, amount, day in [
                ("TAXES", "6930", date(2025, 1, 31)),
                ("INSURANCE", "1840", date(2025, 3, 15)),
                ("MAINTENANCE", "2200", date(2025, 7, 9)),
                ("MANAGEMENT_FEES", "3180", date(2025, 12, 20)),
            ]:
                db.add(
                    Expense(
                        landlord_id=DEMO_USER_ID,
                        property_id=prop.id,
                        category=category,
                        amount=Decimal(amount),
                        expense_date=datetime.combine(day, datetime.min.time()),
                    )
                )

            db.commit()
            print(f"Created property: {prop.title} (ID: {prop.id})")

        existing = portfolio_service.list_portfolios(db, DEMO_USER_ID)
        if existing:
            portfolio = existing[0]
            print(f"Demo portfolio already exists (ID: {portfolio.id})")
        else:
            portfolio = portfolio_service.create_portfolio(
                db, DEMO_USER_ID, "Austin Rentals", "Long-term buy and hold"
            )
            portfolio = portfolio_service.add_property(
                db,
                portfolio.id,
                DEMO_USER_ID,
                {
                    "property_id": prop.id,
                    "purchase_price": Decimal("372000"),
                    "purchase_date": date(2024, 4, 18),
                    "down_payment": Decimal("74400"),
                    "closing_costs": Decimal("9300"),
                    "renovation_costs": Decimal("12500"),
                    "loan_amount": Decimal("297600"),
                    "interest_rate": Decimal("6.875"),
                    "loan_term_years": 30,
                    "monthly_rent": Decimal("2650"),
                    "depreciation_type": "RESIDENTIAL_MULTI",
                    "land_value": Decimal("81000"),
                },
            )
            print(f"Created portfolio: {portfolio.name} (ID: {portfolio.id})")

        print(f"  Total value: {portfolio.total_value}")
        print(f"  Annual cash flow: {portfolio.cash_flow}")
        print(f"  Cash on cash: {portfolio.cash_on_cash}%")

        token = create_access_token({"sub": DEMO_USER_ID}, expires_delta=timedelta(days=7))
        print(f"\nBearer token for {DEMO_USER_ID}:\n{token}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
