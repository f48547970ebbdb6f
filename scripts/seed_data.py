"""Seed script to populate the database with a demo host and a few stays."""

from datetime import date, timedelta

from staybill.core.database import Base, SessionLocal, engine
from staybill.models import associations  # noqa: F401
from staybill.models.enums import SettlementMode
from staybill.models.property import Property
from staybill.models.user import User
from staybill.schemas.property import PropertyCreate
from staybill.schemas.stay import EntryReadings, StayCreate, StayExit
from staybill.services.auth import get_password_hash
from staybill.services.property import create_property
from staybill.services.stay import complete_stay, create_stay, mark_paid


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # Check if data already exists
        if db.query(Property).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        host = User(
            username="demo",
            email="demo@example.com",
            full_name="Demo Host",
            phone_number="+5511988887777",
            payment_key="demo@pix.example",
            hashed_password=get_password_hash("demopassword"),
        )
        db.add(host)
        db.commit()
        db.refresh(host)
        print(f"Created host: {host.username} (password: demopassword)")

        beach_house = create_property(
            db,
            host,
            PropertyCreate(
                display_name="Beach House",
                city="Ubatuba",
                state="SP",
                tariff="1,10",
                settlement_mode=SettlementMode.SIMPLE,
            ),
        )
        solar_loft = create_property(
            db,
            host,
            PropertyCreate(
                display_name="Solar Loft",
                city="Florianópolis",
                state="SC",
                tariff="0,75",
                settlement_mode=SettlementMode.MONITORING,
            ),
        )
        print(f"Created properties: {beach_house.display_name}, {solar_loft.display_name}")

        # Four consecutive weekly stays at the beach house, meters carried over
        check_in = date.today() - timedelta(days=35)
        grid, export = 1000, 200
        for week, guest in enumerate(["Ana Souza", "Bruno Lima", "Carla Dias", "Diego Alves"]):
            stay = create_stay(
                db,
                beach_house.id,
                host,
                StayCreate(
                    guest_name=guest,
                    guest_phone=f"11 9{week}000-000{week}",
                    check_in_date=check_in,
                    entry=EntryReadings(code03_entry=str(grid), code103_entry=str(export)),
                ),
            )
            grid += 40 + 5 * week
            export += 10 + week
            check_in += timedelta(days=7)
            if week == 3:
                break  # The last guest is still in the house
            stay = complete_stay(
                db,
                stay.id,
                host,
                StayExit(
                    check_out_date=check_in,
                    code03_exit=str(grid),
                    code103_exit=str(export),
                ),
            )
            if week < 2:
                mark_paid(db, stay.id, host)

        print("Created 4 stays: 2 paid, 1 awaiting payment, 1 in progress")

        create_stay(
            db,
            solar_loft.id,
            host,
            StayCreate(
                guest_name="Elena Costa",
                check_in_date=date.today(),
                entry=EntryReadings(
                    code03_entry="5000", code103_entry="800", monitoring_entry="12000"
                ),
            ),
        )
        print("Created 1 monitoring stay in progress")

        print("\nSeed data created successfully!")
        print(f"\nBeach House ID: {beach_house.id}")
        print(f"Solar Loft ID: {solar_loft.id}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
