# backend/tutorbook/init_db.py
"""
Create the schema directly from the models, optionally with demo data.

Alembic owns production schema; this is for local databases. On PostgreSQL
the sessions no-overlap exclusion constraint is created here as well.

Usage:
    python -m tutorbook.init_db [--seed]
"""

import argparse
from datetime import time
from decimal import Decimal

from .database import Base, SessionLocal, engine
from .models import AvailabilityRule, Subject, Topic, TutorProfile


def create_tables() -> None:
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created successfully!")


def seed_demo_data() -> None:
    db = SessionLocal()
    try:
        if db.query(TutorProfile).count():
            print("Demo data already present, skipping seed")
            return

        math = Subject(name="Mathematics")
        math.topics = [Topic(name="Algebra"), Topic(name="Geometry")]
        db.add_all([math, Subject(name="Chemistry")])

        tutor = TutorProfile(display_name="Demo Tutor", hourly_rate=Decimal("30.00"))
        tutor.availability_rules = [
            AvailabilityRule(day_of_week=day, start_time=time(9, 0), end_time=time(12, 0))
            for day in ("Mon", "Tue", "Wed", "Thu", "Fri")
        ]
        db.add(tutor)
        db.commit()
        print(f"✅ Seeded tutor {tutor.id} and subject {math.id}")
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create TutorBook tables")
    parser.add_argument("--seed", action="store_true", help="Insert a demo tutor and subjects")
    args = parser.parse_args()

    create_tables()
    if args.seed:
        seed_demo_data()


if __name__ == "__main__":
    main()
