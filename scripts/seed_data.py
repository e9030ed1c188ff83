"""Seed the database with sample dashboard achievement rates.

The target database is taken from ``DATABASE_URL``.  Rows are only inserted
when the ``achievement_rates`` table is empty, so the script can be run
repeatedly.
"""

from datetime import datetime

from hsportal.config import load_config
from hsportal.models import AchievementRate, Database

SAMPLE_RATES = [
    ("Certificates renewed on time", 40, 36, "2024-Q1", datetime(2024, 1, 15)),
    ("COSHH sheets reviewed", 25, 20, "2024-Q1", datetime(2024, 2, 10)),
    ("Risk assessments signed off", 60, 57, "2024-Q1", datetime(2024, 3, 5)),
    ("Manuals acknowledged", 120, 96, "2024-Q2", datetime(2024, 4, 22)),
]


def seed_achievement_rates(session) -> int:
    """Insert the sample rows if none exist and return how many were added."""
    if session.query(AchievementRate).first():
        return 0
    for title, target, achieved, period, created in SAMPLE_RATES:
        session.add(
            AchievementRate(
                title=title,
                target=target,
                achieved=achieved,
                rate=round(achieved / target * 100, 2),
                period=period,
                created_at=created,
                updated_at=created,
            )
        )
    return len(SAMPLE_RATES)


def seed(database_url=None) -> None:
    """Create tables if needed and seed default data."""
    url = database_url or load_config()["DATABASE_URL"]
    database = Database(url)
    database.create_all()

    session = database.session()
    try:
        seed_achievement_rates(session)
        session.commit()
    finally:
        session.close()
        database.dispose()


if __name__ == "__main__":
    seed()
