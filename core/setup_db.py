# core/setup_db.py

import logging

from core.database import Base, engine, get_db_context
from core.logging_config import configure_logging
from models import Clinic, Program, Provider
from services.user_service import ensure_default_users

logger = logging.getLogger(__name__)

DEFAULT_PROGRAMS = [
    {
        "name": "Cardiovascular Copay Relief",
        "sponsor": "CareBridge Foundation",
        "monetary_cap": "$3,500 per year",
        "description": "Covers copays for statins, beta blockers and ACE inhibitors.",
        "enrollment_link": "https://portal.copays.org/#/register",
    },
    {
        "name": "Diabetes Medication Assistance",
        "sponsor": "Helping Hands Health Fund",
        "monetary_cap": "$5,000 per year",
        "description": "Helps with out-of-pocket costs for oral diabetes medication.",
        "enrollment_link": "https://portal.copays.org/#/register",
    },
    {
        "name": "Respiratory Care Support",
        "sponsor": "Open Air Patient Alliance",
        "monetary_cap": "$2,000 per year",
        "description": "Copay support for rescue and maintenance inhalers.",
        "enrollment_link": "https://portal.copays.org/#/register",
    },
]

DEFAULT_CLINICS = ["Downtown Family Clinic", "Lakeside Medical Center", "Northside Health"]

DEFAULT_PROVIDERS = [
    {
        "name": "Dr. Alice Moreno",
        "specialty": "Cardiology",
        "contact_email": "amoreno@lakeside.example",
        "contact_phone": "555-0142",
        "address": "12 Harbor Way, Lakeside",
        "npi_number": "1234567893",
    },
    {
        "name": "Dr. Ben Okafor",
        "specialty": "Endocrinology",
        "contact_phone": "555-0177",
    },
    {"name": "Dr. Chen Liu"},
]


def seed_catalogs(db):
    """Insert programs, clinics and providers into empty tables."""
    if not db.query(Program).first():
        db.add_all(Program(**row) for row in DEFAULT_PROGRAMS)
    if not db.query(Clinic).first():
        db.add_all(Clinic(name=name) for name in DEFAULT_CLINICS)
    if not db.query(Provider).first():
        db.add_all(Provider(**row) for row in DEFAULT_PROVIDERS)
    db.commit()


def init_db():
    Base.metadata.create_all(bind=engine)
    with get_db_context() as db:
        seed_catalogs(db)
        ensure_default_users(db=db)


def main():
    configure_logging()
    logger.info("Creating database tables...")
    init_db()
    logger.info("Database initialized successfully.")


if __name__ == "__main__":
    main()
