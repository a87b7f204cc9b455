"""
Drug cost estimates and drug detail persistence.

Pricing is a static lookup (no I/O): names are trimmed and lowercased before
matching, anything unknown gets DEFAULT_PRICING. Amounts are whole dollars.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import RemoteError, ValidationError
from models.drug import DrugDetail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrugPricing:
    drug_name: str
    weekly: int
    monthly: int
    yearly: int


DRUG_PRICE_MAP = {
    "aspirin": (5, 20, 200),
    "ibuprofen": (8, 30, 300),
    "metformin": (15, 60, 600),
    "lisinopril": (12, 45, 450),
    "atorvastatin": (20, 75, 750),
    "omeprazole": (10, 40, 400),
    "losartan": (18, 70, 700),
    "amlodipine": (14, 55, 550),
    "metoprolol": (16, 65, 650),
    "albuterol": (25, 95, 950),
}

DEFAULT_PRICING = (10, 40, 400)

# Selector labels, in the order patients see them
COMMON_DRUGS = [name.capitalize() for name in DRUG_PRICE_MAP]


def normalize_drug_name(drug_name: str) -> str:
    return (drug_name or "").strip().lower()


def get_drug_pricing(drug_name: str) -> DrugPricing:
    weekly, monthly, yearly = DRUG_PRICE_MAP.get(normalize_drug_name(drug_name), DEFAULT_PRICING)
    return DrugPricing(drug_name=drug_name, weekly=weekly, monthly=monthly, yearly=yearly)


def search_drugs(term: str) -> list:
    """Suggestions for the drug search box.

    Common drugs containing the term, followed by the typed text itself so an
    unlisted drug can still be picked.
    """
    query = normalize_drug_name(term)
    if not query:
        return list(COMMON_DRUGS)

    matches = [d for d in COMMON_DRUGS if query in d.lower()]
    typed = term.strip()
    if typed.lower() not in (m.lower() for m in matches):
        matches.append(typed)
    return matches


# ------------------------------------------
# Persistence
# ------------------------------------------
def save_drug_details(db: Session, user_id, drug_name: str):
    drug_name = (drug_name or "").strip()
    if not drug_name:
        raise ValidationError("Please select or enter a drug name.")

    detail = DrugDetail(user_id=user_id, drug_name=drug_name)
    try:
        db.add(detail)
        db.commit()
        db.refresh(detail)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save drug details for user %s", user_id)
        raise RemoteError("Could not save drug details") from exc

    return detail


def save_drug_with_pricing(db: Session, user_id, drug_name: str) -> DrugPricing:
    detail = save_drug_details(db, user_id, drug_name)
    return get_drug_pricing(detail.drug_name)
