from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from services.association_service import provider_associations


@dataclass(frozen=True)
class ProviderDetails:
    """Display record for a provider. Every contact field is optional."""

    id: int
    name: str
    specialty: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    npi_number: Optional[str] = None

    LABELS = (
        ("specialty", "Specialty"),
        ("contact_email", "Email"),
        ("contact_phone", "Phone"),
        ("address", "Address"),
        ("npi_number", "NPI"),
    )

    @classmethod
    def from_provider(cls, provider) -> "ProviderDetails":
        return cls(
            id=provider.id,
            name=provider.name,
            specialty=provider.specialty,
            contact_email=provider.contact_email,
            contact_phone=provider.contact_phone,
            address=provider.address,
            npi_number=provider.npi_number,
        )

    def display_fields(self):
        """(label, value) pairs for the populated fields, name first."""
        fields = [("Name", self.name)]
        for attr, label in self.LABELS:
            value = getattr(self, attr)
            if value is not None and str(value).strip():
                fields.append((label, value))
        return fields


# ------------------------------------------
# Catalog
# ------------------------------------------
def get_all_providers(db: Session):
    return provider_associations.list_catalog(db)


def create_provider(db: Session, name: str):
    return provider_associations.create(db, name)


def get_provider_details(db: Session, provider_id) -> Optional[ProviderDetails]:
    provider = provider_associations.get_item(db, provider_id)
    if provider is None:
        return None
    return ProviderDetails.from_provider(provider)


# ------------------------------------------
# Membership
# ------------------------------------------
def get_user_providers(db: Session, user_id) -> set:
    return provider_associations.list_membership(db, user_id)


def add_provider_to_user(db: Session, user_id, provider_id) -> bool:
    return provider_associations.add(db, user_id, provider_id)


def remove_provider_from_user(db: Session, user_id, provider_id) -> bool:
    return provider_associations.remove(db, user_id, provider_id)


def create_and_add_provider(db: Session, user_id, name: str):
    return provider_associations.create_and_add(db, user_id, name)
