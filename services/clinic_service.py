from sqlalchemy.orm import Session

from services.association_service import clinic_associations


# ------------------------------------------
# Catalog
# ------------------------------------------
def get_all_clinics(db: Session):
    return clinic_associations.list_catalog(db)


def create_clinic(db: Session, name: str):
    return clinic_associations.create(db, name)


# ------------------------------------------
# Membership
# ------------------------------------------
def get_user_clinics(db: Session, user_id) -> set:
    return clinic_associations.list_membership(db, user_id)


def add_clinic_to_user(db: Session, user_id, clinic_id) -> bool:
    return clinic_associations.add(db, user_id, clinic_id)


def remove_clinic_from_user(db: Session, user_id, clinic_id) -> bool:
    return clinic_associations.remove(db, user_id, clinic_id)


def create_and_add_clinic(db: Session, user_id, name: str):
    return clinic_associations.create_and_add(db, user_id, name)
