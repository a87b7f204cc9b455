"""
User <-> catalog membership (clinics, providers).

The catalog table is shared by every user; the link table holds one row per
(user, catalog item). Membership is managed independently of the catalog's
own rows: removing a link never deletes the catalog item.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import NotFoundError, RemoteError, ValidationError
from models.clinic import Clinic, UserClinic
from models.provider import Provider, UserProvider

logger = logging.getLogger(__name__)


class AssociationSet:
    def __init__(self, catalog_model, link_model, link_column: str):
        self.catalog_model = catalog_model
        self.link_model = link_model
        self.link_column = link_column
        self.label = catalog_model.__tablename__

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _link_fk(self):
        return getattr(self.link_model, self.link_column)

    def _link_query(self, db: Session, user_id, item_id):
        return db.query(self.link_model).filter(
            self.link_model.user_id == user_id,
            self._link_fk() == item_id,
        )

    def _fail(self, db: Session, action: str) -> RemoteError:
        db.rollback()
        logger.exception("Failed to %s (%s)", action, self.label)
        return RemoteError(f"Could not {action}")

    # -----------------------------
    # Catalog
    # -----------------------------
    def list_catalog(self, db: Session):
        """All catalog rows, alphabetical by name."""
        try:
            return db.query(self.catalog_model).order_by(self.catalog_model.name).all()
        except SQLAlchemyError as exc:
            raise self._fail(db, "load catalog") from exc

    def get_item(self, db: Session, item_id):
        try:
            return db.query(self.catalog_model).filter(self.catalog_model.id == item_id).first()
        except SQLAlchemyError as exc:
            raise self._fail(db, "load catalog item") from exc

    def create(self, db: Session, name: str):
        """Insert a catalog row. The name is trimmed and must not be empty."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty.")

        item = self.catalog_model(name=name)
        try:
            db.add(item)
            db.commit()
            db.refresh(item)
        except SQLAlchemyError as exc:
            raise self._fail(db, "create catalog item") from exc

        logger.info("Created %s row %s (%r)", self.label, item.id, name)
        return item

    # -----------------------------
    # Membership
    # -----------------------------
    def list_membership(self, db: Session, user_id) -> set:
        """Catalog ids currently linked to the user. No ordering."""
        if not user_id:
            return set()
        try:
            rows = db.query(self._link_fk()).filter(self.link_model.user_id == user_id).all()
        except SQLAlchemyError as exc:
            raise self._fail(db, "load membership") from exc
        return {row[0] for row in rows}

    def add(self, db: Session, user_id, item_id) -> bool:
        """Link the user to the item.

        Returns False without writing when the link already exists.
        """
        if not user_id:
            return False

        if self.get_item(db, item_id) is None:
            raise NotFoundError(f"Unknown {self.label} id {item_id}")

        try:
            if self._link_query(db, user_id, item_id).first() is not None:
                return False

            link = self.link_model(user_id=user_id, **{self.link_column: item_id})
            db.add(link)
            db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(db, "add membership") from exc

        logger.info("User %s added %s %s", user_id, self.label, item_id)
        return True

    def remove(self, db: Session, user_id, item_id) -> bool:
        """Delete the link if present. Removing a non-member is a no-op."""
        if not user_id:
            return False
        try:
            deleted = self._link_query(db, user_id, item_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(db, "remove membership") from exc

        if deleted:
            logger.info("User %s removed %s %s", user_id, self.label, item_id)
        return bool(deleted)

    def create_and_add(self, db: Session, user_id, name: str):
        """Create a catalog row, then link it to the user.

        The two writes commit separately: if the link fails the new catalog
        row is kept without an owner.
        """
        if not user_id:
            return None
        item = self.create(db, name)
        self.add(db, user_id, item.id)
        return item


clinic_associations = AssociationSet(Clinic, UserClinic, "clinic_id")
provider_associations = AssociationSet(Provider, UserProvider, "provider_id")
