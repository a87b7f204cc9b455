import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.database import get_db_context
from core.auth import verify_password, hash_password
from core.errors import ConflictError, RemoteError, ValidationError
from models.user import User

logger = logging.getLogger(__name__)


def _fail(db, action: str) -> RemoteError:
    db.rollback()
    logger.exception("Failed to %s", action)
    return RemoteError(f"Could not {action}")


def authenticate_user(username: str, password: str, db=None):
    """Return the user when username/password match, otherwise None."""
    if db is None:
        with get_db_context() as _db:
            return authenticate_user(username, password, db=_db)

    username = (username or "").strip()
    try:
        user = db.query(User).filter(User.username == username).first()
    except SQLAlchemyError as exc:
        raise _fail(db, "look up user") from exc
    if not user:
        return None
    if not verify_password(password or "", user.password_hash or ""):
        logger.info("Rejected login for %s", username)
        return None
    return user


def create_user(username: str, password: str, *, full_name: str | None = None, db=None):
    """Create a new patient account.

    - username: unique, surrounding whitespace ignored
    - password: raw password, will be hashed with bcrypt
    - full_name: optional display name
    """
    if db is None:
        with get_db_context() as _db:
            return create_user(username, password, full_name=full_name, db=_db)

    username = (username or "").strip()
    if not username:
        raise ValidationError("Username cannot be empty.")
    if not password:
        raise ValidationError("Password cannot be empty.")

    try:
        if db.query(User).filter(User.username == username).first():
            raise ConflictError("Username already exists.")

        user = User(username=username, password_hash=hash_password(password), full_name=(full_name or "").strip() or None)
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # lost a race on the unique username
        db.rollback()
        raise ConflictError("Username already exists.") from exc
    except SQLAlchemyError as exc:
        raise _fail(db, "create user") from exc
    logger.info("Created user %s", username)
    return user


def ensure_default_users(db=None):
    """
    Creates the demo patient account on a fresh database.
    """
    if db is None:
        with get_db_context() as _db:
            return ensure_default_users(db=_db)

    # If any users already exist, skip
    if db.query(User).first():
        return

    db.add(User(username="patient1", password_hash=hash_password("pass123"), full_name="Demo Patient"))
    db.commit()
    logger.info("Default demo user created.")
